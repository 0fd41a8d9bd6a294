"""Repository classes"""

from cineverse_catalog_service.repos.change_feed import ChangeFeed, Subscription
from cineverse_catalog_service.repos.content_repository import ContentRepository
from cineverse_catalog_service.repos.document_repository import DocumentRepository
from cineverse_catalog_service.repos.user_repository import UserRepository

__all__ = [
    "ChangeFeed",
    "ContentRepository",
    "DocumentRepository",
    "Subscription",
    "UserRepository",
]
