"""Service classes"""

from .account_service import AccountService
from .admin_service import AdminContentService
from .ai_client import ContentAIClient, ContentMetadata
from .catalog_browser import CatalogBrowser
from .catalog_service import CatalogPage, CatalogService, HomePage, WatchPage

__all__ = [
    "AccountService",
    "AdminContentService",
    "CatalogBrowser",
    "CatalogPage",
    "CatalogService",
    "ContentAIClient",
    "ContentMetadata",
    "HomePage",
    "WatchPage",
]
