"""SQLAlchemy models"""

from cineverse_catalog_service.models.base import Base
from cineverse_catalog_service.models.document import Document

__all__ = [
    "Base",
    "Document",
]
