"""Repository for catalog items in the ``content`` collection."""

import logging
from typing import Callable, Iterable, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from cineverse_catalog_service.catalog.schemas import ContentItem
from cineverse_catalog_service.exceptions import LoadError
from cineverse_catalog_service.repos.change_feed import ChangeFeed, Subscription
from cineverse_catalog_service.repos.document_repository import DocumentRepository

logger = logging.getLogger(__name__)

CONTENT_COLLECTION = "content"


def to_content_items(documents: Iterable[dict]) -> list[ContentItem]:
    """Parse documents, skipping (and logging) any that are malformed."""
    items = []
    for document in documents:
        try:
            items.append(ContentItem.model_validate(document))
        except ValidationError as e:
            logger.warning(f"Skipping malformed content document {document.get('id')}: {e.error_count()} error(s)")
    return items


class ContentRepository:
    """
    Typed access to catalog items.
    """

    def __init__(self, db: Session, change_feed: ChangeFeed | None = None):
        self.documents = DocumentRepository(db, change_feed)

    def list_content(self, content_type: str | None = None) -> list[ContentItem]:
        """
        Get all catalog items, optionally restricted to one type.

        Returns:
            Items in store order (callers sort as needed)
        """
        where = ("type", "==", content_type) if content_type else None
        return to_content_items(self.documents.list_documents(CONTENT_COLLECTION, where))

    def get_content(self, content_id: str) -> ContentItem | None:
        """Get one catalog item by ID."""
        document = self.documents.get_document(CONTENT_COLLECTION, content_id)
        if document is None:
            return None
        try:
            return ContentItem.model_validate(document)
        except ValidationError as e:
            logger.warning(f"Content document {content_id} is malformed: {e.error_count()} error(s)")
            return None

    def create_content(self, document: dict) -> ContentItem:
        """
        Store a new catalog item.

        Args:
            document: Persisted shape, e.g. from ``ContentForm.to_document()``

        Returns:
            The stored item with its generated ID
        """
        content_id = self.documents.add_document(CONTENT_COLLECTION, document)
        logger.info(f"✓ Created content {content_id} ({document.get('title')})")
        return ContentItem.model_validate({**document, "id": content_id})

    def import_content(self, content_id: str, document: dict) -> ContentItem:
        """Store a catalog item under a known ID (overwrites)."""
        self.documents.set_document(CONTENT_COLLECTION, content_id, document)
        return ContentItem.model_validate({**document, "id": content_id})

    def update_content(self, content_id: str, document: dict) -> ContentItem:
        """
        Update an existing catalog item.

        Raises:
            DocumentNotFoundError: If the item does not exist
        """
        self.documents.update_document(CONTENT_COLLECTION, content_id, document)
        logger.info(f"✓ Updated content {content_id}")
        stored = self.documents.get_document(CONTENT_COLLECTION, content_id)
        return ContentItem.model_validate(stored)

    def delete_content(self, content_id: str) -> bool:
        """
        Delete a catalog item.

        Returns:
            True if deleted, False if not found
        """
        deleted = self.documents.delete_document(CONTENT_COLLECTION, content_id)
        if deleted:
            logger.info(f"✓ Deleted content {content_id}")
        return deleted

    def clear_content(self) -> int:
        """Delete every catalog item."""
        return self.documents.delete_collection(CONTENT_COLLECTION)

    def count_content(self) -> int:
        return self.documents.count_documents(CONTENT_COLLECTION)

    def subscribe_content(
            self,
            on_items: Callable[[list[ContentItem]], None],
            content_type: str | None = None,
            on_error: Optional[Callable[[LoadError], None]] = None
    ) -> Subscription:
        """Watch the catalog; ``on_items`` receives parsed snapshots."""
        where = ("type", "==", content_type) if content_type else None
        return self.documents.subscribe(
            CONTENT_COLLECTION,
            lambda documents: on_items(to_content_items(documents)),
            where=where,
            on_error=on_error,
        )
