"""Service for admin content management (create, edit, delete)."""
from typing import Dict, List, Optional
import logging

from cineverse_catalog_service.catalog import ContentItem, parse_content_form
from cineverse_catalog_service.catalog.forms import form_values_from_content
from cineverse_catalog_service.models.database import SessionLocal
from cineverse_catalog_service.repos import ChangeFeed, ContentRepository
from cineverse_catalog_service.services.ai_client import ContentAIClient, ContentMetadata

logger = logging.getLogger(__name__)


class AdminContentService:
    """
    Write-side service for the admin panel.

    Form input is validated before any write, so an invalid submission
    never partially persists. Store failures raise ``DocumentWriteError``
    and nothing is retried.
    """

    def __init__(self, ai_client: Optional[ContentAIClient] = None, change_feed: Optional[ChangeFeed] = None):
        self.ai_client = ai_client or ContentAIClient()
        self.change_feed = change_feed

    def list_content(self) -> List[ContentItem]:
        """All catalog items in store order."""
        db = SessionLocal()
        try:
            return ContentRepository(db, self.change_feed).list_content()
        finally:
            db.close()

    def get_edit_form(self, content_id: str) -> Optional[Dict]:
        """Initial form values for editing an item, or None if unknown."""
        db = SessionLocal()
        try:
            content = ContentRepository(db, self.change_feed).get_content(content_id)
        finally:
            db.close()

        if content is None:
            return None
        return {"id": content.id, **form_values_from_content(content)}

    def create_content(self, payload: Dict) -> ContentItem:
        """
        Validate and store a new item.

        Raises:
            FormValidationError: Field-level errors; nothing is written
            DocumentWriteError: If the store rejects the write
        """
        form = parse_content_form(payload)

        db = SessionLocal()
        try:
            return ContentRepository(db, self.change_feed).create_content(form.to_document())
        finally:
            db.close()

    def update_content(self, content_id: str, payload: Dict) -> ContentItem:
        """
        Validate and store changes to an existing item.

        Raises:
            FormValidationError: Field-level errors; nothing is written
            DocumentNotFoundError: If the item does not exist
            DocumentWriteError: If the store rejects the write
        """
        form = parse_content_form(payload)

        db = SessionLocal()
        try:
            return ContentRepository(db, self.change_feed).update_content(content_id, form.to_document(clear_blank=True))
        finally:
            db.close()

    def delete_content(self, content_id: str) -> bool:
        """
        Delete an item.

        Returns:
            True if deleted, False if not found
        """
        db = SessionLocal()
        try:
            return ContentRepository(db, self.change_feed).delete_content(content_id)
        finally:
            db.close()

    def auto_fetch_metadata(self, video_url: str, title: str) -> Optional[ContentMetadata]:
        """AI-suggested duration, tags and description; None if unavailable."""
        return self.ai_client.fetch_content_metadata(video_url=video_url, title=title)
