"""Repository for user profiles and their watchlists."""

import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from cineverse_catalog_service.catalog.schemas import ContentItem, UserProfile
from cineverse_catalog_service.exceptions import LoadError
from cineverse_catalog_service.repos.change_feed import ChangeFeed
from cineverse_catalog_service.repos.content_repository import to_content_items
from cineverse_catalog_service.repos.document_repository import DocumentRepository

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
ROLES = ("user", "admin")


def watchlist_collection(uid: str) -> str:
    """Collection path of a user's watchlist."""
    return f"{USERS_COLLECTION}/{uid}/watchlist"


class UserRepository:
    """
    Profiles live at ``users/{uid}``; watchlist entries at
    ``users/{uid}/watchlist/{content_id}`` as copies of the content document.
    """

    def __init__(self, db: Session, change_feed: ChangeFeed | None = None):
        self.documents = DocumentRepository(db, change_feed)

    # ===== PROFILES =====

    def get_profile(self, uid: str) -> UserProfile | None:
        """Get a user's profile, or None if they have never signed in."""
        document = self.documents.get_document(USERS_COLLECTION, uid)
        if document is None:
            return None
        try:
            return UserProfile.model_validate(document)
        except ValidationError as e:
            raise LoadError(f"Profile {uid} is malformed: {e.error_count()} error(s)", USERS_COLLECTION) from e

    def sync_profile(
            self,
            uid: str,
            display_name: str | None,
            email: str | None,
            photo_url: str | None = None
    ) -> UserProfile:
        """
        Create or refresh a profile after sign-in.

        First sign-in creates the profile with role "user". Later sign-ins
        merge the identity fields and never write ``role``.
        """
        fields = {
            "displayName": display_name,
            "email": email,
            "photoURL": photo_url,
        }

        existing = self.documents.get_document(USERS_COLLECTION, uid)
        if existing is None:
            self.documents.set_document(USERS_COLLECTION, uid, {**fields, "role": "user"})
            logger.info(f"✓ Created profile for user {uid}")
        else:
            self.documents.set_document(USERS_COLLECTION, uid, fields, merge=True)

        return self.get_profile(uid)

    def set_role(self, uid: str, role: str) -> UserProfile:
        """
        Change a user's role.

        Raises:
            ValueError: For an unknown role
            DocumentNotFoundError: If the profile does not exist
        """
        if role not in ROLES:
            raise ValueError(f"role must be one of: {', '.join(ROLES)}")

        self.documents.update_document(USERS_COLLECTION, uid, {"role": role})
        logger.info(f"✓ Set role of user {uid} to {role}")
        return self.get_profile(uid)

    # ===== WATCHLIST =====

    def list_watchlist(self, uid: str) -> list[ContentItem]:
        """Get the items a user has saved, in the order they were added."""
        return to_content_items(self.documents.list_documents(watchlist_collection(uid)))

    def add_to_watchlist(self, uid: str, item: ContentItem) -> None:
        """Save an item (idempotent; re-adding refreshes the stored copy)."""
        self.documents.set_document(watchlist_collection(uid), item.id, item.to_document())

    def remove_from_watchlist(self, uid: str, content_id: str) -> bool:
        """
        Remove a saved item.

        Returns:
            True if removed, False if it was not saved
        """
        return self.documents.delete_document(watchlist_collection(uid), content_id)

    def in_watchlist(self, uid: str, content_id: str) -> bool:
        return self.documents.get_document(watchlist_collection(uid), content_id) is not None
