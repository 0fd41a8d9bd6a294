"""Service for user profiles, roles and watchlists."""
from typing import List, Optional
import logging

from cineverse_catalog_service.catalog import ContentItem, UserProfile
from cineverse_catalog_service.exceptions import DocumentNotFoundError, PermissionDeniedError
from cineverse_catalog_service.models.database import SessionLocal
from cineverse_catalog_service.repos import ChangeFeed, ContentRepository, UserRepository
from cineverse_catalog_service.repos.content_repository import CONTENT_COLLECTION
from cineverse_catalog_service.services.ai_client import ContentAIClient

logger = logging.getLogger(__name__)


class AccountService:
    """
    Profile sync after sign-in, admin gating and watchlist management.
    Sign-in itself is handled by the external identity provider.
    """

    def __init__(self, ai_client: Optional[ContentAIClient] = None, change_feed: Optional[ChangeFeed] = None):
        self.ai_client = ai_client or ContentAIClient()
        self.change_feed = change_feed

    def sync_profile(
            self,
            uid: str,
            display_name: Optional[str],
            email: Optional[str],
            photo_url: Optional[str] = None
    ) -> UserProfile:
        """Create the profile on first sign-in, refresh it afterwards (role untouched)."""
        db = SessionLocal()
        try:
            return UserRepository(db, self.change_feed).sync_profile(uid, display_name, email, photo_url)
        finally:
            db.close()

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        db = SessionLocal()
        try:
            return UserRepository(db, self.change_feed).get_profile(uid)
        finally:
            db.close()

    def require_admin(self, uid: str) -> UserProfile:
        """
        Return the profile if the user is an admin.

        Raises:
            PermissionDeniedError: For unknown users and non-admins
        """
        profile = self.get_profile(uid)
        if profile is None or not profile.is_admin:
            logger.warning(f"Denied admin access to user {uid}")
            raise PermissionDeniedError("You do not have permission to view this page.")
        return profile

    def get_watchlist(self, uid: str) -> List[ContentItem]:
        db = SessionLocal()
        try:
            return UserRepository(db, self.change_feed).list_watchlist(uid)
        finally:
            db.close()

    def add_to_watchlist(self, uid: str, content_id: str) -> ContentItem:
        """
        Save a catalog item to the user's watchlist.

        Raises:
            DocumentNotFoundError: If the item is not in the catalog
        """
        db = SessionLocal()
        try:
            content = ContentRepository(db, self.change_feed).get_content(content_id)
            if content is None:
                raise DocumentNotFoundError(CONTENT_COLLECTION, content_id)
            UserRepository(db, self.change_feed).add_to_watchlist(uid, content)
            return content
        finally:
            db.close()

    def remove_from_watchlist(self, uid: str, content_id: str) -> bool:
        db = SessionLocal()
        try:
            return UserRepository(db, self.change_feed).remove_from_watchlist(uid, content_id)
        finally:
            db.close()

    def recommend_from_history(self, uid: str) -> Optional[List[ContentItem]]:
        """
        AI recommendations based on the user's watchlist.

        Only IDs that exist in the catalog are returned, in the order the
        model ranked them.

        Returns:
            Recommended items, or None if recommendations are unavailable
        """
        db = SessionLocal()
        try:
            history = UserRepository(db, self.change_feed).list_watchlist(uid)
            catalog = ContentRepository(db, self.change_feed).list_content()
        finally:
            db.close()

        ids = self.ai_client.recommend_content(
            viewing_history=[item.id for item in history],
            content_tags={item.id: item.tags for item in catalog},
        )
        if ids is None:
            return None

        by_id = {item.id: item for item in catalog}
        recommended = []
        seen = set()
        for content_id in ids:
            if content_id in by_id and content_id not in seen:
                recommended.append(by_id[content_id])
                seen.add(content_id)

        logger.info(f"✓ {len(recommended)} recommendations for user {uid}")
        return recommended
