"""Service for catalog pages: section browse, home feed and watch page."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from cineverse_catalog_service.catalog import (
    ContentItem,
    Episode,
    FilterCriteria,
    HomeFeed,
    aggregate,
    browse,
    recommend,
)
from cineverse_catalog_service.config import get_section_limit
from cineverse_catalog_service.exceptions import LoadError
from cineverse_catalog_service.models.database import SessionLocal
from cineverse_catalog_service.repos import ChangeFeed, ContentRepository

logger = logging.getLogger(__name__)


def _items_json(items: List[ContentItem]) -> List[Dict]:
    return [item.to_json() for item in items]


@dataclass
class CatalogPage:
    content_type: str
    criteria: FilterCriteria
    items: List[ContentItem] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)
    years: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "type": self.content_type,
            "count": len(self.items),
            "items": _items_json(self.items),
            "filters": {
                "q": self.criteria.search_text,
                "genre": self.criteria.genre,
                "year": self.criteria.year,
                "sort": self.criteria.sort_key.value,
            },
            "options": {"genres": self.genres, "years": self.years},
        }


@dataclass
class HomePage:
    feed: HomeFeed = field(default_factory=HomeFeed)
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "hero": self.feed.hero.to_json() if self.feed.hero else None,
            "trending": _items_json(self.feed.trending),
            "anime": _items_json(self.feed.anime),
            "movies": _items_json(self.feed.movies),
        }


@dataclass
class WatchPage:
    content: ContentItem
    video_url: str
    episode_index: Optional[int] = None
    episode: Optional[Episode] = None
    recommended: List[ContentItem] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "content": self.content.to_json(),
            "videoUrl": self.video_url,
            "episodeIndex": self.episode_index,
            "episode": self.episode.model_dump(by_alias=True) if self.episode else None,
            "recommended": _items_json(self.recommended),
        }


class CatalogService:
    """
    Read-side service for catalog pages.
    Each call loads a fresh snapshot and derives its view from it.
    """

    def __init__(self, section_limit: Optional[int] = None, change_feed: Optional[ChangeFeed] = None):
        self.section_limit = section_limit or get_section_limit()
        self.change_feed = change_feed

    def _load(self, content_type: Optional[str] = None) -> List[ContentItem]:
        db = SessionLocal()
        try:
            return ContentRepository(db, self.change_feed).list_content(content_type)
        finally:
            db.close()

    def browse(self, content_type: str, criteria: FilterCriteria) -> CatalogPage:
        """
        Filtered, sorted items for one catalog section.

        Load failures are returned on ``CatalogPage.error``.
        """
        try:
            items = self._load(content_type)
        except LoadError as e:
            return CatalogPage(content_type=content_type, criteria=criteria, error=e.message)

        result = browse(items, criteria)
        logger.debug(f"Browse {content_type}: {len(result.items)}/{len(items)} items match")

        return CatalogPage(
            content_type=content_type,
            criteria=criteria,
            items=result.items,
            genres=result.options.genres,
            years=result.options.years,
        )

    def home(self) -> HomePage:
        """Trending, per-type sections and the hero item."""
        try:
            items = self._load()
        except LoadError as e:
            return HomePage(error=e.message)

        return HomePage(feed=aggregate(items, limit=self.section_limit))

    def watch(self, content_id: str, episode_index: Optional[int] = None) -> Optional[WatchPage]:
        """
        Data for the watch page.

        Episodic items play the requested episode; an out-of-range or missing
        index falls back to the first episode.

        Args:
            content_id: Catalog item ID
            episode_index: Zero-based episode index

        Returns:
            WatchPage, or None for an unknown ID

        Raises:
            LoadError: If the item itself cannot be loaded
        """
        db = SessionLocal()
        try:
            repo = ContentRepository(db, self.change_feed)
            content = repo.get_content(content_id)
            if content is None:
                return None

            try:
                same_type = repo.list_content(content.type)
            except LoadError as e:
                logger.warning(f"Could not load recommendations for {content_id}: {e.message}")
                same_type = []
        finally:
            db.close()

        index = None
        episode = None
        if content.is_episodic:
            index = episode_index if content.episode_at(episode_index) is not None else 0
            episode = content.episode_at(index)

        return WatchPage(
            content=content,
            video_url=content.resolve_video(index),
            episode_index=index,
            episode=episode,
            recommended=recommend(same_type, content.id, content.type, limit=self.section_limit),
        )
