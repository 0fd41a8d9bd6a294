"""Landing page sections derived from the full catalog."""
from dataclasses import dataclass, field
from typing import Sequence

from cineverse_catalog_service.catalog.filtering import SortKey, sort_items
from cineverse_catalog_service.catalog.schemas import ContentItem

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class HomeFeed:
    trending: list[ContentItem] = field(default_factory=list)
    movies: list[ContentItem] = field(default_factory=list)
    anime: list[ContentItem] = field(default_factory=list)
    hero: ContentItem | None = None

    def by_type(self, content_type: str) -> list[ContentItem]:
        if content_type == "movie":
            return self.movies
        if content_type == "anime":
            return self.anime
        raise ValueError(f"Unknown content type: {content_type}")


def aggregate(items: Sequence[ContentItem], limit: int = DEFAULT_LIMIT) -> HomeFeed:
    """
    Build the home feed.

    - trending: top ``limit`` by rating (missing rating = 0)
    - movies / anime: first ``limit`` of each type, in input order
    - hero: the top-rated item, or None for an empty catalog
    """
    by_rating = sort_items(items, SortKey.RATING_DESC)

    return HomeFeed(
        trending=by_rating[:limit],
        movies=[item for item in items if item.type == "movie"][:limit],
        anime=[item for item in items if item.type == "anime"][:limit],
        hero=by_rating[0] if by_rating else None,
    )
