"""Select "you might also like" items for the watch page."""
from typing import Iterable

from cineverse_catalog_service.catalog.schemas import ContentItem

DEFAULT_LIMIT = 10


def recommend(
        items: Iterable[ContentItem],
        focal_id: str,
        focal_type: str,
        limit: int = DEFAULT_LIMIT
) -> list[ContentItem]:
    """
    Items of the same type as the focal item, excluding the focal item.

    Input order is preserved; callers pre-sort if they want a ranking.

    Args:
        items: Catalog snapshot
        focal_id: ID of the item being watched
        focal_type: Its content type
        limit: Maximum number of items returned

    Returns:
        At most ``limit`` items
    """
    if limit <= 0:
        return []

    selected = []
    for item in items:
        if item.type != focal_type or item.id == focal_id:
            continue
        selected.append(item)
        if len(selected) >= limit:
            break
    return selected
