"""Filter and sort catalog items for a browse view.

All functions are pure: they take a snapshot of the catalog and return new
lists holding the same ``ContentItem`` objects. The source list is never
reordered or modified.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Sequence

from cineverse_catalog_service.catalog.schemas import CONTENT_TYPES, ContentItem
from cineverse_catalog_service.exceptions import InvalidCriteriaError

ALL = "all"


class SortKey(str, Enum):
    RATING_DESC = "rating-desc"
    RATING_ASC = "rating-asc"
    YEAR_DESC = "year-desc"
    YEAR_ASC = "year-asc"


@dataclass(frozen=True)
class FilterCriteria:
    """
    Immutable browse criteria.

    Attributes:
        content_type: Restrict to one catalog section ("movie"/"anime"), or None
        search_text: Case-insensitive title substring; empty means no search
        genre: Exact genre name, or "all"
        year: Year as a string, or "all"
        sort_key: Ordering applied after filtering
    """
    content_type: str | None = None
    search_text: str = ""
    genre: str = ALL
    year: str = ALL
    sort_key: SortKey = SortKey.RATING_DESC

    @classmethod
    def from_params(
            cls,
            params: Mapping[str, str],
            content_type: str | None = None
    ) -> "FilterCriteria":
        """
        Build criteria from request query parameters.

        Recognised keys: ``q``, ``genre``, ``year``, ``sort``.

        Raises:
            InvalidCriteriaError: For an unknown sort key or content type
        """
        if content_type is not None and content_type not in CONTENT_TYPES:
            raise InvalidCriteriaError(f"Unknown content type: {content_type}")

        sort_value = params.get('sort') or SortKey.RATING_DESC.value
        try:
            sort_key = SortKey(sort_value)
        except ValueError:
            valid = ", ".join(k.value for k in SortKey)
            raise InvalidCriteriaError(f"sort must be one of: {valid}")

        return cls(
            content_type=content_type,
            search_text=params.get('q') or "",
            genre=params.get('genre') or ALL,
            year=params.get('year') or ALL,
            sort_key=sort_key,
        )


@dataclass(frozen=True)
class FilterOptions:
    """Values offered in the genre and year drop-downs."""
    genres: list[str] = field(default_factory=list)
    years: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BrowseResult:
    items: list[ContentItem] = field(default_factory=list)
    options: FilterOptions = field(default_factory=FilterOptions)


def _scope(items: Iterable[ContentItem], content_type: str | None) -> list[ContentItem]:
    if content_type is None:
        return list(items)
    return [item for item in items if item.type == content_type]


def sort_items(items: Iterable[ContentItem], sort_key: SortKey) -> list[ContentItem]:
    """
    Return a new list ordered by ``sort_key``.

    Python's sort is stable (also with ``reverse=True``), so items with equal
    keys keep their relative input order.
    """
    if sort_key in (SortKey.RATING_DESC, SortKey.RATING_ASC):
        return sorted(
            items,
            key=lambda item: item.sort_rating,
            reverse=sort_key == SortKey.RATING_DESC,
        )
    return sorted(
        items,
        key=lambda item: item.year,
        reverse=sort_key == SortKey.YEAR_DESC,
    )


def derive(items: Sequence[ContentItem], criteria: FilterCriteria) -> list[ContentItem]:
    """
    Apply criteria to a catalog snapshot.

    Steps run in order: section scope, title search, genre, year, sort.

    Args:
        items: Catalog snapshot
        criteria: Browse criteria

    Returns:
        Ordered subset of ``items``
    """
    result = _scope(items, criteria.content_type)

    if criteria.search_text:
        needle = criteria.search_text.lower()
        result = [item for item in result if needle in item.title.lower()]

    if criteria.genre != ALL:
        result = [item for item in result if criteria.genre in item.genre]

    if criteria.year != ALL:
        result = [item for item in result if str(item.year) == criteria.year]

    return sort_items(result, criteria.sort_key)


def filter_options(items: Iterable[ContentItem]) -> FilterOptions:
    """
    Distinct genres (alphabetical, case-sensitive) and years (newest first).

    Computed over the unfiltered snapshot so the drop-downs always list every
    value in the catalog section.
    """
    items = list(items)
    genres = sorted({genre for item in items for genre in item.genre})
    years = sorted({str(item.year) for item in items}, key=int, reverse=True)
    return FilterOptions(genres=genres, years=years)


def browse(items: Sequence[ContentItem], criteria: FilterCriteria) -> BrowseResult:
    """Filtered items plus drop-down options for one catalog section."""
    section = _scope(items, criteria.content_type)
    return BrowseResult(
        items=derive(section, criteria),
        options=filter_options(section),
    )
