"""Live catalog section view with debounced search."""
import dataclasses
import logging
import threading
from typing import Callable, List, Optional

from cineverse_catalog_service.catalog import BrowseResult, ContentItem, Debouncer, FilterCriteria, SortKey, browse
from cineverse_catalog_service.config import get_search_debounce_ms
from cineverse_catalog_service.exceptions import LoadError
from cineverse_catalog_service.repos import ContentRepository

logger = logging.getLogger(__name__)


class CatalogBrowser:
    """
    Keeps a filtered view of one catalog section up to date.

    The browser subscribes to the content collection and re-derives its
    result whenever the snapshot or the criteria change. Search text goes
    through a ``Debouncer``; genre, year and sort changes apply at once.
    Criteria are immutable; each change swaps in a new ``FilterCriteria``.

    Change notifications run in the writer's thread and reload the snapshot
    through the repository's session. SQLAlchemy sessions are not thread-safe,
    so writes to the content collection must happen on the thread that owns
    that session.

    Args:
        repository: Content repository (its session must outlive the browser)
        on_results: Called with every new ``BrowseResult``
        content_type: Section to browse ("movie"/"anime"), or None for all
        on_error: Called with a ``LoadError`` when the snapshot cannot be loaded
        debounce_ms: Search debounce interval (default from config)
        timer_factory: Timer factory passed to the ``Debouncer``
    """

    def __init__(
            self,
            repository: ContentRepository,
            on_results: Callable[[BrowseResult], None],
            content_type: Optional[str] = None,
            on_error: Optional[Callable[[LoadError], None]] = None,
            debounce_ms: Optional[int] = None,
            timer_factory: Callable = threading.Timer
    ):
        self.on_results = on_results
        self.on_error = on_error
        self.criteria = FilterCriteria(content_type=content_type)
        self.search_text = ""
        self.items: List[ContentItem] = []
        self.result = BrowseResult()
        self.loading = True
        self.error: Optional[LoadError] = None
        self.closed = False

        self._lock = threading.RLock()
        self._debouncer = Debouncer(
            debounce_ms if debounce_ms is not None else get_search_debounce_ms(),
            self._apply_search,
            timer_factory=timer_factory,
        )
        self._subscription = repository.subscribe_content(
            self._on_items,
            content_type=content_type,
            on_error=self._on_load_error,
        )

    # ===== SUBSCRIPTION CALLBACKS =====

    def _on_items(self, items: List[ContentItem]) -> None:
        with self._lock:
            if self.closed:
                return
            self.items = items
            self.loading = False
            self.error = None
        self._refresh()

    def _on_load_error(self, error: LoadError) -> None:
        with self._lock:
            if self.closed:
                return
            self.loading = False
            self.error = error
        logger.error(f"Catalog load failed: {error.message}")
        if self.on_error is not None:
            self.on_error(error)

    # ===== CRITERIA =====

    def set_search_text(self, text: str) -> None:
        """Update the search box; filtering follows after the quiet period."""
        self.search_text = text
        self._debouncer.push(text)

    def flush_search(self) -> bool:
        """Apply pending search text immediately."""
        return self._debouncer.flush()

    def _apply_search(self, text: str) -> None:
        self._update(search_text=text)

    def set_genre(self, genre: str) -> None:
        self._update(genre=genre)

    def set_year(self, year: str) -> None:
        self._update(year=year)

    def set_sort(self, sort_key: SortKey | str) -> None:
        self._update(sort_key=SortKey(sort_key))

    def _update(self, **changes) -> None:
        with self._lock:
            if self.closed:
                return
            self.criteria = dataclasses.replace(self.criteria, **changes)
        self._refresh()

    def _refresh(self) -> None:
        with self._lock:
            if self.closed:
                return
            self.result = browse(self.items, self.criteria)
            result = self.result
        self.on_results(result)

    # ===== LIFECYCLE =====

    def close(self) -> None:
        """Stop the subscription and drop any pending search text."""
        with self._lock:
            if self.closed:
                return
            self.closed = True
        self._subscription.unsubscribe()
        self._debouncer.cancel()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
