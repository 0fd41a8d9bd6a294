"""Pure catalog derivations: filtering, recommendations, home feed, forms."""

from .debounce import Debouncer, debounce
from .filtering import BrowseResult, FilterCriteria, FilterOptions, SortKey, browse, derive, filter_options
from .forms import ContentForm, parse_content_form, split_csv
from .home import HomeFeed, aggregate
from .recommendations import recommend
from .schemas import ContentItem, Episode, UserProfile

__all__ = [
    "BrowseResult",
    "ContentForm",
    "ContentItem",
    "Debouncer",
    "Episode",
    "FilterCriteria",
    "FilterOptions",
    "HomeFeed",
    "SortKey",
    "UserProfile",
    "aggregate",
    "browse",
    "debounce",
    "derive",
    "filter_options",
    "parse_content_form",
    "recommend",
    "split_csv",
]
