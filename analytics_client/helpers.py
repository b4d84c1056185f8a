"""
Page-level tracking helpers.

Small adapters the catalog, blog and signals pages use so they do not have
to work out search types or page paths themselves.
"""

from typing import Any, Dict, Optional

from .context import LocationProvider
from .event_tracker import EventTracker
from .event_types import SearchType


def search_type_for_path(path: str) -> str:
    """Map a page path to the search type reported with its searches."""
    if "/blog" in path:
        return SearchType.BLOG.value
    if "/downloads" in path:
        return SearchType.DOWNLOADS.value
    return SearchType.GLOBAL.value


class SearchAnalytics:
    """Search tracking for a search box on the current page."""

    def __init__(self, tracker: EventTracker, location: Optional[LocationProvider] = None):
        self.tracker = tracker
        self.location = location or tracker.location

    def track_search(
        self,
        query: str,
        results_count: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.tracker.track_search(
            query,
            results_count=results_count,
            search_type=search_type_for_path(self.location.pathname()),
            filters=filters,
        )


class FilterAnalytics:
    """Filter tracking attributed to the current page."""

    def __init__(self, tracker: EventTracker, location: Optional[LocationProvider] = None):
        self.tracker = tracker
        self.location = location or tracker.location

    def track_filter(self, filter_type: str, filter_value: Any) -> None:
        self.tracker.track_filter(filter_type, filter_value, page=self.location.pathname())


class PaginationAnalytics:
    """Pagination tracking for paged lists."""

    def __init__(self, tracker: EventTracker):
        self.tracker = tracker

    def track_pagination(self, page: int, items_per_page: int, total_items: int) -> None:
        self.tracker.track_pagination(page, items_per_page, total_items)
