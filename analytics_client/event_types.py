"""
Event Types for the Analytics Client

Defines all interaction event kinds the site reports to the collector.
"""

from enum import Enum


class EventType(Enum):
    """Allowed event types for tracking."""

    # Catalog and blog discovery
    SEARCH = "search"
    FILTER_APPLIED = "filter_applied"

    # Navigation events
    PAGE_VIEW = "page_view"
    PAGINATION = "pagination"

    # Expert Advisor downloads
    DOWNLOAD_CLICK = "download_click"

    @classmethod
    def is_valid(cls, event_type: str) -> bool:
        """Check if an event type string is valid."""
        try:
            cls(event_type)
            return True
        except ValueError:
            return False

    @classmethod
    def get_allowed_types(cls) -> set[str]:
        """Get all allowed event type strings."""
        return {e.value for e in cls}


class SearchType(Enum):
    """Which part of the site a search was issued from."""

    GLOBAL = "global"
    BLOG = "blog"
    DOWNLOADS = "downloads"
