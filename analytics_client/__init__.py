"""
Analytics Client

Records search, filter, page-view, pagination and download events for the
site and delivers them to the analytics collector.
"""

from .batching import BatchQueue, BatchState
from .context import StaticLocation, SystemClock
from .delivery import AnalyticsClient
from .event_tracker import EventTracker
from .event_types import EventType, SearchType
from .factory import create_event_tracking_module
from .helpers import FilterAnalytics, PaginationAnalytics, SearchAnalytics, search_type_for_path
from .models import Event, FilterEvent, PopularSearch, SearchEvent
from .performance import measure_search_performance
from .scheduling import ThreadingScheduler

__all__ = [
    'AnalyticsClient',
    'BatchQueue',
    'BatchState',
    'Event',
    'EventTracker',
    'EventType',
    'FilterAnalytics',
    'FilterEvent',
    'PaginationAnalytics',
    'PopularSearch',
    'SearchAnalytics',
    'SearchEvent',
    'SearchType',
    'StaticLocation',
    'SystemClock',
    'ThreadingScheduler',
    'create_event_tracking_module',
    'measure_search_performance',
    'search_type_for_path',
]
