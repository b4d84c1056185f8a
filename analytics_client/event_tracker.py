"""
Event Tracker

Main class for recording user-interaction events, keeping the read-side
aggregates (search history, popular searches, filter usage) and handing
events to the delivery client.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from .batching import DEFAULT_BATCH_DELAY_SECONDS, DEFAULT_BATCH_SIZE, BatchQueue
from .context import Clock, LocationProvider, StaticLocation, SystemClock, format_timestamp
from .delivery import AnalyticsClient
from .event_types import EventType, SearchType
from .models import Event, FilterEvent, PopularSearch, SearchEvent
from .scheduling import Scheduler

logger = logging.getLogger(__name__)


class EventTracker:
    """In-memory event log with best-effort delivery to the collector.

    One instance is created per session and passed to the page helpers that
    need it. Every ``track_*`` call commits its state change before any
    network work starts and never raises.
    """

    def __init__(
        self,
        client: AnalyticsClient,
        clock: Optional[Clock] = None,
        location: Optional[LocationProvider] = None,
        scheduler: Optional[Scheduler] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ):
        """Initialize the event tracker.

        Args:
            client: Delivery client used for both delivery paths
            clock: Source of event timestamps
            location: Source of the current page path and URL
            scheduler: Scheduler arming the batch delay timer
            batch_size: Pending batch size that triggers an immediate flush
            batch_delay_seconds: Delay after the first queued event before a flush
        """
        self.client = client
        self.clock = clock or SystemClock()
        self.location = location or StaticLocation()

        self._lock = threading.RLock()
        self._events: List[Event] = []
        self._search_history: List[str] = []
        self._search_counts: Dict[str, int] = {}

        self._batch = BatchQueue(
            sink=self.client.submit_batch,
            scheduler=scheduler,
            clock=self.clock,
            max_size=batch_size,
            delay_seconds=batch_delay_seconds,
        )

    @property
    def events(self) -> List[Event]:
        """Copy of every event recorded this session."""
        with self._lock:
            return list(self._events)

    @property
    def batch(self) -> BatchQueue:
        return self._batch

    def _new_event(self, event_type: EventType, properties: Dict[str, Any]) -> Event:
        return Event(
            event=event_type.value,
            timestamp=format_timestamp(self.clock.now()),
            properties=properties,
        )

    def _record(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)

    def _send(self, event: Event) -> None:
        try:
            self.client.submit_event(event)
        except Exception as e:
            logger.debug(f"Analytics error: {e}")

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def track_search(
        self,
        query: str,
        results_count: Optional[int] = None,
        search_type: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Track a search and update history and popularity counts."""
        self.track_search_event(SearchEvent(
            query=query,
            results_count=results_count,
            search_type=search_type,
            filters=filters,
        ))

    def track_search_event(self, search: SearchEvent) -> None:
        """Track a search described by a ``SearchEvent`` payload."""
        event = self._new_event(EventType.SEARCH, {
            "query": search.query,
            "resultsCount": search.results_count,
            "searchType": search.search_type or SearchType.GLOBAL.value,
            "filters": search.filters,
        })

        with self._lock:
            self._events.append(event)
            self._search_history.append(search.query)
            self._search_counts[search.query] = self._search_counts.get(search.query, 0) + 1

        self._send(event)

    def track_filter(self, filter_type: str, filter_value: Any, page: Optional[str] = None) -> None:
        """Track a filter being applied; ``page`` defaults to the current path."""
        self.track_filter_event(FilterEvent(
            filter_type=filter_type,
            filter_value=filter_value,
            page=page,
        ))

    def track_filter_event(self, applied: FilterEvent) -> None:
        """Track a filter described by a ``FilterEvent`` payload."""
        event = self._new_event(EventType.FILTER_APPLIED, {
            "filterType": applied.filter_type,
            "filterValue": applied.filter_value,
            "page": applied.page or self.location.pathname(),
        })
        self._record(event)
        self._send(event)

    def track_page_view(self, page: str, properties: Optional[Dict[str, Any]] = None) -> None:
        event = self._new_event(EventType.PAGE_VIEW, {"page": page, **(properties or {})})
        self._record(event)
        self._send(event)

    def track_pagination(self, page: int, items_per_page: int, total_items: int) -> None:
        event = self._new_event(EventType.PAGINATION, {
            "page": page,
            "itemsPerPage": items_per_page,
            "totalItems": total_items,
            "url": self.location.href(),
        })
        self._record(event)
        self._send(event)

    def track_download(self, download_id: str, download_name: str) -> None:
        event = self._new_event(EventType.DOWNLOAD_CLICK, {
            "downloadId": download_id,
            "downloadName": download_name,
        })
        self._record(event)
        self._send(event)

    # ------------------------------------------------------------------
    # Batched delivery
    # ------------------------------------------------------------------

    def queue_event(self, event: Event) -> None:
        """Hand an event to the batched delivery path."""
        self._batch.enqueue(event)

    def flush_batch(self) -> int:
        """Send the pending batch now.

        Returns:
            Number of events flushed
        """
        return self._batch.flush()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_search_history(self, limit: int = 10) -> List[str]:
        """Get the most recent queries, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            return self._search_history[-limit:]

    def get_popular_searches(self, limit: int = 10) -> List[PopularSearch]:
        """Get queries ranked by how often they were searched.

        Queries with equal counts keep the order they were first searched in.
        """
        if limit <= 0:
            return []
        with self._lock:
            counts = list(self._search_counts.items())

        ranked = sorted(counts, key=lambda item: item[1], reverse=True)
        return [PopularSearch(query=query, count=count) for query, count in ranked[:limit]]

    def get_filter_usage_stats(self) -> Dict[str, int]:
        """Count applied filters per filter type by scanning the event log."""
        stats: Dict[str, int] = {}
        for event in self.events:
            if event.event != EventType.FILTER_APPLIED.value:
                continue
            filter_type = event.properties.get("filterType")
            if filter_type:
                stats[filter_type] = stats.get(filter_type, 0) + 1
        return stats
