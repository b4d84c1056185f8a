"""
Factory for creating the event tracking module.
"""
from typing import Optional

import requests

from config_manager import AnalyticsConfig, get_analytics_config

from .context import Clock, LocationProvider
from .delivery import AnalyticsClient
from .event_tracker import EventTracker
from .helpers import FilterAnalytics, PaginationAnalytics, SearchAnalytics
from .scheduling import Scheduler


def create_event_tracking_module(
    analytics_config: Optional[AnalyticsConfig] = None,
    location: Optional[LocationProvider] = None,
    clock: Optional[Clock] = None,
    scheduler: Optional[Scheduler] = None,
    session: Optional[requests.Session] = None,
) -> dict:
    """Create the session's event tracker and its page helpers.

    Args:
        analytics_config: Delivery and batching settings (loaded from config if omitted)
        location: Provider of the current page location
        clock: Clock for timestamps and durations
        scheduler: Scheduler for the batch delay timer
        session: Optional requests session for the delivery client

    Returns:
        Dictionary containing the tracker service, its client and the helpers
    """
    config = analytics_config or get_analytics_config()

    client = AnalyticsClient(
        base_url=config.base_url,
        event_endpoint=config.event_endpoint,
        batch_endpoint=config.batch_endpoint,
        timeout=config.request_timeout,
        max_workers=config.max_workers,
        session=session,
    )

    tracker = EventTracker(
        client=client,
        clock=clock,
        location=location,
        scheduler=scheduler,
        batch_size=config.batch_size,
        batch_delay_seconds=config.batch_delay_seconds,
    )

    return {
        "service": tracker,
        "client": client,
        "search": SearchAnalytics(tracker),
        "filter": FilterAnalytics(tracker),
        "pagination": PaginationAnalytics(tracker),
    }
