"""
Basic import tests to verify the core functionality.
"""

import pytest


def test_analytics_client_imports():
    """Test that the analytics client public surface can be imported."""
    from analytics_client import (
        EventTracker,
        SearchAnalytics,
        FilterAnalytics,
        PaginationAnalytics,
        measure_search_performance,
        create_event_tracking_module,
    )

    assert callable(measure_search_performance)
    assert callable(create_event_tracking_module)
    assert hasattr(EventTracker, "track_search")
    assert hasattr(SearchAnalytics, "track_search")
    assert hasattr(FilterAnalytics, "track_filter")
    assert hasattr(PaginationAnalytics, "track_pagination")


def test_collector_imports():
    """Test that the collector modules can be imported."""
    from collector_app.main import create_app
    from collector_app.event_collection import create_event_collection_module, EventStore

    assert callable(create_app)
    assert callable(create_event_collection_module)
    assert EventStore.FILE_NAME.endswith(".jsonl")
