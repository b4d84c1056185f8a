"""
Tests for the collector's payload models and event store.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from collector_app.event_collection.models import BatchPayload, IncomingEvent, StoredEvent
from collector_app.event_collection.store import EventStore


def stored(event: str, received_at: str, **properties) -> StoredEvent:
    return StoredEvent(
        event=event,
        properties=properties,
        timestamp="2025-01-01T00:00:00.000Z",
        received_at=received_at,
    )


class TestIncomingEvent:

    def test_valid_event(self):
        incoming = IncomingEvent(
            event="search",
            properties={"query": "mt4"},
            timestamp="2025-01-01T00:00:00.000Z",
        )
        assert incoming.event == "search"

    def test_unknown_event_type_rejected(self):
        with pytest.raises(ValidationError):
            IncomingEvent(event="pageView", timestamp="2025-01-01T00:00:00Z")

    def test_bad_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            IncomingEvent(event="search", timestamp="yesterday")

    def test_properties_default_to_empty(self):
        incoming = IncomingEvent(event="page_view", timestamp="2025-01-01T00:00:00+08:00")
        assert incoming.properties == {}


class TestBatchPayload:

    def test_batch_size_bounds(self):
        event = {"event": "page_view", "properties": {}, "timestamp": "2025-01-01T00:00:00Z"}

        assert len(BatchPayload(events=[event] * 10).events) == 10
        with pytest.raises(ValidationError):
            BatchPayload(events=[])
        with pytest.raises(ValidationError):
            BatchPayload(events=[event] * 11)


class TestEventStore:

    @pytest.fixture
    def store(self, tmp_path):
        return EventStore(tmp_path / "analytics_data")

    def test_creates_data_dir(self, store):
        assert store.data_dir.is_dir()
        assert store.get_events() == []

    def test_append_and_read_back(self, store):
        written = store.append([
            stored("search", "2025-01-01T10:00:00+00:00", query="mt4"),
            stored("page_view", "2025-01-01T10:01:00+00:00", page="/"),
        ])

        assert written == 2
        events = store.get_events()
        assert [e.event for e in events] == ["search", "page_view"]
        assert events[0].properties == {"query": "mt4"}

    def test_get_events_limit_keeps_most_recent(self, store):
        store.append([stored("page_view", f"2025-01-01T10:0{i}:00+00:00", page=f"/{i}") for i in range(5)])

        assert [e.properties["page"] for e in store.get_events(limit=2)] == ["/3", "/4"]
        assert store.get_events(limit=0) == []

    def test_append_nothing(self, store):
        assert store.append([]) == 0
        assert not store.events_file.exists()

    def test_event_stats(self, store):
        store.append([
            stored("search", "2025-01-01T10:00:00+00:00"),
            stored("search", "2025-01-01T10:00:00+00:00"),
            stored("download_click", "2025-01-01T10:00:00+00:00"),
        ])
        assert store.get_event_stats() == {"search": 2, "download_click": 1}

    def test_popular_downloads(self, store):
        store.append([
            stored("download_click", "2025-01-01T10:00:00+00:00", downloadId="ea-2", downloadName="Grid EA"),
            stored("download_click", "2025-01-01T10:00:00+00:00", downloadId="ea-1", downloadName="Trend EA"),
            stored("download_click", "2025-01-01T10:00:00+00:00", downloadId="ea-1", downloadName="Trend EA"),
            stored("download_click", "2025-01-01T10:00:00+00:00", downloadId="ea-3", downloadName="News EA"),
            stored("search", "2025-01-01T10:00:00+00:00", downloadId="ea-3"),
        ])

        assert store.get_popular_downloads() == [
            {"id": "ea-1", "name": "Trend EA", "count": 2},
            {"id": "ea-2", "name": "Grid EA", "count": 1},
            {"id": "ea-3", "name": "News EA", "count": 1},
        ]
        assert len(store.get_popular_downloads(limit=1)) == 1

    def test_events_by_date_range_newest_first(self, store):
        store.append([
            stored("page_view", "2025-01-01T08:00:00+00:00", page="early"),
            stored("page_view", "2025-01-02T08:00:00+00:00", page="middle"),
            stored("page_view", "2025-01-03T08:00:00+00:00", page="late"),
        ])

        events = store.get_events_by_date_range(
            datetime(2025, 1, 1, 8, tzinfo=timezone.utc),
            datetime(2025, 1, 2, 8, tzinfo=timezone.utc),
        )
        assert [e.properties["page"] for e in events] == ["middle", "early"]

    def test_naive_range_bounds_are_utc(self, store):
        store.append([stored("page_view", "2025-01-01T12:00:00+02:00", page="x")])
        events = store.get_events_by_date_range(datetime(2025, 1, 1, 10), datetime(2025, 1, 1, 10))
        assert len(events) == 1

    def test_malformed_lines_are_skipped(self, store):
        store.append([stored("search", "2025-01-01T10:00:00+00:00")])
        with open(store.events_file, "a", encoding="utf-8") as f:
            f.write("{broken\n")
        store.append([stored("page_view", "2025-01-01T10:00:00+00:00")])

        assert [e.event for e in store.get_events()] == ["search", "page_view"]
