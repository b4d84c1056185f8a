"""
Tests for the HTTP delivery client.
"""

import logging
from datetime import datetime
from unittest.mock import Mock, patch

import pytest
import requests

from analytics_client.delivery import AnalyticsClient
from analytics_client.models import Event


def make_event(kind: str = "search") -> Event:
    return Event(event=kind, timestamp="2025-01-01T00:00:00.000Z", properties={"query": "mt4"})


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    session.post.return_value = Mock(ok=True, status_code=200, reason="OK")
    return session


@pytest.fixture
def client(session):
    client = AnalyticsClient(base_url="http://collector.test", session=session, max_workers=1)
    yield client
    client.close()


class TestAnalyticsClient:

    def test_urls_are_joined_with_base(self, client):
        assert client.event_url == "http://collector.test/api/analytics"
        assert client.batch_url == "http://collector.test/api/analytics/batch"

    def test_relative_urls_without_base(self, session):
        client = AnalyticsClient(session=session)
        assert client.event_url == "/api/analytics"
        assert client.batch_url == "/api/analytics/batch"
        client.close()

    def test_sets_json_content_type(self, client, session):
        assert session.headers["Content-Type"] == "application/json"

    def test_send_event_posts_wire_form(self, client, session):
        assert client.send_event(make_event()) is True

        session.post.assert_called_once_with(
            "http://collector.test/api/analytics",
            json={
                "event": "search",
                "properties": {"query": "mt4"},
                "timestamp": "2025-01-01T00:00:00.000Z",
            },
            timeout=5.0,
        )

    def test_send_event_error_status_is_logged(self, client, session, caplog):
        session.post.return_value = Mock(ok=False, status_code=500, reason="Internal Server Error")

        with caplog.at_level(logging.ERROR, logger="analytics_client.delivery"):
            assert client.send_event(make_event()) is False

        assert "Failed to send analytics" in caplog.text

    def test_send_event_network_error_is_swallowed(self, client, session):
        session.post.side_effect = requests.exceptions.Timeout("slow collector")
        assert client.send_event(make_event()) is False

    def test_send_batch_posts_grouped_payload(self, client, session):
        events = [make_event("search"), make_event("page_view")]
        assert client.send_batch(events) is True

        url = session.post.call_args.args[0]
        payload = session.post.call_args.kwargs["json"]
        assert url == "http://collector.test/api/analytics/batch"
        assert [e["event"] for e in payload["events"]] == ["search", "page_view"]

    def test_send_batch_rejects_bad_sizes(self, client, session):
        assert client.send_batch([]) is False
        assert client.send_batch([make_event()] * 11) is False
        session.post.assert_not_called()

    def test_send_batch_network_error_is_swallowed(self, client, session):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")
        assert client.send_batch([make_event()]) is False

    def test_submit_event_runs_in_background(self, client, session):
        future = client.submit_event(make_event())
        assert future.result(timeout=2.0) is True
        session.post.assert_called_once()

    def test_submit_batch_copies_events(self, client, session):
        events = [make_event()]
        future = client.submit_batch(events)
        events.clear()
        assert future.result(timeout=2.0) is True
        assert len(session.post.call_args.kwargs["json"]["events"]) == 1

    def test_default_session_is_requests_session(self):
        with patch("analytics_client.delivery.requests.Session") as mock_session_cls:
            mock_session_cls.return_value.headers = {}
            client = AnalyticsClient()
            assert client.session is mock_session_cls.return_value
            client.close()
            mock_session_cls.return_value.close.assert_called_once()


class TestUnencodableProperties:
    """Properties that cannot be encoded as JSON are dropped, not raised."""

    @pytest.fixture
    def real_client(self):
        # requests encodes the body before opening a connection, so the
        # unroutable host is never contacted
        client = AnalyticsClient(base_url="http://collector.invalid", max_workers=1)
        yield client
        client.close()

    def test_send_event_with_datetime_returns_false(self, real_client, caplog):
        event = Event(
            event="filter_applied",
            timestamp="2025-01-01T00:00:00.000Z",
            properties={"filterType": "date", "filterValue": datetime(2025, 1, 1)},
        )

        with caplog.at_level(logging.DEBUG, logger="analytics_client.delivery"):
            assert real_client.send_event(event) is False

        assert "Analytics error" in caplog.text

    def test_submit_batch_with_set_is_logged(self, real_client, caplog):
        event = Event(
            event="filter_applied",
            timestamp="2025-01-01T00:00:00.000Z",
            properties={"filterValue": {1, 2}},
        )

        with caplog.at_level(logging.DEBUG, logger="analytics_client.delivery"):
            future = real_client.submit_batch([event])
            assert future.result(timeout=2.0) is False

        assert future.exception() is None
        assert "Analytics batch error" in caplog.text

    def test_submit_event_with_set_does_not_fail_future(self, real_client):
        event = Event(event="search", timestamp="2025-01-01T00:00:00.000Z", properties={"filters": {1, 2}})
        future = real_client.submit_event(event)
        assert future.result(timeout=2.0) is False


class TestBaseUrlJoining:

    def test_path_prefix_is_kept(self, session):
        client = AnalyticsClient(base_url="http://collector.test/tracker", session=session)
        assert client.event_url == "http://collector.test/tracker/api/analytics"
        assert client.batch_url == "http://collector.test/tracker/api/analytics/batch"
        client.close()

    def test_trailing_slash_on_base(self, session):
        client = AnalyticsClient(base_url="http://collector.test/tracker/", session=session)
        assert client.event_url == "http://collector.test/tracker/api/analytics"
        client.close()
