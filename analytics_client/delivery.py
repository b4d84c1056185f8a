"""
Analytics Delivery Client

Sends events to the collector over HTTP. Delivery is best-effort and
at-most-once: a failed request is logged and dropped, never retried and
never raised to the caller.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Optional

import requests

from .models import Event

logger = logging.getLogger(__name__)

MAX_BATCH_EVENTS = 10


def _join_url(base_url: str, endpoint: str) -> str:
    """Append an endpoint path to the base URL, keeping any path prefix it has."""
    if not base_url:
        return endpoint
    return base_url.rstrip("/") + "/" + endpoint.lstrip("/")


class AnalyticsClient:
    """HTTP transport for the immediate and batched delivery paths."""

    def __init__(
        self,
        base_url: str = "",
        event_endpoint: str = "/api/analytics",
        batch_endpoint: str = "/api/analytics/batch",
        timeout: float = 5.0,
        max_workers: int = 2,
        session: Optional[requests.Session] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """Initialize the delivery client.

        Args:
            base_url: Collector base URL, optionally with a path prefix
            event_endpoint: Path receiving single events
            batch_endpoint: Path receiving grouped events
            timeout: Request timeout in seconds
            max_workers: Worker threads for fire-and-forget delivery
            session: Optional preconfigured requests session
            executor: Optional executor for background delivery
        """
        self.event_url = _join_url(base_url, event_endpoint)
        self.batch_url = _join_url(base_url, batch_endpoint)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="analytics-delivery"
        )

    def send_event(self, event: Event) -> bool:
        """POST a single event to the collector.

        Returns:
            True if the collector answered with a success status
        """
        try:
            response = self.session.post(self.event_url, json=event.to_dict(), timeout=self.timeout)
        except (requests.exceptions.RequestException, TypeError, ValueError) as e:
            # TypeError/ValueError: properties that cannot be encoded as JSON
            logger.debug(f"Analytics error: {e}")
            return False

        if not response.ok:
            logger.error(f"Failed to send analytics: {response.status_code} {response.reason}")
            return False
        return True

    def send_batch(self, events: Iterable[Event]) -> bool:
        """POST a group of events to the collector's batch endpoint.

        Returns:
            True if the collector answered with a success status
        """
        batch: List[Event] = list(events)
        if not 1 <= len(batch) <= MAX_BATCH_EVENTS:
            logger.error(f"Refusing to send analytics batch of {len(batch)} events")
            return False

        payload = {"events": [event.to_dict() for event in batch]}
        try:
            response = self.session.post(self.batch_url, json=payload, timeout=self.timeout)
        except (requests.exceptions.RequestException, TypeError, ValueError) as e:
            logger.debug(f"Analytics batch error: {e}")
            return False

        if not response.ok:
            logger.error(f"Failed to send analytics batch: {response.status_code} {response.reason}")
            return False
        return True

    def submit_event(self, event: Event) -> Future:
        """Deliver an event in the background without waiting for the result."""
        return self._executor.submit(self.send_event, event)

    def submit_batch(self, events: Iterable[Event]) -> Future:
        """Deliver a batch in the background without waiting for the result."""
        return self._executor.submit(self.send_batch, list(events))

    def close(self) -> None:
        """Wait for in-flight deliveries and release the HTTP session."""
        self._executor.shutdown(wait=True)
        self.session.close()
