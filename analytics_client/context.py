"""
Runtime context providers.

Wall-clock time and the current page location are passed into the tracker
instead of being read from globals.
"""

import time
from datetime import datetime, timezone
from typing import Protocol
from urllib.parse import urlparse


class Clock(Protocol):
    """Source of timestamps and elapsed time."""

    def now(self) -> datetime:
        ...

    def monotonic(self) -> float:
        ...


class SystemClock:
    """Clock reading the host's real time."""

    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)

    def monotonic(self) -> float:
        return time.perf_counter()


class LocationProvider(Protocol):
    """Source of the page the user is currently on."""

    def pathname(self) -> str:
        ...

    def href(self) -> str:
        ...


class StaticLocation:
    """Location holder updated explicitly by the page layer on navigation."""

    def __init__(self, url: str = "/"):
        self._url = url

    def navigate(self, url: str) -> None:
        """Record that the user moved to ``url``."""
        self._url = url

    def pathname(self) -> str:
        return urlparse(self._url).path or "/"

    def href(self) -> str:
        return self._url


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as an ISO-8601 string with millisecond precision.

    Naive datetimes are taken to be UTC; UTC is written with a ``Z`` suffix.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
