"""
Shared fixtures: a hand-driven clock and scheduler, and a delivery client
that records what it was asked to send.
"""

from datetime import datetime, timedelta, timezone

import pytest

from analytics_client.context import StaticLocation
from analytics_client.event_tracker import EventTracker


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc)):
        self._start = start
        self._elapsed = 0.0

    def advance(self, seconds: float) -> None:
        self._elapsed += seconds

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    def monotonic(self) -> float:
        return self._elapsed


class ManualTimer:
    def __init__(self, due: float, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose timers fire only when the clock is advanced."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.timers = []

    def call_later(self, delay, callback):
        timer = ManualTimer(self.clock.monotonic() + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        self.clock.advance(seconds)
        for timer in list(self.timers):
            if timer.cancelled or timer.fired:
                continue
            if timer.due <= self.clock.monotonic():
                timer.fired = True
                timer.callback()


class RecordingClient:
    """Stand-in for AnalyticsClient that keeps submitted events in memory."""

    def __init__(self):
        self.events = []
        self.batches = []
        self.fail = False

    def submit_event(self, event):
        if self.fail:
            raise RuntimeError("delivery pool is shut down")
        self.events.append(event)

    def submit_batch(self, events):
        self.batches.append(list(events))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def recording_client():
    return RecordingClient()


@pytest.fixture
def location():
    return StaticLocation("https://fxtools.example/downloads?page=2")


@pytest.fixture
def tracker(recording_client, clock, location, scheduler):
    """EventTracker wired to fakes so every test is deterministic."""
    return EventTracker(
        client=recording_client,
        clock=clock,
        location=location,
        scheduler=scheduler,
    )
