"""
Timer scheduling for delayed batch delivery.

The batch queue never touches ``threading.Timer`` directly; it asks a
scheduler for a cancellable handle so tests can drive time by hand.
"""

import threading
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it runs."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ThreadingScheduler:
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def __init__(self, name_prefix: str = "analytics-batch"):
        self.name_prefix = name_prefix

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.name = f"{self.name_prefix}-{id(timer):x}"
        timer.start()
        return timer
