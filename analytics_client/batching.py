"""
Batch Queue

Groups events for the batched delivery path. The queue is a two-state
machine:

- ``IDLE``: nothing pending, no timer armed.
- ``PENDING``: at least one event waiting, exactly one timer armed with a
  deadline ``delay_seconds`` after the first event of the batch.

Reaching ``max_size`` flushes straight away and cancels the timer. Events
queued while a timer is armed join the same batch; the timer is never
re-armed for them.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, List, Optional

from .context import Clock, SystemClock
from .models import Event
from .scheduling import Scheduler, ThreadingScheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY_SECONDS = 5.0


class BatchState(Enum):
    """States of the batch queue."""

    IDLE = "idle"
    PENDING = "pending"


class BatchQueue:
    """Thread-safe pending batch with a size threshold and a delay timer."""

    def __init__(
        self,
        sink: Callable[[List[Event]], Any],
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
        max_size: int = DEFAULT_BATCH_SIZE,
        delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ):
        """Initialize the batch queue.

        Args:
            sink: Callable receiving each flushed batch (list of events)
            scheduler: Scheduler used to arm the delay timer
            clock: Clock used to compute the flush deadline
            max_size: Batch size that triggers an immediate flush
            delay_seconds: Delay after the first queued event before flushing
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if delay_seconds <= 0:
            raise ValueError("delay_seconds must be positive")

        self._sink = sink
        self._scheduler = scheduler or ThreadingScheduler()
        self._clock = clock or SystemClock()
        self.max_size = max_size
        self.delay_seconds = delay_seconds

        self._lock = threading.Lock()
        self._events: List[Event] = []
        self._timer: Optional[TimerHandle] = None
        self._deadline: Optional[float] = None
        # Bumped on every flush so a timer from an earlier batch is ignored
        self._generation = 0

    @property
    def state(self) -> BatchState:
        with self._lock:
            return BatchState.PENDING if self._events else BatchState.IDLE

    @property
    def pending(self) -> List[Event]:
        """Copy of the events waiting to be flushed."""
        with self._lock:
            return list(self._events)

    @property
    def deadline(self) -> Optional[float]:
        """Monotonic time at which the armed timer fires, if any."""
        with self._lock:
            return self._deadline

    def enqueue(self, event: Event) -> None:
        """Add an event to the pending batch.

        Flushes at once if the batch reaches ``max_size``; otherwise arms the
        delay timer when this is the first event of the batch.
        """
        with self._lock:
            self._events.append(event)
            if len(self._events) >= self.max_size:
                batch = self._detach()
            else:
                batch = None
                if self._timer is None:
                    self._arm()

        if batch:
            logger.debug(f"Batch size threshold reached, flushing {len(batch)} events")
            self._deliver(batch)

    def flush(self) -> int:
        """Flush whatever is pending.

        Returns:
            Number of events handed to the sink (0 when nothing was pending)
        """
        with self._lock:
            batch = self._detach()

        if batch:
            self._deliver(batch)
        return len(batch)

    def _arm(self) -> None:
        # Caller holds the lock
        generation = self._generation
        self._deadline = self._clock.monotonic() + self.delay_seconds
        self._timer = self._scheduler.call_later(
            self.delay_seconds, lambda: self._on_timer(generation)
        )

    def _detach(self) -> List[Event]:
        # Caller holds the lock
        batch = self._events
        self._events = []
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._deadline = None
        self._generation += 1
        return batch

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._timer is None:
                return
            batch = self._detach()

        if batch:
            logger.debug(f"Batch delay elapsed, flushing {len(batch)} events")
            self._deliver(batch)

    def _deliver(self, batch: List[Event]) -> None:
        try:
            self._sink(batch)
        except Exception as e:
            logger.debug(f"Analytics batch error: {e}")
