"""
Search performance measurement.

Wraps a search callable so every call reports its wall-clock duration to
the tracker as a ``search`` event.
"""

import functools
import inspect
from typing import Any, Callable

from .event_tracker import EventTracker

PERFORMANCE_MEASURE_QUERY = "performance_measure"
PERFORMANCE_ERROR_QUERY = "performance_error"


def _result_total(result: Any) -> int:
    """Read the ``total`` field from a mapping or an object, 0 when absent."""
    if result is None:
        return 0
    if isinstance(result, dict):
        total = result.get("total")
    else:
        total = getattr(result, "total", None)
    return total or 0


def _report_success(tracker: EventTracker, started: float, result: Any) -> None:
    duration_ms = (tracker.clock.monotonic() - started) * 1000
    tracker.track_search(
        PERFORMANCE_MEASURE_QUERY,
        results_count=_result_total(result),
        filters={"duration": round(duration_ms)},
    )


def _report_error(tracker: EventTracker, started: float, error: BaseException) -> None:
    duration_ms = (tracker.clock.monotonic() - started) * 1000
    tracker.track_search(
        PERFORMANCE_ERROR_QUERY,
        results_count=0,
        filters={"duration": round(duration_ms), "error": str(error)},
    )


def measure_search_performance(tracker: EventTracker, search_function: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a search function to record how long each call takes.

    Coroutine functions get an async wrapper; anything else a plain one.
    A failure inside ``search_function`` is reported and then re-raised.

    Args:
        tracker: Tracker receiving the measurement events
        search_function: Function whose result carries a ``total`` field

    Returns:
        Wrapped function with the same call signature
    """
    if inspect.iscoroutinefunction(search_function):
        @functools.wraps(search_function)
        async def async_wrapper(*args, **kwargs):
            started = tracker.clock.monotonic()
            try:
                result = await search_function(*args, **kwargs)
            except Exception as e:
                _report_error(tracker, started, e)
                raise
            _report_success(tracker, started, result)
            return result

        return async_wrapper

    @functools.wraps(search_function)
    def wrapper(*args, **kwargs):
        started = tracker.clock.monotonic()
        try:
            result = search_function(*args, **kwargs)
        except Exception as e:
            _report_error(tracker, started, e)
            raise
        _report_success(tracker, started, result)
        return result

    return wrapper
