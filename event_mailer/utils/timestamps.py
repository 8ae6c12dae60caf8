"""Clock helpers for dispatch timestamps."""

import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def epoch_millis(dt: Optional[datetime] = None) -> int:
    """Milliseconds since the Unix epoch for ``dt`` (default: now).

    Naive datetimes are taken to be UTC.
    """
    if dt is None:
        return time.time_ns() // 1_000_000
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


class DispatchClock:
    """Millisecond timestamps that strictly increase within the process.

    Two dispatches in the same millisecond still get distinct values, so
    tokens derived from (identifier, timestamp) never collide locally.
    """

    def __init__(self, source: Callable[[], int] = epoch_millis):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def next_millis(self) -> int:
        with self._lock:
            self._last = max(self._source(), self._last + 1)
            return self._last
