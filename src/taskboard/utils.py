from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Optional


# PUBLIC_INTERFACE
def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


# PUBLIC_INTERFACE
def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class MonotonicClock:
    """
    Hands out strictly increasing UTC timestamps.

    Two records created within the same clock tick still get distinct
    creation times, so "most recent first" is a total order.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        with self._lock:
            current = utcnow()
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(microseconds=1)
            self._last = current
            return current
