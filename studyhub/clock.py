from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC"""
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


class MonotonicClock:
    """Wall clock that never hands out the same or an earlier timestamp twice"""

    def __init__(self, source: Callable[[], datetime] = utcnow):
        self._source = source
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        ts = as_utc(self._source())
        if self._last is not None and ts <= self._last:
            ts = self._last + TICK
        self._last = ts
        return ts
