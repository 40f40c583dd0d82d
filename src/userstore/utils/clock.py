"""
Timestamp helpers shared by the repositories, the row mapper and the executor.

Domain timestamps are timezone-aware UTC. The `users` table stores naive UTC
(`TIMESTAMP` without time zone), so values are converted at the boundary.
"""
import threading
from datetime import datetime, timedelta, timezone

_ONE_MICROSECOND = timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_store_timestamp(value: datetime) -> datetime:
    """Aware (any zone) or naive-UTC datetime -> naive UTC datetime."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def from_store_timestamp(value: datetime | str) -> datetime:
    """
    Stored timestamp -> aware UTC datetime.

    SQLite hands back ISO strings ("2024-01-01 10:00:00.000123"), PostgreSQL hands
    back datetime objects; naive values are taken to be UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MonotonicClock:
    """
    Wall clock that never returns the same instant twice.

    Each call returns max(now, previous + 1µs), so timestamps issued by one clock
    strictly increase even when two calls land in the same microsecond (or the
    system clock steps backwards).
    """

    def __init__(self, source=utcnow):
        self._source = source
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            now = self._source()
            if self._last is not None and now <= self._last:
                now = self._last + _ONE_MICROSECOND
            self._last = now
            return now


def advance_past(now: datetime, previous: datetime) -> datetime:
    """
    `now`, or the instant just after `previous` when `now` does not come later.

    Used for `updated_at` so it moves past the stored value even when the write
    comes from another clock (another repository instance or process).
    """
    return max(now, previous + _ONE_MICROSECOND)
