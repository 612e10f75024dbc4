from __future__ import annotations

import threading
from datetime import UTC, datetime

MICROS_PER_SECOND = 1_000_000

_stamp_lock = threading.Lock()
_last_stamp = 0


def utc_now() -> datetime:
    return datetime.now(UTC)


def epoch_seconds(dt: datetime | None = None) -> int:
    """Return ``dt`` (default: now) as whole epoch seconds."""
    dt = dt or utc_now()
    return int(dt.replace(tzinfo=dt.tzinfo or UTC).timestamp())


def next_stamp() -> int:
    """
    Return the current time in epoch microseconds, strictly increasing.

    Two calls in the same process never return the same value, even when the
    wall clock stands still or steps back; the value then advances by one.
    """
    global _last_stamp
    now = utc_now()
    micros = epoch_seconds(now) * MICROS_PER_SECOND + now.microsecond
    with _stamp_lock:
        _last_stamp = max(micros, _last_stamp + 1)
        return _last_stamp
