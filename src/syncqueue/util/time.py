from __future__ import annotations

import time
from datetime import datetime, timezone


def logical_now() -> int:
    """Return a monotonic timestamp for ordering/merge decisions (not wall-clock)."""
    return time.monotonic_ns()


def to_rfc3339(dt: datetime) -> str:
    """
    Convert tz-aware datetime to RFC3339 (UTC, with 'Z').

    Drops microseconds; the time-tracking API works in whole seconds.
    """
    dt = normalize_dt(dt).astimezone(timezone.utc)
    s = dt.replace(microsecond=0).isoformat()
    return s.replace("+00:00", "Z")


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt
