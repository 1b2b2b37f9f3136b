from __future__ import annotations

import time
from datetime import date, datetime, time as dtime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    return int(time.time() * 1000)


def start_of_day_utc(value: date | datetime) -> datetime:
    """Normalize a date (midnight UTC) or datetime (assumed UTC when naive)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, dtime.min, tzinfo=timezone.utc)
