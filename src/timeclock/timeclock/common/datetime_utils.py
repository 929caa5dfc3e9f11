from __future__ import annotations

import time as _time
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time of day."""
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Bad time: {value!r}")


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(_time.time() * 1000)


def resolve_zone(name: Optional[str]) -> Optional[ZoneInfo]:
    return ZoneInfo(name) if name else None


def to_millis(moment: datetime) -> int:
    # Naive datetimes are interpreted in the process local zone.
    return int(moment.timestamp() * 1000)


def compose_millis(day: date, clock: time, tz: Optional[ZoneInfo] = None) -> int:
    """Epoch milliseconds for a calendar day + clock time in `tz` (or local)."""
    return to_millis(datetime.combine(day, clock, tzinfo=tz))


def from_millis(millis: int, tz: Optional[ZoneInfo] = None) -> datetime:
    """Local (or `tz`) datetime for an epoch millisecond timestamp."""
    return datetime.fromtimestamp(millis / 1000, tz=tz)


def day_bounds_millis(start: date, end: date, tz: Optional[ZoneInfo] = None) -> tuple[int, int]:
    """Closed interval covering `start` 00:00:00 through `end` 23:59:59.

    The upper bound is 23:59:59.000, not the last millisecond of the day.
    """
    lower = compose_millis(start, time(0, 0, 0), tz)
    upper = compose_millis(end, time(23, 59, 59), tz)
    return lower, upper


def first_day_of_month(today: date) -> date:
    return today.replace(day=1)

