from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_wall_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def format_wall_time(value: time | None) -> str | None:
    return value.strftime("%H:%M:%S") if value is not None else None


def whole_minutes(delta: timedelta) -> int:
    """Minutes in ``delta``, truncated toward zero (59s counts as 0, -59s as 0)."""
    return int(delta.total_seconds() / 60)


def whole_hours(delta: timedelta) -> int:
    return int(delta.total_seconds() / 3600)


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
