from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from ..core.constants import DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now()


def to_day(value: date | datetime) -> date:
    """Drop the time-of-day component, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_range(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def week_range(day: date) -> tuple[date, date]:
    """Monday..Sunday week containing ``day``."""
    start = to_day(day) - timedelta(days=to_day(day).weekday())
    return start, start + timedelta(days=6)
