"""Day-count conventions turning calendar dates into year fractions."""

from __future__ import annotations

from datetime import date, datetime

from ptbarrier.errors import InvalidParameter

from .validation import DAY_COUNTS, DayCount

_DAYS_PER_YEAR = {
    "actual360": 360.0,
    "actual365fixed": 365.0,
}


def to_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidParameter(f"Unsupported date-like type: {type(value).__name__}")


def day_count_days(start: date, end: date) -> int:
    """Actual number of calendar days from start to end (negative if end < start)."""
    return (to_date(end) - to_date(start)).days


def year_fraction(start: date, end: date, day_count: DayCount = "actual365fixed") -> float:
    """Year fraction between two dates under an Actual/N convention."""
    if day_count not in DAY_COUNTS:
        raise InvalidParameter(
            f"day_count must be one of {DAY_COUNTS}, got '{day_count}'"
        )
    return day_count_days(start, end) / _DAYS_PER_YEAR[day_count]
