"""
Calendar Helpers

All day-granular comparisons (streaks, cool-down windows, exposure expiry) go
through ``day_of`` so the whole package agrees on a single calendar.

A "day" is a timestamp truncated to local midnight:
- aware datetimes are converted to ``settings.TIMEZONE`` (or the system local
  zone when unset) before truncation
- naive datetimes are taken to be local already
- ``date`` values pass through unchanged
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from drivenote.config import settings

DayLike = Union[date, datetime]


def local_zone() -> Optional[tzinfo]:
    """Configured calendar zone, or None for the system local zone."""
    if settings.TIMEZONE:
        return ZoneInfo(settings.TIMEZONE)
    return None


def day_of(value: DayLike) -> date:
    """Truncate a timestamp to its calendar day."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(local_zone())
        return value.date()
    return value


def now_local() -> datetime:
    """Current time as an aware datetime in the calendar zone."""
    return datetime.now().astimezone(local_zone())


def today() -> date:
    """Today's calendar day."""
    return day_of(now_local())


def days_before(day: date, days: int) -> date:
    """The day ``days`` calendar days before ``day``."""
    return day - timedelta(days=days)


def distinct_days(timestamps: Iterable[DayLike]) -> set[date]:
    """Set of calendar days covered by the given timestamps."""
    return {day_of(ts) for ts in timestamps}
