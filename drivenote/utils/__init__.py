"""Shared utilities."""

from drivenote.utils.dates import (
    day_of,
    days_before,
    distinct_days,
    local_zone,
    now_local,
    today,
)

__all__ = [
    "day_of",
    "days_before",
    "distinct_days",
    "local_zone",
    "now_local",
    "today",
]
