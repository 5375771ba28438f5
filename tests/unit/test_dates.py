"""
Unit tests for calendar helpers.
"""

from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from drivenote.utils.dates import day_of, days_before, distinct_days, local_zone


class TestDayOf:
    """Tests for day_of."""

    def test_date_passes_through(self):
        assert day_of(date(2026, 10, 18)) == date(2026, 10, 18)

    def test_naive_datetime_is_local(self):
        assert day_of(datetime(2026, 10, 18, 23, 59)) == date(2026, 10, 18)

    @pytest.mark.parametrize(
        "zone,expected",
        [
            ("Asia/Shanghai", date(2026, 10, 19)),
            ("America/New_York", date(2026, 10, 18)),
            ("UTC", date(2026, 10, 18)),
        ],
        ids=["east", "west", "utc"],
    )
    @patch("drivenote.utils.dates.settings")
    def test_aware_datetime_uses_configured_zone(self, mock_settings, zone, expected):
        mock_settings.TIMEZONE = zone
        # 20:00 UTC is already the next day in Shanghai
        value = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)

        assert day_of(value) == expected

    @patch("drivenote.utils.dates.settings")
    def test_no_zone_configured(self, mock_settings):
        mock_settings.TIMEZONE = ""
        assert local_zone() is None


class TestDayHelpers:
    """Tests for days_before and distinct_days."""

    def test_days_before_crosses_month(self):
        assert days_before(date(2026, 10, 3), 7) == date(2026, 9, 26)

    def test_distinct_days(self):
        stamps = [
            datetime(2026, 10, 18, 8),
            datetime(2026, 10, 18, 20),
            datetime(2026, 10, 17, 0, 1),
            date(2026, 10, 17),
        ]

        assert distinct_days(stamps) == {date(2026, 10, 17), date(2026, 10, 18)}
