"""
Unit tests for streak tracking.

Tests current/longest streak calculation, streak data milestones and the
checklist punch summary.
"""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from drivenote.enums.activity import ChecklistMode
from drivenote.models import ChecklistPunch
from drivenote.services.analytics.streak_tracking import (
    calculate_checklist_stats,
    current_streak,
    get_streak_data,
    longest_streak,
)


def days_back(today, *offsets):
    """Set of days ``offset`` days before today."""
    return {today - timedelta(days=o) for o in offsets}


class TestCurrentStreak:
    """Tests for current_streak."""

    @pytest.mark.parametrize(
        "offsets,expected",
        [
            ((), 0),
            ((0,), 1),
            ((0, 1, 2), 3),
            ((0, 1, 3, 4), 2),
            ((0, 2), 1),
        ],
        ids=["empty", "today_only", "three_days", "gap_after_two", "gap_yesterday"],
    )
    def test_counts_back_from_today(self, today, offsets, expected):
        assert current_streak(days_back(today, *offsets), today) == expected

    def test_no_activity_today_resets_streak(self, today):
        """Unbroken earlier days do not count when today has no activity."""
        assert current_streak(days_back(today, 1), today) == 0
        assert current_streak(days_back(today, 1, 2, 3, 4), today) == 0

    def test_future_days_are_ignored(self, today):
        assert current_streak(days_back(today, -1, 0), today) == 1


class TestLongestStreak:
    """Tests for longest_streak."""

    @pytest.mark.parametrize(
        "offsets,expected",
        [
            ((), 0),
            ((5,), 1),
            ((0, 1, 2, 10, 11), 3),
            ((20, 21, 22, 23, 0, 1), 4),
        ],
        ids=["empty", "single", "recent_run", "older_run"],
    )
    def test_longest_run(self, today, offsets, expected):
        assert longest_streak(days_back(today, *offsets)) == expected

    def test_duplicates_are_ignored(self, today):
        assert longest_streak([today, today, today - timedelta(days=1)]) == 2


class TestStreakData:
    """Tests for get_streak_data."""

    @patch("drivenote.services.analytics.streak_tracking.settings")
    def test_milestones(self, mock_settings, today):
        mock_settings.STREAK_MILESTONES = [3, 7, 14]

        data = get_streak_data(days_back(today, *range(8)), today)

        assert data.current_streak == 8
        assert data.longest_streak == 8
        assert data.streak_start == today - timedelta(days=7)
        assert data.is_active_today is True
        assert data.milestones_reached == [3, 7]
        assert data.next_milestone == 14

    def test_inactive_today(self, today):
        data = get_streak_data(days_back(today, 1, 2), today)

        assert data.current_streak == 0
        assert data.streak_start is None
        assert data.is_active_today is False
        assert data.last_active == today - timedelta(days=1)
        assert data.longest_streak == 2

    def test_no_activity(self, today):
        data = get_streak_data(set(), today)

        assert data.current_streak == 0
        assert data.longest_streak == 0
        assert data.last_active is None
        assert data.milestones_reached == []


class TestChecklistStats:
    """Tests for calculate_checklist_stats."""

    @pytest.fixture
    def punches(self, now):
        def punch(days_ago, mode, score, hour=8):
            ts = datetime(now.year, now.month, now.day, hour) - timedelta(days=days_ago)
            return ChecklistPunch(timestamp=ts, mode=mode, score=score, checked_item_count=5)

        return [
            punch(0, ChecklistMode.PRE, 80),
            punch(0, ChecklistMode.PRE, 100, hour=18),
            punch(1, ChecklistMode.PRE, 60),
            punch(3, ChecklistMode.PRE, 40),
            punch(0, ChecklistMode.POST, 90),
        ]

    def test_pre_mode_summary(self, punches, today):
        stats = calculate_checklist_stats(punches, ChecklistMode.PRE, today)

        assert stats.mode == ChecklistMode.PRE
        assert stats.total_punches == 4
        assert stats.total_days == 3
        assert stats.average_score == pytest.approx(70.0)
        assert stats.completion_rate == pytest.approx(0.7)
        assert stats.current_streak == 2
        assert stats.formatted_average_score == "70.0"
        assert stats.formatted_completion_rate == "70.0%"

    def test_other_mode_is_ignored(self, punches, today):
        stats = calculate_checklist_stats(punches, ChecklistMode.POST, today)

        assert stats.total_punches == 1
        assert stats.average_score == pytest.approx(90.0)
        assert stats.current_streak == 1

    def test_no_punches(self, today):
        stats = calculate_checklist_stats([], ChecklistMode.PRE, today)

        assert stats.total_punches == 0
        assert stats.average_score == 0.0
        assert stats.current_streak == 0
