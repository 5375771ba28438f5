"""
Streak Tracking

Calculates consecutive-day activity streaks from a set of calendar days.

Responsibilities:
- Current streak counted back from today
- Longest streak ever achieved
- Streak milestones
- Checklist punch summaries (per pre/post mode)

The functions are stream-agnostic: callers build the day set from whichever
events matter (checklist punches for the profile streak).

Usage:
    from drivenote.services.analytics.streak_tracking import current_streak

    days = distinct_days(p.timestamp for p in punches)
    streak = current_streak(days, today)
"""

from datetime import date, timedelta
from typing import AbstractSet, Iterable, Optional

from drivenote.config import settings
from drivenote.enums.activity import ChecklistMode
from drivenote.models.activity import ChecklistPunch
from drivenote.models.stats import ChecklistStats, StreakData
from drivenote.utils.dates import distinct_days


def current_streak(activity_days: AbstractSet[date], today: date) -> int:
    """
    Count consecutive activity days ending today.

    The walk starts at ``today``: with no activity today the streak is 0,
    even when the preceding days are unbroken.

    Args:
        activity_days: Calendar days with at least one activity.
        today: Reference day.

    Returns:
        Number of consecutive days, today included.
    """
    count = 0
    cursor = today
    while cursor in activity_days:
        count += 1
        cursor -= timedelta(days=1)
    return count


def longest_streak(activity_days: Iterable[date]) -> int:
    """
    Calculate the longest consecutive run of activity days.

    Args:
        activity_days: Calendar days with activity (any order, duplicates ok).

    Returns:
        Length of the longest run, 0 when there is no activity.
    """
    sorted_days = sorted(set(activity_days))
    if not sorted_days:
        return 0

    longest = 1
    current = 1
    for i in range(1, len(sorted_days)):
        if sorted_days[i] == sorted_days[i - 1] + timedelta(days=1):
            current += 1
            longest = max(longest, current)
        else:
            current = 1

    return longest


def get_streak_data(activity_days: AbstractSet[date], today: date) -> StreakData:
    """
    Build detailed streak information.

    Args:
        activity_days: Calendar days with activity.
        today: Reference day.

    Returns:
        StreakData with current/longest streak and milestones.
    """
    current = current_streak(activity_days, today)
    longest = longest_streak(activity_days)

    streak_start: Optional[date] = None
    if current:
        streak_start = today - timedelta(days=current - 1)

    past_days = [d for d in activity_days if d <= today]
    milestones = sorted(settings.STREAK_MILESTONES)

    return StreakData(
        current_streak=current,
        longest_streak=longest,
        streak_start=streak_start,
        last_active=max(past_days) if past_days else None,
        is_active_today=today in activity_days,
        milestones_reached=[m for m in milestones if longest >= m],
        next_milestone=next((m for m in milestones if m > current), None),
    )


def calculate_checklist_stats(
    punches: Iterable[ChecklistPunch],
    mode: ChecklistMode,
    today: date,
) -> ChecklistStats:
    """
    Summarize punches for one checklist mode.

    Args:
        punches: All punches (other modes are ignored).
        mode: Pre- or post-drive checklist.
        today: Reference day for the current streak.

    Returns:
        ChecklistStats with counts, average score and current streak.
    """
    filtered = [p for p in punches if p.mode == mode]

    total_punches = len(filtered)
    total_score = sum(p.score for p in filtered)
    average_score = total_score / total_punches if total_punches else 0.0
    days = distinct_days(p.timestamp for p in filtered)

    return ChecklistStats(
        mode=mode,
        total_punches=total_punches,
        total_days=len(days),
        average_score=average_score,
        # Scores are out of 100
        completion_rate=average_score / 100.0,
        current_streak=current_streak(days, today),
    )
