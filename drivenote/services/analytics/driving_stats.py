"""
Driving Statistics Service

Reads journal logs, checklist punches and routes from the store and combines
them into the profile statistics: safety score, checklist streaks and route
totals.

Usage:
    service = DrivingStatsService(store)
    stats = service.get_stats()
    print(stats.safety_score, stats.current_streak_days)
"""

import logging
from datetime import date
from typing import Optional

from drivenote.db.store import Store
from drivenote.enums.activity import ChecklistMode, LogOutcome, RouteStatus
from drivenote.models import ActivityLog, ChecklistPunch, Route
from drivenote.models.stats import ChecklistStats, DrivingStats
from drivenote.services.analytics.safety_score import safety_score
from drivenote.services.analytics.streak_tracking import (
    calculate_checklist_stats,
    current_streak,
    longest_streak,
)
from drivenote.utils.dates import distinct_days, today as current_day

logger = logging.getLogger(__name__)


class DrivingStatsService:
    """Read-only aggregation over journal records."""

    def __init__(self, store: Store):
        """
        Initialize the driving stats service.

        Args:
            store: Record store to read from.
        """
        self.store = store

    def get_stats(self, today: Optional[date] = None) -> DrivingStats:
        """
        Calculate overall driving statistics.

        Args:
            today: Reference day for streaks (default: today).

        Returns:
            DrivingStats for the profile page.
        """
        today = today or current_day()

        logs = self.store.fetch_all(ActivityLog)
        punches = self.store.fetch_all(ChecklistPunch)
        completed = self.store.fetch_all(
            Route, lambda r: r.status == RouteStatus.COMPLETED
        )

        success_count = sum(1 for log in logs if log.outcome == LogOutcome.SUCCESS)
        mistake_count = sum(1 for log in logs if log.outcome == LogOutcome.MISTAKE)
        punch_score_sum = sum(p.score for p in punches)
        punch_days = distinct_days(p.timestamp for p in punches)

        stats = DrivingStats(
            safety_score=safety_score(
                success_count, mistake_count, punch_score_sum, len(completed)
            ),
            success_count=success_count,
            mistake_count=mistake_count,
            punch_count=len(punches),
            punch_score_sum=punch_score_sum,
            completed_route_count=len(completed),
            total_distance=sum(r.distance or 0.0 for r in completed),
            total_duration=sum(r.duration or 0.0 for r in completed),
            current_streak_days=current_streak(punch_days, today),
            longest_streak_days=longest_streak(punch_days),
        )

        logger.info(
            f"Driving stats: score={stats.safety_score}, "
            f"streak={stats.current_streak_days}, routes={stats.completed_route_count}"
        )
        return stats

    def get_checklist_stats(
        self, mode: ChecklistMode, today: Optional[date] = None
    ) -> ChecklistStats:
        """Summarize punches for one checklist mode."""
        punches = self.store.fetch_all(ChecklistPunch, lambda p: p.mode == mode)
        return calculate_checklist_stats(punches, mode, today or current_day())
