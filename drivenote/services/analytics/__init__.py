"""
Activity Analytics

Pure metric calculations over journal records plus the store-backed
statistics service.

Modules:
- route_metrics: route distance/duration and formatting
- streak_tracking: consecutive-day streaks and checklist summaries
- safety_score: bounded weighted safety score
- driving_stats: profile statistics read from the store
"""

from drivenote.services.analytics.driving_stats import DrivingStatsService
from drivenote.services.analytics.route_metrics import (
    RouteMetrics,
    compute_route_metrics,
    format_distance,
    format_duration,
    great_circle_distance,
)
from drivenote.services.analytics.safety_score import (
    safety_score,
    safety_score_from_records,
)
from drivenote.services.analytics.streak_tracking import (
    calculate_checklist_stats,
    current_streak,
    get_streak_data,
    longest_streak,
)

__all__ = [
    # Routes
    "RouteMetrics",
    "compute_route_metrics",
    "format_distance",
    "format_duration",
    "great_circle_distance",
    # Streaks
    "current_streak",
    "longest_streak",
    "get_streak_data",
    "calculate_checklist_stats",
    # Score
    "safety_score",
    "safety_score_from_records",
    # Services
    "DrivingStatsService",
]
