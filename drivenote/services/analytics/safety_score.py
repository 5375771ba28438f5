"""
Safety Score

A bounded 0-100 score summarizing driving behaviour:

    raw = 50 + 5*successes - 3*mistakes + punch_score_sum/10 + 2*completed_routes

The punch term uses integer division truncated toward zero. Weights and bounds
come from settings (SAFETY_SCORE_*).
"""

import logging
from typing import Iterable

from drivenote.config import settings
from drivenote.enums.activity import LogOutcome, RouteStatus
from drivenote.errors import require_non_negative
from drivenote.models.activity import ActivityLog, ChecklistPunch
from drivenote.models.route import Route

logger = logging.getLogger(__name__)


def _truncating_div(numerator: int, divisor: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    quotient = abs(numerator) // abs(divisor)
    return quotient if (numerator >= 0) == (divisor > 0) else -quotient


def safety_score(
    success_count: int,
    mistake_count: int,
    punch_score_sum: int,
    completed_route_count: int,
) -> int:
    """
    Calculate the safety score.

    Args:
        success_count: Number of success log entries.
        mistake_count: Number of mistake log entries.
        punch_score_sum: Sum of checklist punch scores.
        completed_route_count: Number of completed routes.

    Returns:
        Score clamped to [SAFETY_SCORE_MIN, SAFETY_SCORE_MAX].

    Raises:
        PreconditionError: If any count is negative.
    """
    require_non_negative(
        success_count=success_count,
        mistake_count=mistake_count,
        completed_route_count=completed_route_count,
    )

    raw = (
        settings.SAFETY_SCORE_BASE
        + settings.SAFETY_SCORE_SUCCESS_WEIGHT * success_count
        - settings.SAFETY_SCORE_MISTAKE_WEIGHT * mistake_count
        + _truncating_div(punch_score_sum, settings.SAFETY_SCORE_PUNCH_DIVISOR)
        + settings.SAFETY_SCORE_ROUTE_WEIGHT * completed_route_count
    )
    return max(settings.SAFETY_SCORE_MIN, min(settings.SAFETY_SCORE_MAX, raw))


def safety_score_from_records(
    logs: Iterable[ActivityLog],
    punches: Iterable[ChecklistPunch],
    routes: Iterable[Route],
) -> int:
    """Calculate the safety score directly from journal records."""
    logs = list(logs)
    successes = sum(1 for log in logs if log.outcome == LogOutcome.SUCCESS)
    mistakes = sum(1 for log in logs if log.outcome == LogOutcome.MISTAKE)
    punch_sum = sum(p.score for p in punches)
    completed = sum(1 for r in routes if r.status == RouteStatus.COMPLETED)

    score = safety_score(successes, mistakes, punch_sum, completed)
    logger.debug(
        f"Safety score {score}: successes={successes}, mistakes={mistakes}, "
        f"punch_sum={punch_sum}, completed_routes={completed}"
    )
    return score
