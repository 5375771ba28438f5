"""
Derived Statistics Models

Read models returned by the analytics services. Never persisted.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from drivenote.enums.activity import ChecklistMode


class StreakData(BaseModel):
    """
    Consecutive-day activity streak information.

    ``current_streak`` counts back from today only; a day without activity
    today yields zero even if earlier days are unbroken.
    """

    current_streak: int  # Days
    longest_streak: int
    streak_start: Optional[date] = None
    last_active: Optional[date] = None
    is_active_today: bool
    # Milestones
    milestones_reached: list[int] = Field(default_factory=list)  # e.g., [3, 7]
    next_milestone: Optional[int] = None


class ChecklistStats(BaseModel):
    """Summary of checklist punches for one mode (pre or post)."""

    mode: ChecklistMode
    total_punches: int
    total_days: int  # Distinct calendar days with a punch
    average_score: float
    completion_rate: float  # average_score / 100
    current_streak: int

    @property
    def formatted_average_score(self) -> str:
        return f"{self.average_score:.1f}"

    @property
    def formatted_completion_rate(self) -> str:
        return f"{self.completion_rate * 100:.1f}%"


class DrivingStats(BaseModel):
    """
    Overall driving statistics for the profile page.

    Aggregates journal logs, checklist punches and completed routes into the
    safety score and streak figures.
    """

    safety_score: int = Field(..., ge=0, le=100)
    success_count: int
    mistake_count: int
    punch_count: int
    punch_score_sum: int
    completed_route_count: int
    total_distance: float = 0.0  # Metres
    total_duration: float = 0.0  # Seconds
    current_streak_days: int
    longest_streak_days: int
