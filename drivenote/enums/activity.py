"""
Activity Enums

Defines enums for journal logs, checklist punches and drive routes.
"""

from enum import Enum


class LogOutcome(str, Enum):
    """Outcome of a journal log entry."""

    MISTAKE = "mistake"
    SUCCESS = "success"


class ChecklistMode(str, Enum):
    """Which checklist a punch belongs to."""

    PRE = "pre"  # Before driving
    POST = "post"  # After parking


class RouteStatus(str, Enum):
    """
    Drive route lifecycle.

    State transitions:
    - ACTIVE → COMPLETED (metrics computed once, then frozen)
    - ACTIVE → CANCELLED (no metrics)
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
