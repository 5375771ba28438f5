"""
Journal Activity Models

Read-only inputs to the streak and safety score calculations. Both are created
by the journal feature and never modified by this package.
"""

from datetime import datetime

from pydantic import Field

from drivenote.enums.activity import ChecklistMode, LogOutcome
from drivenote.models.base import Record


class ActivityLog(Record):
    """A journal entry recording a mistake or a success while driving."""

    timestamp: datetime
    outcome: LogOutcome
    tags: list[str] = Field(default_factory=list)


class ChecklistPunch(Record):
    """
    A checklist check-in.

    ``score`` is the check-in score awarded at punch time; the safety score
    uses the sum across all punches.
    """

    timestamp: datetime
    mode: ChecklistMode
    checked_item_count: int = Field(0, ge=0)
    score: int = 0
    is_quick_complete: bool = False
