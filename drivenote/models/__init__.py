"""
Pydantic models for records and derived statistics.

Usage:
    from drivenote.models import ActivityLog, Route, KnowledgeCard
"""

from drivenote.models.activity import ActivityLog, ChecklistPunch
from drivenote.models.base import Record, new_id
from drivenote.models.knowledge import CardProgress, ExposureRecord, KnowledgeCard
from drivenote.models.route import Route, RouteSample
from drivenote.models.stats import ChecklistStats, DrivingStats, StreakData
from drivenote.models.tags import TagFrequencySnapshot

__all__ = [
    "Record",
    "new_id",
    # Journal
    "ActivityLog",
    "ChecklistPunch",
    # Routes
    "Route",
    "RouteSample",
    # Knowledge
    "KnowledgeCard",
    "CardProgress",
    "ExposureRecord",
    # Tags
    "TagFrequencySnapshot",
    # Stats
    "StreakData",
    "ChecklistStats",
    "DrivingStats",
]
