"""
Knowledge Card Services

Modules:
- exposure_scheduler: pure daily selection, learned marks, exposure pruning
- knowledge_service: store-backed orchestration

Usage:
    from drivenote.services.knowledge import KnowledgeService, select_today_cards
"""

from drivenote.services.knowledge.exposure_scheduler import (
    ChangeSet,
    TodaySelection,
    expired_exposures,
    learned_today_count,
    mark_learned,
    mark_learned_record,
    marked_today_ids,
    recently_shown_ids,
    select_today_cards,
)
from drivenote.services.knowledge.knowledge_service import (
    KnowledgeService,
    default_cards,
)

__all__ = [
    # Scheduler
    "ChangeSet",
    "TodaySelection",
    "select_today_cards",
    "mark_learned",
    "mark_learned_record",
    "learned_today_count",
    "marked_today_ids",
    "recently_shown_ids",
    "expired_exposures",
    # Services
    "KnowledgeService",
    "default_cards",
]
