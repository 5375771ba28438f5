"""
Knowledge Exposure Scheduler

Selects today's knowledge cards while avoiding short-term repeats.

Per card and day, three derived states are computed fresh on every call:
- marked today: the card has a CardProgress entry for today; never selected
- shown recently: an ExposureRecord within the cool-down window (7 days)
- unseen: neither of the above

Selection:
1. primary pool = cards neither marked today nor shown recently
2. if the primary pool holds at least ``limit`` cards, sample from it
3. otherwise fall back to all cards not marked today (cool-down dropped);
   when even that is short, return what there is without padding

Every call also collects exposure records older than the retention window
(30 days) for deletion.

All functions here are pure. The caller applies ``TodaySelection.changes``
to the store in one atomic save.

Usage:
    selection = select_today_cards(
        pool, progress, exposures, limit=3, now=now, session_id=session_id
    )
    selection.changes.apply(store)
    store.save()
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from drivenote.config import settings
from drivenote.db.store import Store
from drivenote.errors import PreconditionError
from drivenote.models.base import Record
from drivenote.models.knowledge import CardProgress, ExposureRecord, KnowledgeCard
from drivenote.utils.dates import DayLike, day_of, days_before

logger = logging.getLogger(__name__)


@dataclass
class ChangeSet:
    """Explicit store mutations produced by a pure operation."""

    inserts: list[Record] = field(default_factory=list)
    deletes: list[Record] = field(default_factory=list)

    def apply(self, store: Store) -> None:
        """Stage all inserts and deletes on ``store`` (does not save)."""
        for record in self.deletes:
            store.delete(record)
        for record in self.inserts:
            store.insert(record)

    def __bool__(self) -> bool:
        return bool(self.inserts or self.deletes)


@dataclass
class TodaySelection:
    """
    Result of a daily card selection.

    Attributes:
        selected: Cards to show today (at most ``limit``)
        new_exposures: One record per selected card, dated today
        expired_exposures: History records past the retention window
        used_fallback: Whether the cool-down constraint had to be dropped
    """

    selected: list[KnowledgeCard] = field(default_factory=list)
    new_exposures: list[ExposureRecord] = field(default_factory=list)
    expired_exposures: list[ExposureRecord] = field(default_factory=list)
    used_fallback: bool = False

    @property
    def changes(self) -> ChangeSet:
        return ChangeSet(
            inserts=list(self.new_exposures),
            deletes=list(self.expired_exposures),
        )


def marked_today_ids(progress: Iterable[CardProgress], today: date) -> set[str]:
    """Ids of cards with a learned mark on ``today``."""
    return {p.card_id for p in progress if today in p.marked_dates}


def recently_shown_ids(
    exposures: Iterable[ExposureRecord], today: date, cooldown_days: int
) -> set[str]:
    """Ids of cards shown on or after ``today - cooldown_days``."""
    window_start = days_before(today, cooldown_days)
    return {e.card_id for e in exposures if e.shown_date >= window_start}


def expired_exposures(
    exposures: Iterable[ExposureRecord], today: date, retention_days: int
) -> list[ExposureRecord]:
    """Exposure records shown before ``today - retention_days``."""
    cutoff = days_before(today, retention_days)
    return [e for e in exposures if e.shown_date < cutoff]


def select_today_cards(
    pool: Sequence[KnowledgeCard],
    progress: Sequence[CardProgress],
    exposures: Sequence[ExposureRecord],
    limit: int,
    now: DayLike,
    session_id: str,
    rng: Optional[random.Random] = None,
    cooldown_days: Optional[int] = None,
    retention_days: Optional[int] = None,
) -> TodaySelection:
    """
    Select today's cards with anti-repeat cool-down.

    Args:
        pool: All knowledge cards
        progress: Learned-mark history for cards
        exposures: Exposure history
        limit: Number of cards wanted; 0 selects nothing
        now: Current time (truncated to a day)
        session_id: Identifier stamped on the new exposure records
        rng: Random source for sampling (default: fresh Random)
        cooldown_days: Defaults to settings.KNOWLEDGE_COOLDOWN_DAYS
        retention_days: Defaults to settings.KNOWLEDGE_EXPOSURE_RETENTION_DAYS

    Returns:
        TodaySelection with the cards and exposure bookkeeping.

    Raises:
        PreconditionError: If limit is negative.
    """
    if limit < 0:
        raise PreconditionError(f"limit must be non-negative, got {limit}")

    if cooldown_days is None:
        cooldown_days = settings.KNOWLEDGE_COOLDOWN_DAYS
    if retention_days is None:
        retention_days = settings.KNOWLEDGE_EXPOSURE_RETENTION_DAYS
    rng = rng or random.Random()
    today = day_of(now)

    marked = marked_today_ids(progress, today)
    recent = recently_shown_ids(exposures, today, cooldown_days)

    cards: list[KnowledgeCard] = []
    seen: set[str] = set()
    for card in pool:
        if card.id not in seen:
            seen.add(card.id)
            cards.append(card)

    fallback = [card for card in cards if card.id not in marked]
    primary = [card for card in fallback if card.id not in recent]

    used_fallback = False
    if limit == 0:
        selected = []
    elif len(primary) >= limit:
        selected = rng.sample(primary, limit)
    else:
        used_fallback = True
        selected = rng.sample(fallback, min(limit, len(fallback)))

    selection = TodaySelection(
        selected=selected,
        new_exposures=[
            ExposureRecord(card_id=card.id, shown_date=today, session_id=session_id)
            for card in selected
        ],
        expired_exposures=expired_exposures(exposures, today, retention_days),
        used_fallback=used_fallback,
    )

    logger.debug(
        f"Selected {len(selected)}/{limit} cards for {today} "
        f"(pool={len(cards)}, marked={len(marked)}, recent={len(recent)}, "
        f"primary={len(primary)}, fallback={used_fallback}, "
        f"expired={len(selection.expired_exposures)})"
    )
    return selection


def mark_learned_record(
    existing: Optional[CardProgress], card_id: str, today: DayLike
) -> CardProgress:
    """
    Add a learned mark for ``today`` to one progress record.

    Marking the same card twice on one day is a no-op, so ``marked_dates``
    holds at most one entry per day.

    Args:
        existing: The card's progress record, or None if never marked
        card_id: Card being marked
        today: Day of the mark

    Returns:
        The new (or unchanged) progress record.
    """
    today = day_of(today)
    if existing is None:
        return CardProgress(card_id=card_id, marked_dates=[today])
    if today in existing.marked_dates:
        return existing
    return existing.model_copy(
        update={"marked_dates": [*existing.marked_dates, today]}
    )


def mark_learned(
    progress: Sequence[CardProgress], card_id: str, today: DayLike
) -> list[CardProgress]:
    """
    Return ``progress`` with ``card_id`` marked learned on ``today``.

    The input sequence is not modified.
    """
    updated = list(progress)
    for i, record in enumerate(updated):
        if record.card_id == card_id:
            updated[i] = mark_learned_record(record, card_id, today)
            return updated

    updated.append(mark_learned_record(None, card_id, today))
    return updated


def learned_today_count(
    progress: Iterable[CardProgress], card_ids: Iterable[str], today: DayLike
) -> int:
    """
    Count distinct cards in ``card_ids`` marked learned on ``today``.

    Duplicate marks on one day (e.g. from older data) count once.
    """
    marked = marked_today_ids(progress, day_of(today))
    return len(set(card_ids) & marked)
