"""
Knowledge Service

Store-backed orchestration of the daily knowledge cards: selection with
anti-repeat bookkeeping, learned marks and default card seeding.

Each mutating operation runs as one critical section: fetch, compute, stage
changes, save.

Usage:
    from drivenote.services.knowledge import KnowledgeService

    service = KnowledgeService(store)
    service.seed_default_cards()
    cards = service.get_today_cards()
    service.mark_card_learned(cards[0].id)
"""

import logging
import random
import threading
from datetime import date, datetime
from typing import Any, Optional

from drivenote.config import settings, yaml_config
from drivenote.db.store import Store
from drivenote.errors import PersistenceError
from drivenote.models.base import new_id
from drivenote.models.knowledge import CardProgress, ExposureRecord, KnowledgeCard
from drivenote.services.knowledge.exposure_scheduler import (
    TodaySelection,
    learned_today_count,
    mark_learned_record,
    marked_today_ids,
    select_today_cards,
)
from drivenote.utils.dates import day_of, now_local

logger = logging.getLogger(__name__)


def default_cards(config: Optional[dict[str, Any]] = None) -> list[KnowledgeCard]:
    """
    Load the default knowledge cards from YAML configuration.

    Args:
        config: Parsed configuration (defaults to drivenote/config/default.yaml)

    Returns:
        Cards listed under knowledge.default_cards, or an empty list.
    """
    config = yaml_config if config is None else config
    entries = (config.get("knowledge") or {}).get("default_cards") or []
    return [KnowledgeCard.model_validate(entry) for entry in entries]


class KnowledgeService:
    """
    Service for today's knowledge cards.

    Provides:
    - Daily selection with cool-down and exposure pruning
    - Same-day caching of the selection and forced refresh
    - Learned marks (one per card per day)
    - "Later" marks: cards set aside for today, kept in memory only
    - Default card seeding
    """

    def __init__(
        self,
        store: Store,
        rng: Optional[random.Random] = None,
        daily_limit: Optional[int] = None,
    ):
        """
        Initialize the knowledge service.

        Args:
            store: Record store
            rng: Random source for card sampling
            daily_limit: Cards per day (defaults to settings.KNOWLEDGE_DAILY_CARD_LIMIT)
        """
        self.store = store
        self.rng = rng or random.Random()
        self.daily_limit = (
            settings.KNOWLEDGE_DAILY_CARD_LIMIT if daily_limit is None else daily_limit
        )
        self._lock = threading.RLock()
        self._cached_day: Optional[date] = None
        self._cached_cards: list[KnowledgeCard] = []
        # Cards the user chose to look at later; reset on refresh and day change
        self._later_viewed_day: Optional[date] = None
        self._later_viewed_ids: set[str] = set()

    def all_cards(self) -> list[KnowledgeCard]:
        return self.store.fetch_all(KnowledgeCard)

    def seed_default_cards(self) -> int:
        """
        Insert the default cards if the store has no cards yet.

        Returns:
            Number of cards inserted
        """
        with self._lock:
            if self.store.fetch_all(KnowledgeCard):
                return 0

            cards = default_cards()
            for card in cards:
                self.store.insert(card)
            self.store.save()

            logger.info(f"Seeded {len(cards)} default knowledge cards")
            return len(cards)

    def select_today_cards(
        self,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> TodaySelection:
        """
        Run a selection and persist its exposure bookkeeping.

        New exposure records are inserted and expired ones deleted in one save.

        Args:
            now: Current time (default: now)
            limit: Cards wanted (default: daily limit)

        Returns:
            TodaySelection

        Raises:
            PreconditionError: If limit is negative.
            PersistenceError: If the save fails; ``result`` holds the
                selection, which is still valid to show.
        """
        now = now or now_local()
        limit = self.daily_limit if limit is None else limit

        with self._lock:
            return self._select_and_save(now, limit)

    def get_today_cards(self, now: Optional[datetime] = None) -> list[KnowledgeCard]:
        """
        Today's cards, selecting only once per day.

        Returns the cached selection when it was made on the same day and is
        not empty, so every screen shows the same cards in the same order.
        """
        now = now or now_local()
        with self._lock:
            if self._cached_day == day_of(now) and self._cached_cards:
                return list(self._cached_cards)
            return list(self._select_and_save(now, self.daily_limit).selected)

    def refresh_today_cards(self, now: Optional[datetime] = None) -> list[KnowledgeCard]:
        """
        Draw a new set of cards for today.

        Today's exposure records are deleted so today's earlier picks don't
        count against the cool-down, and "later" marks are dropped. The
        deletes and the new exposures are committed in a single save: if it
        fails, nothing is lost and the staged work can be retried with
        ``store.save()``.

        Raises:
            PersistenceError: If the save fails; ``result`` holds the new
                selection.
        """
        now = now or now_local()
        with self._lock:
            cleared = self._stage_exposure_deletes(day_of(now))
            self._cached_day = None
            self._cached_cards = []
            self._later_viewed_ids.clear()
            self._later_viewed_day = None
            logger.info(f"Cleared {cleared} exposure records for a fresh draw")

            selection = self._select_and_save(
                now, self.daily_limit, pending=bool(cleared)
            )
            return list(selection.selected)

    def clear_today_exposures(self, now: Optional[datetime] = None) -> int:
        """Delete exposure records dated today. Returns how many were removed."""
        today = day_of(now or now_local())
        with self._lock:
            cleared = self._stage_exposure_deletes(today)
            if cleared:
                self.store.save()
            return cleared

    def mark_card_learned(
        self, card_id: str, now: Optional[datetime] = None
    ) -> CardProgress:
        """
        Mark a card learned today.

        Idempotent per day: a second mark on the same day changes nothing.

        Raises:
            PersistenceError: If the save fails; ``result`` holds the
                updated progress record.
        """
        today = day_of(now or now_local())
        with self._lock:
            existing = self._progress_for(card_id)
            updated = mark_learned_record(existing, card_id, today)
            if updated is existing:
                return updated

            self.store.insert(updated)
            try:
                self.store.save()
            except PersistenceError as e:
                logger.error(f"Failed to persist progress for card {card_id}: {e}")
                raise PersistenceError(
                    "Card marked but progress not saved", result=updated
                ) from e

            logger.info(f"Marked card {card_id} learned on {today}")
            return updated

    def mark_card_later_viewed(
        self, card_id: str, now: Optional[datetime] = None
    ) -> None:
        """
        Set a card aside to look at later today.

        Not persisted and not a learned mark: the card counts as handled for
        ``all_learned_today`` until the next refresh or the next day.
        """
        today = day_of(now or now_local())
        with self._lock:
            if self._later_viewed_day != today:
                self._later_viewed_ids = set()
                self._later_viewed_day = today
            self._later_viewed_ids.add(card_id)
            logger.debug(f"Card {card_id} set aside for later on {today}")

    def is_card_later_viewed(
        self, card_id: str, now: Optional[datetime] = None
    ) -> bool:
        with self._lock:
            return card_id in self._later_viewed_on(day_of(now or now_local()))

    def is_card_learned_today(
        self, card_id: str, now: Optional[datetime] = None
    ) -> bool:
        progress = self._progress_for(card_id)
        return progress is not None and day_of(now or now_local()) in progress.marked_dates

    def learned_today_count(
        self,
        card_ids: Optional[list[str]] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Count today's cards marked learned today.

        Args:
            card_ids: Cards to check (default: the cached selection)
            now: Current time
        """
        with self._lock:
            if card_ids is None:
                card_ids = [card.id for card in self._cached_cards]
            return learned_today_count(
                self.store.fetch_all(CardProgress), card_ids, now or now_local()
            )

    def all_learned_today(self, now: Optional[datetime] = None) -> bool:
        """
        Whether every card in today's cached selection has been handled.

        A card is handled when it is marked learned today or set aside with
        ``mark_card_later_viewed``.
        """
        today = day_of(now or now_local())
        with self._lock:
            if not self._cached_cards:
                return False

            learned = marked_today_ids(self.store.fetch_all(CardProgress), today)
            handled = learned | self._later_viewed_on(today)
            return all(card.id in handled for card in self._cached_cards)

    def _select_and_save(
        self, now: datetime, limit: int, pending: bool = False
    ) -> TodaySelection:
        """
        Select, stage the exposure changes and save once.

        ``pending`` forces the save when the caller staged other work first.
        Must be called with the lock held.
        """
        selection = select_today_cards(
            pool=self.store.fetch_all(KnowledgeCard),
            progress=self.store.fetch_all(CardProgress),
            exposures=self.store.fetch_all(ExposureRecord),
            limit=limit,
            now=now,
            session_id=new_id(),
            rng=self.rng,
        )

        changes = selection.changes
        if changes or pending:
            changes.apply(self.store)
            try:
                self.store.save()
            except PersistenceError as e:
                logger.error(f"Failed to persist card exposures: {e}")
                raise PersistenceError(
                    "Cards selected but exposures not saved", result=selection
                ) from e

        self._cached_day = day_of(now)
        self._cached_cards = list(selection.selected)

        logger.info(
            f"Selected {len(selection.selected)} knowledge cards for "
            f"{self._cached_day}"
        )
        return selection

    def _stage_exposure_deletes(self, day: date) -> int:
        """Stage deletion of exposure records shown on ``day``."""
        records = self.store.fetch_all(ExposureRecord, lambda e: e.shown_date == day)
        for record in records:
            self.store.delete(record)
        return len(records)

    def _later_viewed_on(self, today: date) -> set[str]:
        if self._later_viewed_day != today:
            return set()
        return self._later_viewed_ids

    def _progress_for(self, card_id: str) -> Optional[CardProgress]:
        records = self.store.fetch_all(CardProgress, lambda p: p.card_id == card_id)
        return records[0] if records else None
