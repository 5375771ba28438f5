"""
Unit tests for the record stores.

Tests staging semantics shared by every store and round trips through the
SQLAlchemy adapter on an in-memory SQLite database.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from drivenote.db.base import build_engine, init_db
from drivenote.db.sqlalchemy_store import SqlAlchemyStore
from drivenote.db.store import InMemoryStore
from drivenote.enums.activity import ChecklistMode, LogOutcome, RouteStatus
from drivenote.errors import PersistenceError
from drivenote.models import (
    ActivityLog,
    CardProgress,
    ChecklistPunch,
    ExposureRecord,
    KnowledgeCard,
    Route,
    TagFrequencySnapshot,
)


@pytest.fixture
def session():
    engine = build_engine("sqlite://")
    init_db(engine)
    with Session(engine, expire_on_commit=False) as session:
        yield session
    engine.dispose()


@pytest.fixture
def sql_store(session):
    return SqlAlchemyStore(session)


# ============================================================================
# Staging semantics
# ============================================================================


class TestStaging:
    """Tests for StagedStore bookkeeping (via InMemoryStore)."""

    def test_fetch_sees_staged_insert(self, store):
        card = KnowledgeCard(title="Mirrors")
        store.insert(card)

        assert store.has_changes
        assert store.fetch_all(KnowledgeCard) == [card]

    def test_insert_is_upsert(self, store):
        card = KnowledgeCard(id="c1", title="Old")
        store.insert(card)
        store.save()

        store.insert(card.model_copy(update={"title": "New"}))
        store.save()

        cards = store.fetch_all(KnowledgeCard)
        assert [c.title for c in cards] == ["New"]

    def test_fetch_by_type(self, store, make_exposure):
        store.insert(KnowledgeCard(title="A"))
        store.insert(make_exposure("c1"))

        assert len(store.fetch_all(KnowledgeCard)) == 1
        assert len(store.fetch_all(ExposureRecord)) == 1

    def test_predicate(self, store, make_cards):
        for card in make_cards(3):
            store.insert(card)

        assert [c.id for c in store.fetch_all(KnowledgeCard, lambda c: c.id == "card-1")] == [
            "card-1"
        ]

    def test_delete_cancels_uncommitted_insert(self, store):
        card = KnowledgeCard(title="A")
        store.insert(card)
        store.delete(card)

        assert not store.has_changes
        assert store.fetch_all(KnowledgeCard) == []

    def test_delete_committed_record(self, store):
        card = KnowledgeCard(title="A")
        store.insert(card)
        store.save()

        store.delete(card)
        assert store.fetch_all(KnowledgeCard) == []
        store.save()

        assert store.fetch_all(KnowledgeCard) == []
        assert not store.has_changes

    def test_reinsert_after_delete(self, store):
        card = KnowledgeCard(title="A")
        store.insert(card)
        store.save()

        store.delete(card)
        store.insert(card)
        store.save()

        assert store.fetch_all(KnowledgeCard) == [card]

    def test_discard(self, store):
        store.insert(KnowledgeCard(title="A"))
        store.discard()

        assert not store.has_changes
        assert store.fetch_all(KnowledgeCard) == []

    def test_failed_save_keeps_staged_work(self, store):
        card = KnowledgeCard(title="A")
        store.insert(card)

        with patch.object(store, "_commit", side_effect=PersistenceError("boom")):
            with pytest.raises(PersistenceError):
                store.save()

        assert store.has_changes
        store.save()
        assert store.fetch_all(KnowledgeCard) == [card]
        assert not store.has_changes

    def test_initial_records(self, make_cards):
        store = InMemoryStore(make_cards(2))

        assert not store.has_changes
        assert len(store.fetch_all(KnowledgeCard)) == 2


# ============================================================================
# SQLAlchemy adapter
# ============================================================================


class TestSqlAlchemyStore:
    """Round trips through SqlAlchemyStore."""

    def test_journal_records(self, sql_store, now):
        log = ActivityLog(timestamp=now, outcome=LogOutcome.MISTAKE, tags=["rain", "night"])
        punch = ChecklistPunch(
            timestamp=now, mode=ChecklistMode.POST, checked_item_count=4, score=70
        )
        sql_store.insert(log)
        sql_store.insert(punch)
        sql_store.save()

        assert sql_store.fetch_all(ActivityLog) == [log]
        assert sql_store.fetch_all(ChecklistPunch) == [punch]

    def test_route_with_samples(self, sql_store, make_sample, now):
        start = make_sample(31.2, 121.4, 0)
        end = make_sample(31.3, 121.5, 20)
        route = Route(
            start=start,
            waypoints=[make_sample(31.25, 121.45, 10)],
            end=end,
            status=RouteStatus.COMPLETED,
            started_at=now,
            ended_at=end.timestamp,
            distance=14000.0,
            duration=1200.0,
        )
        sql_store.insert(route)
        sql_store.save()

        (loaded,) = sql_store.fetch_all(Route)
        assert loaded == route

    def test_active_route_without_samples(self, sql_store, now):
        route = Route(started_at=now)
        sql_store.insert(route)
        sql_store.save()

        assert sql_store.fetch_all(Route) == [route]

    def test_knowledge_records(self, sql_store, make_cards, make_exposure, make_progress, today):
        card = make_cards(1)[0]
        progress = make_progress(card.id, today - timedelta(days=1), today)
        exposure = make_exposure(card.id, 3)
        for record in (card, progress, exposure):
            sql_store.insert(record)
        sql_store.save()

        assert sql_store.fetch_all(KnowledgeCard) == [card]
        assert sql_store.fetch_all(CardProgress) == [progress]
        assert sql_store.fetch_all(ExposureRecord) == [exposure]

    def test_tag_snapshot_update(self, sql_store):
        sql_store.insert(TagFrequencySnapshot(id="tags", counts={"rain": 1}))
        sql_store.save()
        sql_store.insert(TagFrequencySnapshot(id="tags", counts={"rain": 2, "fog": 1}))
        sql_store.save()

        (snapshot,) = sql_store.fetch_all(TagFrequencySnapshot)
        assert snapshot.counts == {"rain": 2, "fog": 1}

    def test_delete_and_insert_in_one_save(self, sql_store, make_exposure):
        old = make_exposure("c1", 40)
        sql_store.insert(old)
        sql_store.save()

        new = make_exposure("c2", 0)
        sql_store.delete(old)
        sql_store.insert(new)
        sql_store.save()

        assert sql_store.fetch_all(ExposureRecord) == [new]

    def test_commit_failure_raises_persistence_error(self, sql_store, session):
        card = KnowledgeCard(title="A")
        sql_store.insert(card)

        with patch.object(
            session, "commit", side_effect=OperationalError("COMMIT", {}, Exception("locked"))
        ):
            with pytest.raises(PersistenceError):
                sql_store.save()

        assert sql_store.has_changes
        sql_store.save()
        assert sql_store.fetch_all(KnowledgeCard) == [card]

    def test_unregistered_type(self, sql_store):
        with pytest.raises(TypeError):
            sql_store.fetch_all(dict)
