"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
All timestamps are naive (local) so day truncation is zone independent.
"""

import random
from datetime import date, datetime, timedelta
from typing import Callable

import pytest

from drivenote.db.store import InMemoryStore
from drivenote.models import (
    CardProgress,
    ExposureRecord,
    KnowledgeCard,
    RouteSample,
)


# ============================================================================
# Time
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return datetime(2026, 10, 18, 9, 30)


@pytest.fixture
def today(now) -> date:
    return now.date()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible sampling."""
    return random.Random(1234)


# ============================================================================
# Store
# ============================================================================


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


# ============================================================================
# Record factories
# ============================================================================


@pytest.fixture
def make_cards() -> Callable[[int], list[KnowledgeCard]]:
    """Factory for a pool of knowledge cards with ids card-0 .. card-(n-1)."""

    def _make(n: int) -> list[KnowledgeCard]:
        return [
            KnowledgeCard(id=f"card-{i}", title=f"Card {i}", tags=["safety"])
            for i in range(n)
        ]

    return _make


@pytest.fixture
def make_exposure(today) -> Callable[..., ExposureRecord]:
    """Factory for an exposure record shown ``days_ago`` days before today."""

    def _make(card_id: str, days_ago: int = 0, session_id: str = "s-old") -> ExposureRecord:
        return ExposureRecord(
            card_id=card_id,
            shown_date=today - timedelta(days=days_ago),
            session_id=session_id,
        )

    return _make


@pytest.fixture
def make_progress() -> Callable[..., CardProgress]:
    def _make(card_id: str, *days: date) -> CardProgress:
        return CardProgress(card_id=card_id, marked_dates=list(days))

    return _make


@pytest.fixture
def make_sample(now) -> Callable[..., RouteSample]:
    """Factory for a route sample ``minutes`` after the reference time."""

    def _make(lat: float, lon: float, minutes: float = 0.0) -> RouteSample:
        return RouteSample(
            latitude=lat,
            longitude=lon,
            timestamp=now + timedelta(minutes=minutes),
        )

    return _make
