"""
SQLAlchemy Database Models

Tables backing SqlAlchemyStore. Column names mirror the Pydantic record
fields so rows convert with ``Model.model_validate(row)``.

Tables:
- activity_logs: journal mistakes/successes (read-only for the core)
- checklist_punches: checklist check-ins (read-only for the core)
- drive_routes: routes with frozen distance/duration once completed
- knowledge_cards: seeded knowledge content
- knowledge_progress: per-card learned days
- knowledge_exposures: anti-repeat exposure log, pruned after 30 days
- tag_frequency_tables: tag usage counts stored as one JSON blob

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    The corresponding Pydantic records live in drivenote/models/.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from drivenote.db.base import Base


# ===========================================
# Journal inputs
# ===========================================


class ActivityLogRow(Base):
    """Journal entry. ``outcome`` is "mistake" or "success"."""

    __tablename__ = "activity_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    outcome: Mapped[str] = mapped_column(String(20))
    tags: Mapped[list] = mapped_column(JSON, default=list)


class ChecklistPunchRow(Base):
    """Checklist check-in with its awarded score."""

    __tablename__ = "checklist_punches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    mode: Mapped[str] = mapped_column(String(10))
    checked_item_count: Mapped[int] = mapped_column(Integer, default=0)
    score: Mapped[int] = mapped_column(Integer, default=0)
    is_quick_complete: Mapped[bool] = mapped_column(Boolean, default=False)


# ===========================================
# Routes
# ===========================================


class DriveRouteRow(Base):
    """
    Drive route.

    Attributes:
        start / end: Optional location samples stored as JSON objects.
        waypoints: Time-ordered list of location samples (JSON array).
        distance: Metres, set only when status is "completed".
        duration: Seconds, set only when status is "completed".
    """

    __tablename__ = "drive_routes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    start: Mapped[Optional[dict]] = mapped_column(JSON)
    waypoints: Mapped[list] = mapped_column(JSON, default=list)
    end: Mapped[Optional[dict]] = mapped_column(JSON)
    status: Mapped[str] = mapped_column(String(20), index=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    distance: Mapped[Optional[float]] = mapped_column(Float)
    duration: Mapped[Optional[float]] = mapped_column(Float)


# ===========================================
# Knowledge
# ===========================================


class KnowledgeCardRow(Base):
    """Static knowledge card content."""

    __tablename__ = "knowledge_cards"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    what: Mapped[str] = mapped_column(Text, default="")
    why: Mapped[str] = mapped_column(Text, default="")
    how: Mapped[str] = mapped_column(Text, default="")
    tags: Mapped[list] = mapped_column(JSON, default=list)


class CardProgressRow(Base):
    """Learned days for one card, stored as a JSON array of ISO dates."""

    __tablename__ = "knowledge_progress"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    card_id: Mapped[str] = mapped_column(String(100), index=True)
    marked_dates: Mapped[list] = mapped_column(JSON, default=list)


class ExposureRecordRow(Base):
    """A card shown on a given day within a selection session."""

    __tablename__ = "knowledge_exposures"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    card_id: Mapped[str] = mapped_column(String(100), index=True)
    shown_date: Mapped[date] = mapped_column(Date, index=True)
    session_id: Mapped[str] = mapped_column(String(36))


# ===========================================
# Tags
# ===========================================


class TagFrequencyRow(Base):
    """Whole tag frequency table persisted as a single blob."""

    __tablename__ = "tag_frequency_tables"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    counts: Mapped[dict] = mapped_column(JSON, default=dict)
