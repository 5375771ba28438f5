"""
Knowledge Card Models

- KnowledgeCard: static driving knowledge content, seeded once
- CardProgress: days on which a card was marked learned
- ExposureRecord: a card shown to the user on a given day/session, used only
  to avoid short-term repeats and pruned after the retention window
"""

from datetime import date

from pydantic import Field

from drivenote.models.base import Record


class KnowledgeCard(Record):
    """
    A driving knowledge card.

    Content follows a what / why / how structure.
    """

    title: str
    what: str = ""
    why: str = ""
    how: str = ""
    tags: list[str] = Field(default_factory=list)


class CardProgress(Record):
    """Learning progress for one card; one record per card ever marked."""

    card_id: str
    marked_dates: list[date] = Field(default_factory=list)


class ExposureRecord(Record):
    """One record per (card, selection event)."""

    card_id: str
    shown_date: date
    session_id: str
