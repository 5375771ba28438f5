"""
SQLAlchemy Store Adapter

Implements the Store contract over a SQLAlchemy ``Session``. Records are
converted to rows on commit and validated back into Pydantic records on load.

Usage:
    from drivenote.db.base import init_db, session_maker
    from drivenote.db.sqlalchemy_store import SqlAlchemyStore

    init_db()
    with session_maker() as session:
        store = SqlAlchemyStore(session)
        service = KnowledgeService(store)
"""

import logging
from enum import Enum
from typing import Any

from sqlalchemy import JSON, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from drivenote.db.base import Base
from drivenote.db.models import (
    ActivityLogRow,
    CardProgressRow,
    ChecklistPunchRow,
    DriveRouteRow,
    ExposureRecordRow,
    KnowledgeCardRow,
    TagFrequencyRow,
)
from drivenote.db.store import R, StagedStore
from drivenote.errors import PersistenceError
from drivenote.models import (
    ActivityLog,
    CardProgress,
    ChecklistPunch,
    ExposureRecord,
    KnowledgeCard,
    Record,
    Route,
    TagFrequencySnapshot,
)

logger = logging.getLogger(__name__)

# Record type → table
ROW_TYPES: dict[type[Record], type[Base]] = {
    ActivityLog: ActivityLogRow,
    ChecklistPunch: ChecklistPunchRow,
    Route: DriveRouteRow,
    KnowledgeCard: KnowledgeCardRow,
    CardProgress: CardProgressRow,
    ExposureRecord: ExposureRecordRow,
    TagFrequencySnapshot: TagFrequencyRow,
}


class SqlAlchemyStore(StagedStore):
    """Store backed by a SQLAlchemy session."""

    def __init__(self, session: Session):
        """
        Initialize the store.

        Args:
            session: SQLAlchemy session. The store commits and rolls it back.
        """
        super().__init__()
        self.session = session

    def _load(self, model: type[R]) -> list[R]:
        row_type = self._row_type(model)
        rows = self.session.execute(select(row_type)).scalars().all()
        return [model.model_validate(row) for row in rows]

    def _commit(self, inserts: list[Record], deletes: list[Record]) -> None:
        try:
            for record in deletes:
                row = self.session.get(self._row_type(type(record)), record.id)
                if row is not None:
                    self.session.delete(row)
            for record in inserts:
                self.session.merge(self._to_row(record))
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Database commit failed: {e}") from e

    @staticmethod
    def _row_type(model: type[Record]) -> type[Base]:
        try:
            return ROW_TYPES[model]
        except KeyError:
            raise TypeError(f"No table registered for {model.__name__}") from None

    def _to_row(self, record: Record) -> Base:
        """Convert a record to a row, JSON-encoding nested values."""
        row_type = self._row_type(type(record))
        python_values = record.model_dump()
        json_values = record.model_dump(mode="json")

        values: dict[str, Any] = {}
        for column in row_type.__table__.columns:
            if isinstance(column.type, JSON):
                value = json_values[column.name]
            else:
                value = python_values[column.name]
                if isinstance(value, Enum):
                    value = value.value
            values[column.name] = value

        return row_type(**values)
