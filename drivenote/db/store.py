"""
Storage Collaborator

The analytics core never talks to a database directly. Services depend on the
``Store`` protocol below: fetch records, stage inserts/deletes, then commit
them atomically with ``save()``.

Semantics shared by every implementation (see ``StagedStore``):
- ``insert`` stages an upsert keyed by (record type, id)
- ``delete`` stages a removal; deleting a staged insert cancels it
- ``fetch_all`` returns committed records overlaid with staged changes
- ``save`` commits all staged work in one transaction; on failure it raises
  PersistenceError and keeps the staged work so the save can be retried
- ``discard`` drops staged work

Usage:
    store = InMemoryStore()
    store.insert(card)
    store.save()
    cards = store.fetch_all(KnowledgeCard)
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol, TypeVar

from drivenote.errors import PersistenceError
from drivenote.models.base import Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

_Key = tuple[type, str]


class Store(Protocol):
    """Abstract record store consumed by the services."""

    def fetch_all(
        self, model: type[R], predicate: Optional[Callable[[R], bool]] = None
    ) -> list[R]: ...

    def insert(self, record: Record) -> None: ...

    def delete(self, record: Record) -> None: ...

    def save(self) -> None: ...

    def discard(self) -> None: ...


class StagedStore(ABC):
    """
    Base class implementing staging and commit bookkeeping.

    Subclasses provide ``_load`` (committed records of one type) and
    ``_commit`` (apply inserts and deletes atomically, raising
    PersistenceError on failure).
    """

    def __init__(self):
        self._pending_inserts: dict[_Key, Record] = {}
        self._pending_deletes: dict[_Key, Record] = {}

    @staticmethod
    def _key(record: Record) -> _Key:
        return type(record), record.id

    @property
    def has_changes(self) -> bool:
        """Whether there is staged work waiting for ``save()``."""
        return bool(self._pending_inserts or self._pending_deletes)

    def fetch_all(
        self, model: type[R], predicate: Optional[Callable[[R], bool]] = None
    ) -> list[R]:
        """
        Fetch all records of a type.

        Args:
            model: Record class to fetch
            predicate: Optional filter applied to each record

        Returns:
            Records in storage order with staged changes applied
        """
        records = {r.id: r for r in self._load(model)}

        for (kind, record_id), _ in self._pending_deletes.items():
            if kind is model:
                records.pop(record_id, None)
        for (kind, record_id), record in self._pending_inserts.items():
            if kind is model:
                records[record_id] = record

        result = list(records.values())
        if predicate is not None:
            result = [r for r in result if predicate(r)]
        return result

    def insert(self, record: Record) -> None:
        key = self._key(record)
        self._pending_deletes.pop(key, None)
        self._pending_inserts[key] = record

    def delete(self, record: Record) -> None:
        key = self._key(record)
        if self._pending_inserts.pop(key, None) is not None and not self._exists(
            record
        ):
            return
        self._pending_deletes[key] = record

    def save(self) -> None:
        """
        Commit staged inserts and deletes atomically.

        Raises:
            PersistenceError: If the commit fails. Staged work is kept.
        """
        if not self.has_changes:
            return

        inserts = list(self._pending_inserts.values())
        deletes = list(self._pending_deletes.values())
        try:
            self._commit(inserts, deletes)
        except PersistenceError:
            logger.error(
                f"Save failed with {len(inserts)} inserts and {len(deletes)} "
                f"deletes pending"
            )
            raise

        self.discard()
        logger.debug(f"Saved {len(inserts)} inserts, {len(deletes)} deletes")

    def discard(self) -> None:
        """Drop all staged work."""
        self._pending_inserts.clear()
        self._pending_deletes.clear()

    def _exists(self, record: Record) -> bool:
        return any(r.id == record.id for r in self._load(type(record)))

    @abstractmethod
    def _load(self, model: type[R]) -> list[R]:
        """Return committed records of ``model``."""

    @abstractmethod
    def _commit(self, inserts: list[Record], deletes: list[Record]) -> None:
        """Apply inserts (upserts) and deletes in one transaction."""


class InMemoryStore(StagedStore):
    """
    Dict-backed store.

    Used by tests and local tooling. Commits swap in a fully built copy of the
    data so a failing commit leaves committed state untouched.
    """

    def __init__(self, records: Optional[list[Record]] = None):
        super().__init__()
        self._data: dict[type, dict[str, Record]] = {}
        for record in records or []:
            self._data.setdefault(type(record), {})[record.id] = record

    def _load(self, model: type[R]) -> list[R]:
        return list(self._data.get(model, {}).values())

    def _commit(self, inserts: list[Record], deletes: list[Record]) -> None:
        data = {kind: dict(rows) for kind, rows in self._data.items()}
        for record in deletes:
            data.get(type(record), {}).pop(record.id, None)
        for record in inserts:
            data.setdefault(type(record), {})[record.id] = record
        self._data = data
