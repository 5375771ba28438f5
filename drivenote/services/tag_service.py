"""
Tag Suggestion Service

Maintains a bounded tag usage frequency table and ranks tag suggestions for
the log editor.

Responsibilities:
- Count tag usage across saved logs
- Keep at most TAG_MAX_STORE distinct tags, evicting the least used
  (ties broken by tag name)
- Rank the top TAG_TOP_LIMIT tags by (count desc, name asc)
- Suggest tags by prefix: starts-with matches first, then substring matches

The table is persisted as one TagFrequencySnapshot blob.

Usage:
    from drivenote.services.tag_service import TagSuggestionService

    service = TagSuggestionService(store)
    service.record(["rain", "night"])
    service.suggestions(prefix="ra", limit=5, excluding=["night"])
"""

import logging
import threading
from typing import Iterable, Optional

from drivenote.config import settings
from drivenote.db.store import Store
from drivenote.errors import PersistenceError, PreconditionError
from drivenote.models.tags import TagFrequencySnapshot

logger = logging.getLogger(__name__)


class TagFrequencyTable:
    """
    Size-bounded tag → count table with an eagerly ranked top list.

    Attributes:
        max_store: Maximum number of distinct tags kept after ``record``
        top_limit: Number of tags kept in the ranked ``top_tags`` cache
    """

    def __init__(
        self,
        counts: Optional[dict[str, int]] = None,
        max_store: Optional[int] = None,
        top_limit: Optional[int] = None,
    ):
        self.max_store = settings.TAG_MAX_STORE if max_store is None else max_store
        self.top_limit = settings.TAG_TOP_LIMIT if top_limit is None else top_limit
        if self.max_store < 0 or self.top_limit < 0:
            raise PreconditionError("max_store and top_limit must be non-negative")

        self._freq: dict[str, int] = dict(counts or {})
        self._trim()
        self._top_tags = self._rank()

    def __len__(self) -> int:
        return len(self._freq)

    @property
    def top_tags(self) -> list[str]:
        """Tags ranked by (count desc, name asc), capped to ``top_limit``."""
        return list(self._top_tags)

    def copy(self) -> "TagFrequencyTable":
        return TagFrequencyTable(self._freq, self.max_store, self.top_limit)

    def record(self, tags: Iterable[str]) -> bool:
        """
        Count one use of each non-empty tag.

        Args:
            tags: Tags used in a saved log (duplicates count twice).

        Returns:
            True if the table changed.
        """
        changed = False
        for tag in tags:
            tag = tag.strip()
            if not tag:
                continue
            self._freq[tag] = self._freq.get(tag, 0) + 1
            changed = True

        if changed:
            self._trim()
            self._top_tags = self._rank()
        return changed

    def suggestions(
        self,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        excluding: Iterable[str] = (),
    ) -> list[str]:
        """
        Suggest tags from the ranked top list.

        Args:
            prefix: Typed text to match case-insensitively (optional)
            limit: Maximum suggestions (default TAG_SUGGESTION_LIMIT)
            excluding: Tags already entered; compared case-insensitively

        Returns:
            Without a prefix, the first ``limit`` top tags. With a prefix,
            tags starting with it, then tags containing it, each bucket in
            ranking order.

        Raises:
            PreconditionError: If limit is negative.
        """
        if limit is None:
            limit = settings.TAG_SUGGESTION_LIMIT
        if limit < 0:
            raise PreconditionError(f"limit must be non-negative, got {limit}")

        excluded = {tag.strip().lower() for tag in excluding}
        base = [tag for tag in self._top_tags if tag.lower() not in excluded]

        needle = (prefix or "").strip().lower()
        if not needle:
            return base[:limit]

        starts = [tag for tag in base if tag.lower().startswith(needle)]
        if len(starts) >= limit:
            return starts[:limit]

        contains = [
            tag
            for tag in base
            if needle in tag.lower() and not tag.lower().startswith(needle)
        ]
        return (starts + contains)[:limit]

    def frequency(self, tag: str) -> int:
        """Usage count for ``tag`` (stripped like in ``record``), 0 if unknown."""
        return self._freq.get(tag.strip(), 0)

    def snapshot(self) -> dict[str, int]:
        """Copy of the full frequency table."""
        return dict(self._freq)

    def _trim(self) -> None:
        """Evict the least used tags beyond ``max_store``."""
        overflow = len(self._freq) - self.max_store
        if overflow <= 0:
            return

        victims = sorted(self._freq.items(), key=lambda kv: (kv[1], kv[0]))[:overflow]
        for tag, _ in victims:
            del self._freq[tag]
        logger.debug(f"Evicted {overflow} tags: {[tag for tag, _ in victims]}")

    def _rank(self) -> list[str]:
        ranked = sorted(self._freq.items(), key=lambda kv: (-kv[1], kv[0]))
        return [tag for tag, _ in ranked[: self.top_limit]]


def record_tag_usage(table: TagFrequencyTable, tags: Iterable[str]) -> TagFrequencyTable:
    """Return a copy of ``table`` with ``tags`` recorded. The input is unchanged."""
    updated = table.copy()
    updated.record(tags)
    return updated


def tag_suggestions(
    table: TagFrequencyTable,
    prefix: Optional[str] = None,
    limit: Optional[int] = None,
    excluding: Iterable[str] = (),
) -> list[str]:
    """Suggest tags from ``table``. See TagFrequencyTable.suggestions."""
    return table.suggestions(prefix=prefix, limit=limit, excluding=excluding)


class TagSuggestionService:
    """
    Store-backed tag frequency table.

    Loads the persisted table once and serializes ``record`` calls with a
    lock, since each is a read-modify-persist sequence.
    """

    def __init__(self, store: Store, table_key: Optional[str] = None):
        """
        Initialize tag suggestion service.

        Args:
            store: Record store holding the TagFrequencySnapshot
            table_key: Snapshot id (defaults to settings.TAG_TABLE_KEY)
        """
        self.store = store
        self.table_key = table_key or settings.TAG_TABLE_KEY
        self._lock = threading.Lock()
        self._table = self._load()

    @property
    def table(self) -> TagFrequencyTable:
        return self._table

    def record(self, tags: list[str]) -> TagFrequencyTable:
        """
        Record tag usage and persist the table.

        Args:
            tags: Tags from a saved log entry

        Returns:
            The updated table

        Raises:
            PersistenceError: If the save fails. The in-memory table is
                already updated and the snapshot stays staged for retry;
                ``result`` holds the updated table.
        """
        with self._lock:
            updated = record_tag_usage(self._table, tags)
            if updated.snapshot() == self._table.snapshot():
                return self._table

            self._table = updated
            self.store.insert(
                TagFrequencySnapshot(id=self.table_key, counts=updated.snapshot())
            )
            try:
                self.store.save()
            except PersistenceError as e:
                logger.error(f"Failed to persist tag frequencies: {e}")
                raise PersistenceError(
                    "Tag frequencies updated but not saved", result=updated
                ) from e

            logger.debug(f"Recorded tags {tags}; table size {len(updated)}")
            return updated

    def suggestions(
        self,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        excluding: Iterable[str] = (),
    ) -> list[str]:
        return tag_suggestions(self._table, prefix, limit, excluding)

    def frequency(self, tag: str) -> int:
        return self._table.frequency(tag)

    def frequency_snapshot(self) -> dict[str, int]:
        """Frequency table copy for external weighting."""
        return self._table.snapshot()

    def _load(self) -> TagFrequencyTable:
        snapshots = self.store.fetch_all(
            TagFrequencySnapshot, lambda s: s.id == self.table_key
        )
        counts = snapshots[0].counts if snapshots else {}
        logger.debug(f"Loaded {len(counts)} tag frequencies from '{self.table_key}'")
        return TagFrequencyTable(counts)
