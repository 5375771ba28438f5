"""
Tag Frequency Snapshot

The tag usage table is persisted as a single blob keyed by
``settings.TAG_TABLE_KEY`` rather than one record per tag.
"""

from pydantic import Field

from drivenote.models.base import Record


class TagFrequencySnapshot(Record):
    """Persisted tag → usage count mapping."""

    counts: dict[str, int] = Field(default_factory=dict)
