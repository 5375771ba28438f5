"""
Persistence layer.

- store: the abstract Store contract and an in-memory implementation
- base / models / sqlalchemy_store: SQLAlchemy adapter

The SQLAlchemy modules are imported explicitly by callers that need them so
the in-memory store works without creating an engine.
"""

from drivenote.db.store import InMemoryStore, StagedStore, Store

__all__ = [
    "InMemoryStore",
    "StagedStore",
    "Store",
]
