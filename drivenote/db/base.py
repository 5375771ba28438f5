"""
Database Base Configuration

Sets up the SQLAlchemy engine and session management for the persistence
adapter. SQLite by default; any SQLAlchemy URL works via DATABASE_URL.

Usage:
    from drivenote.db.base import session_maker, init_db

    init_db()
    with session_maker() as session:
        store = SqlAlchemyStore(session)
"""

from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from drivenote.config import settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def build_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for ``url`` (defaults to settings.DATABASE_URL)."""
    return create_engine(url or settings.DATABASE_URL, echo=settings.DEBUG)


engine = build_engine()

session_maker = sessionmaker(engine, expire_on_commit=False)


# Import models AFTER Base is defined to avoid circular imports.
# This ensures all models are registered with Base.metadata.
from drivenote.db import models  # noqa: F401, E402


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables that don't exist yet."""
    Base.metadata.create_all(bind or engine)
