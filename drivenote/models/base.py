"""
Base Record Model

Every entity exchanged with the store derives from ``Record``: a frozen
Pydantic model with a string ``id``. Updates go through ``model_copy`` so the
core's functions stay pure.

Architecture:
    Store (SQLAlchemy row / in-memory dict) → Record (from_attributes=True)
    Service → Record.model_copy(update=...) → Store.insert()
"""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid4())


class Record(BaseModel):
    """
    Base model for persisted records.

    Features:
        - frozen=True: records are values; use model_copy(update=...) to change
        - from_attributes=True: allows ORM row conversion
        - extra="forbid": unknown fields are rejected
    """

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        extra="forbid",
    )

    id: str = Field(default_factory=new_id)
