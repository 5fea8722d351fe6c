"""SharedPath model — persisted rows of the share registry.

Provides ``SharedPathBase`` (non-table) and ``SharedPath`` (concrete table).
Subclass ``SharedPathBase`` with ``table=True`` and a custom ``__tablename__``
to use a different table name.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class SharedPathBase(SQLModel):
    """Base fields for a shared path. Subclass with ``table=True`` for a concrete table."""

    path: str = Field(primary_key=True)
    scheme: str = Field(default="Private")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class SharedPath(SharedPathBase, table=True):
    """Default shared path table — ``fileexplorer_shared_paths``."""

    __tablename__ = "fileexplorer_shared_paths"
