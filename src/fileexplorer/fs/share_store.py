"""ShareStore — SQL persistence for the share registry.

Stateless apart from the engine: each call opens its own session and
commits before returning.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from fileexplorer.models.shares import SharedPath

from .types import AuthScheme, ShareEntry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fileexplorer.models.shares import SharedPathBase

logger = logging.getLogger(__name__)


class ShareStore:
    """Reads and writes ``(path, scheme)`` rows.

    Constructor receives the concrete share model so callers can use
    custom SQLModel subclasses with different table names.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        share_model: type[SharedPathBase] = SharedPath,
    ) -> None:
        self._engine = engine
        self._share_model = share_model
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create the share table if it does not exist."""
        table = self._share_model.__table__  # type: ignore[unresolved-attribute]
        async with self._engine.begin() as conn:
            await conn.run_sync(lambda c: table.create(c, checkfirst=True))

    async def load_all(self) -> list[ShareEntry]:
        """All persisted entries. Rows with an unknown scheme are skipped."""
        model = self._share_model
        async with self._session_factory() as session:
            result = await session.execute(select(model))
            rows = result.scalars().all()

        entries: list[ShareEntry] = []
        for row in rows:
            try:
                scheme = AuthScheme(row.scheme)
            except ValueError:
                logger.warning("Skipping share on %s with unknown scheme %r", row.path, row.scheme)
                continue
            entries.append(ShareEntry(path=row.path, scheme=scheme))
        return entries

    async def upsert(self, entry: ShareEntry) -> None:
        """Insert or overwrite the row for ``entry.path``."""
        model = self._share_model
        async with self._session_factory() as session:
            row = await session.get(model, entry.path)
            if row is None:
                session.add(model(path=entry.path, scheme=entry.scheme.value))
            else:
                row.scheme = entry.scheme.value
                row.updated_at = datetime.now(UTC)
            await session.commit()

    async def delete(self, path: str) -> bool:
        """Remove the row for *path*. Returns True if found."""
        model = self._share_model
        async with self._session_factory() as session:
            row = await session.get(model, path)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True
