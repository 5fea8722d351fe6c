"""ShareRegistry — share link issue, lookup and resolution.

Holds ``path -> AuthScheme`` for the lifetime of the service instance.
Share identifiers are derived from the path on every call and never
stored, so resolving an identifier is a linear scan over the registry.
Two paths whose identifiers collide are not told apart: the first one in
insertion order wins.

When a ``ShareStore`` is attached, mutations are written through to it
and ``load()`` hydrates the registry from it.  The store is written
first, so a failed write leaves the in-memory registry unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .exceptions import ShareNotFoundError
from .types import AuthScheme, ShareEntry
from .utils import share_id_for, share_link_for

if TYPE_CHECKING:
    from .share_store import ShareStore

logger = logging.getLogger(__name__)


class ShareRegistry:
    """Maps shared paths to their access scheme.

    All read-modify-write sequences and scans hold one ``asyncio.Lock``;
    concurrent shares of the same path are last-write-wins.
    """

    def __init__(self, store: ShareStore | None = None) -> None:
        self._shares: dict[str, AuthScheme] = {}
        self._lock = asyncio.Lock()
        self._store = store

    def __len__(self) -> int:
        return len(self._shares)

    def __contains__(self, path: object) -> bool:
        return path in self._shares

    @property
    def store(self) -> ShareStore | None:
        return self._store

    async def load(self) -> int:
        """Replace in-memory state with the store's rows. Returns the row count."""
        if self._store is None:
            return 0
        entries = await self._store.load_all()
        async with self._lock:
            self._shares = {e.path: e.scheme for e in entries}
        logger.debug("Loaded %d shared path(s)", len(entries))
        return len(entries)

    async def share(self, path: str, scheme: AuthScheme) -> str:
        """Share *path* under *scheme*, overwriting any previous scheme.

        The path is not checked for existence. Returns the share link.
        """
        scheme = AuthScheme(scheme)
        async with self._lock:
            if self._store is not None:
                await self._store.upsert(ShareEntry(path=path, scheme=scheme))
            self._shares[path] = scheme
        link = share_link_for(path)
        logger.info("Shared %s as %s at %s", path, scheme.value, link)
        return link

    async def unshare(self, path: str) -> bool:
        """Remove the share on *path*. Returns True if one existed."""
        async with self._lock:
            existed = path in self._shares
            if existed and self._store is not None:
                await self._store.delete(path)
            self._shares.pop(path, None)
        if existed:
            logger.info("Unshared %s", path)
        return existed

    def get(self, path: str) -> ShareEntry | None:
        scheme = self._shares.get(path)
        if scheme is None:
            return None
        return ShareEntry(path=path, scheme=scheme)

    def get_share_link(self, path: str) -> str | None:
        """The share link for *path*, or None when it is not shared."""
        if path not in self._shares:
            return None
        return share_link_for(path)

    def entries(self) -> list[ShareEntry]:
        """Snapshot of every share, in insertion order."""
        return [ShareEntry(path=p, scheme=s) for p, s in self._shares.items()]

    async def resolve(self, share_id: str) -> ShareEntry:
        """Find the entry whose derived identifier equals *share_id*.

        Raises:
            ShareNotFoundError: no shared path hashes to *share_id*.
        """
        async with self._lock:
            for path, scheme in self._shares.items():
                if share_id_for(path) == share_id:
                    return ShareEntry(path=path, scheme=scheme)
        raise ShareNotFoundError("File not found or not shared")
