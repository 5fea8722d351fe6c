"""StorageGateway protocol — runtime-checkable interfaces.

Split into a core protocol and opt-in capability protocols so that a
gateway only implements the primitives it actually has.  Every method may
raise ``StorageError`` (or ``PathNotFoundError`` when the path is absent);
callers never retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .types import DirEntry, FileMetadata


@runtime_checkable
class StorageGateway(Protocol):
    """Raw file and directory primitives the explorer is built on."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_dir(self, path: str) -> list[DirEntry]:
        """Immediate children of *path*, in the gateway's native order."""
        ...

    async def read(self, path: str) -> bytes: ...

    async def stat(self, path: str) -> FileMetadata: ...

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create_file(self, path: str) -> None:
        """Create an empty file at *path*, truncating an existing one."""
        ...

    async def write(self, path: str, content: bytes) -> None:
        """Replace the content of the existing file at *path*."""
        ...

    async def create_dir(self, path: str) -> None: ...

    async def remove_file(self, path: str) -> None: ...

    async def remove_dir(self, path: str) -> None: ...


@runtime_checkable
class SupportsRename(Protocol):
    """Opt-in: move a file in a single storage call."""

    async def rename(self, src: str, dest: str) -> None: ...
