"""FileExplorerAsync — the primary async operation facade."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from fileexplorer.fs.exceptions import (
    AccessDeniedError,
    InvalidShareRequestError,
    PathNotFoundError,
    StorageError,
)
from fileexplorer.fs.listing import list_directory
from fileexplorer.fs.protocol import SupportsRename
from fileexplorer.fs.share_store import ShareStore
from fileexplorer.fs.sharing import ShareRegistry
from fileexplorer.fs.types import AuthScheme, FileInfo
from fileexplorer.fs.utils import SHARE_PREFIX, is_share_id, join_path
from fileexplorer.models.shares import SharedPath

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

    from fileexplorer.fs.protocol import StorageGateway
    from fileexplorer.fs.types import ShareEntry
    from fileexplorer.models.shares import SharedPathBase

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Re-raise gateway failures as ``"<action>: <cause>"``, chained to the cause."""
    try:
        yield
    except PathNotFoundError as e:
        raise PathNotFoundError(f"{action}: {e}") from e
    except (StorageError, OSError) as e:
        raise StorageError(f"{action}: {e}") from e


class FileExplorerAsync:
    """Async facade over a storage gateway, the share registry and the cwd.

    Usage::

        gateway = LocalDiskGateway("/srv/files")
        async with FileExplorerAsync(gateway) as fx:
            await fx.create_file("/notes.txt", b"hello")
            link = await fx.share_file("/notes.txt", AuthScheme.PUBLIC)
            assert await fx.resolve_shared_file(link) == b"hello"

    Share persistence is opt-in: pass an async *engine* and the registry is
    written through to a SQL table and reloaded by :meth:`open`.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        *,
        engine: AsyncEngine | None = None,
        share_model: type[SharedPathBase] = SharedPath,
        cwd: str = "/",
        strict_file_metadata: bool = True,
        rename_moves: bool = True,
    ) -> None:
        self._gateway = gateway
        self._cwd = cwd
        self._strict_file_metadata = strict_file_metadata
        self._rename_moves = rename_moves
        self._closed = False

        store = ShareStore(engine, share_model) if engine is not None else None
        self._shares = ShareRegistry(store)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Create the share table and load persisted shares, if configured."""
        store = self._shares.store
        if store is None:
            return
        await store.create_tables()
        await self._shares.load()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Closed explorer with %d shared path(s)", len(self._shares))

    async def __aenter__(self) -> FileExplorerAsync:
        await self.open()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_directory(self, path: str = "/") -> list[FileInfo]:
        return await list_directory(
            self._gateway,
            path,
            strict_file_metadata=self._strict_file_metadata,
        )

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    async def create_file(self, path: str, content: bytes) -> FileInfo:
        """Create (or truncate) *path* and write *content*."""
        logger.debug("create_file called with path: %s", path)
        with _storage_errors("Failed to create file"):
            await self._gateway.create_file(path)
        with _storage_errors("Failed to write file"):
            await self._gateway.write(path, content)
        return await self._file_info(path)

    async def read_file(self, path: str) -> bytes:
        logger.debug("read_file called with path: %s", path)
        with _storage_errors("Failed to read file"):
            return await self._gateway.read(path)

    async def update_file(self, path: str, content: bytes) -> FileInfo:
        """Overwrite an existing file. A missing file raises PathNotFoundError."""
        logger.debug("update_file called with path: %s", path)
        with _storage_errors("Failed to open file"):
            await self._gateway.stat(path)
        with _storage_errors("Failed to write file"):
            await self._gateway.write(path, content)
        return await self._file_info(path)

    async def delete_file(self, path: str) -> bool:
        logger.debug("delete_file called with path: %s", path)
        with _storage_errors("Failed to delete file"):
            await self._gateway.remove_file(path)
        return True

    async def upload_file(self, directory: str, filename: str, content: bytes) -> FileInfo:
        return await self.create_file(join_path(directory, filename), content)

    async def move_file(self, source: str, destination: str) -> FileInfo:
        """Move *source* to *destination*.

        Uses the gateway's ``rename`` when available.  Otherwise reads,
        creates and deletes in sequence with no rollback: if the delete
        fails, the content exists at both paths.
        """
        logger.debug("move_file called: %s -> %s", source, destination)
        if self._rename_moves and isinstance(self._gateway, SupportsRename):
            with _storage_errors("Failed to move file"):
                await self._gateway.rename(source, destination)
            return await self._file_info(destination)

        content = await self.read_file(source)
        info = await self.create_file(destination, content)
        await self.delete_file(source)
        return info

    async def copy_file(self, source: str, destination: str) -> FileInfo:
        logger.debug("copy_file called: %s -> %s", source, destination)
        content = await self.read_file(source)
        return await self.create_file(destination, content)

    # ------------------------------------------------------------------
    # Directory operations
    # ------------------------------------------------------------------

    async def create_directory(self, path: str) -> FileInfo:
        logger.debug("create_directory called with path: %s", path)
        with _storage_errors("Failed to create directory"):
            await self._gateway.create_dir(path)
        return FileInfo.for_path(path, is_directory=True)

    async def delete_directory(self, path: str) -> bool:
        logger.debug("delete_directory called with path: %s", path)
        with _storage_errors("Failed to delete directory"):
            await self._gateway.remove_dir(path)
        return True

    # ------------------------------------------------------------------
    # Share operations
    # ------------------------------------------------------------------

    async def share_file(self, path: str, auth: AuthScheme) -> str:
        """Share *path* and return its ``/shared/<id>`` link."""
        return await self._shares.share(path, auth)

    async def unshare_file(self, path: str) -> bool:
        return await self._shares.unshare(path)

    async def get_share_link(self, path: str) -> str | None:
        return self._shares.get_share_link(path)

    async def list_shares(self) -> list[ShareEntry]:
        return self._shares.entries()

    async def resolve_shared_file(self, request_path: str | None) -> bytes:
        """Serve the content behind a ``/shared/<id>`` request path.

        Raises:
            InvalidShareRequestError: no path, wrong prefix, or malformed id.
            ShareNotFoundError: no shared path matches the id.
            AccessDeniedError: the share is private.
            StorageError: the shared path can no longer be read.
        """
        if not request_path:
            raise InvalidShareRequestError("No request path provided")
        if not request_path.startswith(SHARE_PREFIX):
            raise InvalidShareRequestError(f"Invalid shared file path: {request_path}")

        share_id = request_path[len(SHARE_PREFIX):]
        if not is_share_id(share_id):
            raise InvalidShareRequestError(f"Invalid share identifier: {share_id!r}")

        entry = await self._shares.resolve(share_id)
        if entry.scheme is AuthScheme.PRIVATE:
            raise AccessDeniedError("Access denied: Private file")
        return await self.read_file(entry.path)

    # ------------------------------------------------------------------
    # Working directory
    # ------------------------------------------------------------------

    async def get_current_directory(self) -> str:
        return self._cwd

    async def set_current_directory(self, path: str) -> str:
        """Set the working directory. The path is not checked for existence."""
        self._cwd = path
        return path

    # ------------------------------------------------------------------
    # Helpers / properties
    # ------------------------------------------------------------------

    async def _file_info(self, path: str) -> FileInfo:
        with _storage_errors("Failed to get metadata"):
            meta = await self._gateway.stat(path)
        return FileInfo.for_path(path, size=meta.size)

    @property
    def gateway(self) -> StorageGateway:
        return self._gateway

    @property
    def shares(self) -> ShareRegistry:
        return self._shares
