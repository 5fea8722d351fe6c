"""FileExplorer — synchronous wrapper around FileExplorerAsync."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fileexplorer._explorer_async import FileExplorerAsync
from fileexplorer.fs.local_disk import LocalDiskGateway

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from fileexplorer.fs.protocol import StorageGateway
    from fileexplorer.fs.types import AuthScheme, FileInfo, ShareEntry


class FileExplorer:
    """Blocking file explorer API backed by a private event loop.

    The async facade runs on an event loop in a daemon thread; every
    method submits a coroutine to it and waits for the result, so the
    explorer can be used from plain sync code or from inside a running
    event loop.

    Usage::

        with FileExplorer("/srv/files", database_url="sqlite+aiosqlite:///shares.db") as fx:
            fx.create_file("/hello.txt", b"hi")
            link = fx.share_file("/hello.txt", AuthScheme.PUBLIC)
    """

    def __init__(
        self,
        root: str | Path | StorageGateway,
        *,
        database_url: str | None = None,
        cwd: str = "/",
        strict_file_metadata: bool = True,
        rename_moves: bool = True,
    ) -> None:
        gateway: Any = LocalDiskGateway(root) if isinstance(root, (str, Path)) else root
        self._closed = False
        self._engine: AsyncEngine | None = None

        if database_url is not None:
            from sqlalchemy.ext.asyncio import create_async_engine

            self._engine = create_async_engine(database_url, echo=False)

        self._async = FileExplorerAsync(
            gateway,
            engine=self._engine,
            cwd=cwd,
            strict_file_metadata=strict_file_metadata,
            rename_moves=rename_moves,
        )

        # Private event loop in a daemon thread
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True)
        self._thread.start()
        try:
            self._run(self._async.open())
        except BaseException:
            self.close()
            raise

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the explorer, dispose the engine, stop the loop and join the thread."""
        if self._closed:
            return
        self._closed = True

        try:
            self._run(self._async_close())
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)
            self._loop.close()

    async def _async_close(self) -> None:
        await self._async.close()
        if self._engine is not None:
            await self._engine.dispose()

    def __enter__(self) -> FileExplorer:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Filesystem wrappers (sync)
    # ------------------------------------------------------------------

    def list_directory(self, path: str = "/") -> list[FileInfo]:
        return self._run(self._async.list_directory(path))

    def create_file(self, path: str, content: bytes) -> FileInfo:
        return self._run(self._async.create_file(path, content))

    def read_file(self, path: str) -> bytes:
        return self._run(self._async.read_file(path))

    def update_file(self, path: str, content: bytes) -> FileInfo:
        return self._run(self._async.update_file(path, content))

    def delete_file(self, path: str) -> bool:
        return self._run(self._async.delete_file(path))

    def create_directory(self, path: str) -> FileInfo:
        return self._run(self._async.create_directory(path))

    def delete_directory(self, path: str) -> bool:
        return self._run(self._async.delete_directory(path))

    def upload_file(self, directory: str, filename: str, content: bytes) -> FileInfo:
        return self._run(self._async.upload_file(directory, filename, content))

    def move_file(self, source: str, destination: str) -> FileInfo:
        """Move a file. See :meth:`FileExplorerAsync.move_file` for atomicity."""
        return self._run(self._async.move_file(source, destination))

    def copy_file(self, source: str, destination: str) -> FileInfo:
        return self._run(self._async.copy_file(source, destination))

    # ------------------------------------------------------------------
    # Share wrappers (sync)
    # ------------------------------------------------------------------

    def share_file(self, path: str, auth: AuthScheme) -> str:
        return self._run(self._async.share_file(path, auth))

    def unshare_file(self, path: str) -> bool:
        return self._run(self._async.unshare_file(path))

    def get_share_link(self, path: str) -> str | None:
        return self._run(self._async.get_share_link(path))

    def list_shares(self) -> list[ShareEntry]:
        return self._run(self._async.list_shares())

    def resolve_shared_file(self, request_path: str | None) -> bytes:
        return self._run(self._async.resolve_shared_file(request_path))

    # ------------------------------------------------------------------
    # Working directory
    # ------------------------------------------------------------------

    def get_current_directory(self) -> str:
        return self._run(self._async.get_current_directory())

    def set_current_directory(self, path: str) -> str:
        return self._run(self._async.set_current_directory(path))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def explorer(self) -> FileExplorerAsync:
        """The async facade this wrapper drives."""
        return self._async
