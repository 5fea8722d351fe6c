"""LocalDiskGateway — storage primitives on a host directory."""

from __future__ import annotations

import asyncio
import contextlib
import os
import shutil
import tempfile
from pathlib import Path

from .exceptions import PathNotFoundError, StorageError
from .types import DirEntry, FileMetadata
from .utils import normalize_path, validate_path


class LocalDiskGateway:
    """Direct host-filesystem access rooted at ``host_dir``.

    Implements the StorageGateway and SupportsRename protocols.
    Blocking calls run in a worker thread via ``asyncio.to_thread``.

    Security: _resolve_path() ensures all paths stay within host_dir,
    preventing path traversal attacks.
    """

    def __init__(self, host_dir: Path | str) -> None:
        self.host_dir = Path(host_dir).resolve()

        if not self.host_dir.exists():
            raise FileNotFoundError(f"Host directory does not exist: {self.host_dir}")
        if not self.host_dir.is_dir():
            raise NotADirectoryError(f"Host path is not a directory: {self.host_dir}")

    def __repr__(self) -> str:
        return f"LocalDiskGateway({str(self.host_dir)!r})"

    # =========================================================================
    # Path Resolution & Security
    # =========================================================================

    def _resolve_path(self, virtual_path: str, follow_symlinks: bool = False) -> Path:
        """Resolve a virtual path to a physical path on disk.

        Validates that the resolved path stays within host_dir.
        By default, rejects symlinks to prevent TOCTOU attacks.
        """
        valid, error = validate_path(virtual_path)
        if not valid:
            raise StorageError(error)

        virtual_path = normalize_path(virtual_path)
        rel = virtual_path.lstrip("/")
        if not rel:
            return self.host_dir

        candidate = self.host_dir / rel

        if not follow_symlinks:
            current = self.host_dir
            for part in Path(rel).parts:
                current = current / part
                if current.is_symlink():
                    raise StorageError(
                        f"Symlinks not allowed: {virtual_path} contains symlink at "
                        f"{current.relative_to(self.host_dir)}"
                    )

        resolved = candidate.resolve()

        try:
            resolved.relative_to(self.host_dir)
        except ValueError:
            raise StorageError(
                f"Path traversal detected: {virtual_path} resolves outside root directory"
            ) from None

        return resolved

    def _to_virtual_path(self, physical_path: Path) -> str:
        """Convert a physical path back to a virtual path."""
        rel = physical_path.relative_to(self.host_dir)
        vpath = "/" + str(rel).replace("\\", "/")
        return vpath if vpath != "/." else "/"

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def list_dir(self, path: str) -> list[DirEntry]:
        """List immediate children in ``os.scandir`` order. Symlinks are skipped."""
        resolved = self._resolve_path(path)

        if not resolved.exists():
            raise PathNotFoundError(f"Directory not found: {path}")
        if not resolved.is_dir():
            raise StorageError(f"Not a directory: {path}")

        def _scan() -> list[DirEntry]:
            with os.scandir(resolved) as it:
                return [
                    DirEntry(
                        path=self._to_virtual_path(resolved / entry.name),
                        is_directory=entry.is_dir(follow_symlinks=False),
                    )
                    for entry in it
                    if not entry.is_symlink()
                ]

        try:
            return await asyncio.to_thread(_scan)
        except OSError as e:
            raise StorageError(f"Cannot list directory: {e}") from e

    async def read(self, path: str) -> bytes:
        resolved = self._resolve_path(path)

        if not resolved.exists():
            raise PathNotFoundError(f"File not found: {path}")
        if resolved.is_dir():
            raise StorageError(f"Path is a directory, not a file: {path}")

        try:
            return await asyncio.to_thread(resolved.read_bytes)
        except OSError as e:
            raise StorageError(f"Cannot read file: {e}") from e

    async def stat(self, path: str) -> FileMetadata:
        resolved = self._resolve_path(path)

        def _stat() -> FileMetadata:
            st = resolved.stat()
            return FileMetadata(
                path=normalize_path(path),
                size=st.st_size,
                is_directory=resolved.is_dir(),
            )

        try:
            return await asyncio.to_thread(_stat)
        except FileNotFoundError as e:
            raise PathNotFoundError(f"File not found: {path}") from e
        except OSError as e:
            raise StorageError(f"Cannot access file: {e}") from e

    # =========================================================================
    # Write Operations
    # =========================================================================

    async def create_file(self, path: str) -> None:
        """Create an empty file, creating missing parents and truncating."""
        resolved = self._resolve_path(path)

        if resolved.is_dir():
            raise StorageError(f"Path exists as directory: {path}")

        def _create() -> None:
            resolved.parent.mkdir(parents=True, exist_ok=True)
            resolved.write_bytes(b"")

        try:
            await asyncio.to_thread(_create)
        except OSError as e:
            raise StorageError(f"Cannot create file: {e}") from e

    async def write(self, path: str, content: bytes) -> None:
        """Replace file content. Atomic via tempfile + replace."""
        resolved = self._resolve_path(path)

        if not resolved.exists():
            raise PathNotFoundError(f"File not found: {path}")
        if resolved.is_dir():
            raise StorageError(f"Cannot write to directory: {path}")

        def _write() -> None:
            fd, tmp_path = tempfile.mkstemp(dir=str(resolved.parent), suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                Path(tmp_path).replace(resolved)
            except Exception:
                with contextlib.suppress(OSError):
                    Path(tmp_path).unlink()
                raise

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"Cannot write file: {e}") from e

    async def create_dir(self, path: str) -> None:
        """Create a directory and any missing parents. Existing dirs are fine."""
        resolved = self._resolve_path(path)

        if resolved.exists() and not resolved.is_dir():
            raise StorageError(f"Path exists as file: {path}")

        try:
            await asyncio.to_thread(resolved.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create directory: {e}") from e

    async def remove_file(self, path: str) -> None:
        resolved = self._resolve_path(path)

        if not resolved.exists():
            raise PathNotFoundError(f"File not found: {path}")
        if resolved.is_dir():
            raise StorageError(f"Path is a directory, not a file: {path}")

        try:
            await asyncio.to_thread(resolved.unlink)
        except OSError as e:
            raise StorageError(f"Cannot delete file: {e}") from e

    async def remove_dir(self, path: str) -> None:
        """Delete a directory and everything under it (always permanent)."""
        resolved = self._resolve_path(path)

        if resolved == self.host_dir:
            raise StorageError("Cannot delete the root directory")
        if not resolved.exists():
            raise PathNotFoundError(f"Directory not found: {path}")
        if not resolved.is_dir():
            raise StorageError(f"Not a directory: {path}")

        try:
            await asyncio.to_thread(shutil.rmtree, resolved)
        except OSError as e:
            raise StorageError(f"Cannot delete directory: {e}") from e

    async def rename(self, src: str, dest: str) -> None:
        """Move a file in one call. Directories are rejected on either side."""
        src_resolved = self._resolve_path(src)
        dest_resolved = self._resolve_path(dest)

        if not src_resolved.exists():
            raise PathNotFoundError(f"Source not found: {src}")
        if src_resolved.is_dir():
            raise StorageError(f"Source is a directory, not a file: {src}")
        if dest_resolved.is_dir():
            raise StorageError(f"Destination exists as directory: {dest}")

        def _move() -> None:
            dest_resolved.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(src_resolved), str(dest_resolved))

        try:
            await asyncio.to_thread(_move)
        except OSError as e:
            raise StorageError(f"Cannot move {src} to {dest}: {e}") from e
