"""Shared fixtures for fileexplorer tests."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

from fileexplorer._explorer_async import FileExplorerAsync
from fileexplorer.fs.exceptions import PathNotFoundError, StorageError
from fileexplorer.fs.local_disk import LocalDiskGateway
from fileexplorer.fs.types import DirEntry, FileMetadata

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


class MemoryGateway:
    """Dict-backed gateway with failure injection and no ``rename``.

    Entries keep insertion order so listings are deterministic.  Paths in
    ``fail_list`` / ``fail_stat`` / ``fail_remove`` raise ``StorageError``
    from the matching primitive.
    """

    def __init__(self) -> None:
        self.entries: dict[str, bool] = {"/": True}
        self.files: dict[str, bytes] = {}
        self.fail_list: set[str] = set()
        self.fail_stat: set[str] = set()
        self.fail_remove: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def _require_parent(self, path: str) -> None:
        parent = posixpath.dirname(path)
        if not self.entries.get(parent, False):
            raise PathNotFoundError(f"Parent directory not found: {parent}")

    async def list_dir(self, path: str) -> list[DirEntry]:
        self.calls.append(("list_dir", path))
        if path in self.fail_list:
            raise StorageError(f"Permission denied: {path}")
        if not self.entries.get(path, False):
            raise PathNotFoundError(f"Directory not found: {path}")
        return [
            DirEntry(path=p, is_directory=is_dir)
            for p, is_dir in self.entries.items()
            if p != "/" and posixpath.dirname(p) == path
        ]

    async def read(self, path: str) -> bytes:
        self.calls.append(("read", path))
        if path not in self.files:
            raise PathNotFoundError(f"File not found: {path}")
        return self.files[path]

    async def stat(self, path: str) -> FileMetadata:
        self.calls.append(("stat", path))
        if path in self.fail_stat:
            raise StorageError(f"Metadata unavailable: {path}")
        if path in self.files:
            return FileMetadata(path=path, size=len(self.files[path]))
        if self.entries.get(path):
            return FileMetadata(path=path, size=0, is_directory=True)
        raise PathNotFoundError(f"File not found: {path}")

    async def create_file(self, path: str) -> None:
        self.calls.append(("create_file", path))
        self._require_parent(path)
        if self.entries.get(path):
            raise StorageError(f"Path exists as directory: {path}")
        self.entries[path] = False
        self.files[path] = b""

    async def write(self, path: str, content: bytes) -> None:
        self.calls.append(("write", path))
        if path not in self.files:
            raise PathNotFoundError(f"File not found: {path}")
        self.files[path] = bytes(content)

    async def create_dir(self, path: str) -> None:
        self.calls.append(("create_dir", path))
        self._require_parent(path)
        self.entries[path] = True

    async def remove_file(self, path: str) -> None:
        self.calls.append(("remove_file", path))
        if path in self.fail_remove:
            raise StorageError(f"Device busy: {path}")
        if path not in self.files:
            raise PathNotFoundError(f"File not found: {path}")
        del self.files[path]
        del self.entries[path]

    async def remove_dir(self, path: str) -> None:
        self.calls.append(("remove_dir", path))
        if not self.entries.get(path):
            raise PathNotFoundError(f"Directory not found: {path}")
        doomed = [p for p in self.entries if p == path or p.startswith(path + "/")]
        for p in doomed:
            del self.entries[p]
            self.files.pop(p, None)

    def add_file(self, path: str, content: bytes) -> None:
        self.entries[path] = False
        self.files[path] = content

    def add_dir(self, path: str) -> None:
        self.entries[path] = True


@pytest.fixture
def memory() -> MemoryGateway:
    return MemoryGateway()


@pytest.fixture
def disk(tmp_path: Path) -> LocalDiskGateway:
    """LocalDiskGateway rooted at a temporary directory."""
    return LocalDiskGateway(host_dir=tmp_path)


@pytest.fixture
async def explorer(disk: LocalDiskGateway) -> AsyncIterator[FileExplorerAsync]:
    """Explorer over local disk with in-memory shares."""
    async with FileExplorerAsync(disk) as fx:
        yield fx


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Async in-memory SQLite engine with all tables created."""
    eng = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()
