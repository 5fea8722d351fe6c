"""Tests for LocalDiskGateway — direct disk primitives."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from fileexplorer.fs.exceptions import PathNotFoundError, StorageError
from fileexplorer.fs.local_disk import LocalDiskGateway
from fileexplorer.fs.protocol import StorageGateway, SupportsRename

if TYPE_CHECKING:
    from pathlib import Path


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_nonexistent_dir(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LocalDiskGateway(host_dir=tmp_path / "nope")

    def test_file_not_dir(self, tmp_path: Path):
        f = tmp_path / "file.txt"
        f.write_text("hi")
        with pytest.raises(NotADirectoryError):
            LocalDiskGateway(host_dir=f)

    def test_satisfies_protocols(self, disk: LocalDiskGateway):
        assert isinstance(disk, StorageGateway)
        assert isinstance(disk, SupportsRename)


# ---------------------------------------------------------------------------
# Path security
# ---------------------------------------------------------------------------


class TestPathSecurity:
    async def test_dotdot_stays_inside_root(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "a.txt").write_bytes(b"inside")
        assert await disk.read("/../../a.txt") == b"inside"

    async def test_symlink_rejected(self, disk: LocalDiskGateway, tmp_path: Path):
        outside = tmp_path.parent / f"{tmp_path.name}-outside.txt"
        outside.write_bytes(b"secret")
        os.symlink(outside, tmp_path / "link.txt")
        with pytest.raises(StorageError, match="Symlinks not allowed"):
            await disk.read("/link.txt")

    async def test_null_byte_rejected(self, disk: LocalDiskGateway):
        with pytest.raises(StorageError, match="null"):
            await disk.read("/bad\x00.txt")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestFiles:
    async def test_create_write_read(self, disk: LocalDiskGateway):
        await disk.create_file("/hello.bin")
        await disk.write("/hello.bin", b"\x00\x01binary")
        assert await disk.read("/hello.bin") == b"\x00\x01binary"

    async def test_device_name_is_plain_file(self, disk: LocalDiskGateway, tmp_path: Path):
        await disk.create_file("/con.txt")
        await disk.write("/con.txt", b"ok")
        assert (tmp_path / "con.txt").read_bytes() == b"ok"

    async def test_create_makes_parents(self, disk: LocalDiskGateway, tmp_path: Path):
        await disk.create_file("/a/b/c.txt")
        assert (tmp_path / "a" / "b" / "c.txt").is_file()

    async def test_create_truncates(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "f.txt").write_bytes(b"old content")
        await disk.create_file("/f.txt")
        assert (tmp_path / "f.txt").read_bytes() == b""

    async def test_write_missing_file(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.write("/missing.txt", b"x")

    async def test_read_missing_file(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.read("/missing.txt")

    async def test_read_directory(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "sub").mkdir()
        with pytest.raises(StorageError, match="directory"):
            await disk.read("/sub")

    async def test_stat(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "f.txt").write_bytes(b"0123456789")
        meta = await disk.stat("/f.txt")
        assert meta.size == 10
        assert meta.is_directory is False
        assert meta.path == "/f.txt"

    async def test_stat_missing(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.stat("/missing.txt")

    async def test_remove_file(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "f.txt").write_bytes(b"x")
        await disk.remove_file("/f.txt")
        assert not (tmp_path / "f.txt").exists()

    async def test_remove_missing_file(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.remove_file("/missing.txt")

    async def test_remove_file_on_directory(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "sub").mkdir()
        with pytest.raises(StorageError):
            await disk.remove_file("/sub")


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class TestDirectories:
    async def test_list_dir(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "a.txt").write_bytes(b"a")
        (tmp_path / "sub").mkdir()
        entries = await disk.list_dir("/")
        assert {(e.path, e.is_directory) for e in entries} == {
            ("/a.txt", False),
            ("/sub", True),
        }

    async def test_list_nested(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.txt").write_bytes(b"b")
        entries = await disk.list_dir("/sub")
        assert [e.path for e in entries] == ["/sub/b.txt"]

    async def test_list_missing(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.list_dir("/nope")

    async def test_list_file(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "a.txt").write_bytes(b"a")
        with pytest.raises(StorageError, match="Not a directory"):
            await disk.list_dir("/a.txt")

    async def test_create_dir(self, disk: LocalDiskGateway, tmp_path: Path):
        await disk.create_dir("/x/y")
        assert (tmp_path / "x" / "y").is_dir()

    async def test_create_dir_existing_ok(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "x").mkdir()
        await disk.create_dir("/x")
        assert (tmp_path / "x").is_dir()

    async def test_create_dir_over_file(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "x").write_bytes(b"")
        with pytest.raises(StorageError, match="exists as file"):
            await disk.create_dir("/x")

    async def test_remove_dir_recursive(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "x" / "y").mkdir(parents=True)
        (tmp_path / "x" / "y" / "f.txt").write_bytes(b"f")
        await disk.remove_dir("/x")
        assert not (tmp_path / "x").exists()

    async def test_remove_root_rejected(self, disk: LocalDiskGateway):
        with pytest.raises(StorageError, match="root"):
            await disk.remove_dir("/")

    async def test_remove_missing_dir(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.remove_dir("/nope")


# ---------------------------------------------------------------------------
# Rename
# ---------------------------------------------------------------------------


class TestRename:
    async def test_rename_file(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "a.txt").write_bytes(b"a")
        await disk.rename("/a.txt", "/moved/b.txt")
        assert not (tmp_path / "a.txt").exists()
        assert (tmp_path / "moved" / "b.txt").read_bytes() == b"a"

    async def test_rename_missing(self, disk: LocalDiskGateway):
        with pytest.raises(PathNotFoundError):
            await disk.rename("/nope.txt", "/b.txt")

    async def test_rename_onto_directory(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "a.txt").write_bytes(b"a")
        (tmp_path / "dir").mkdir()
        with pytest.raises(StorageError, match="Destination exists as directory"):
            await disk.rename("/a.txt", "/dir")
        assert (tmp_path / "a.txt").exists()
        assert not (tmp_path / "dir" / "a.txt").exists()

    async def test_rename_directory(self, disk: LocalDiskGateway, tmp_path: Path):
        (tmp_path / "src").mkdir()
        with pytest.raises(StorageError, match="Source is a directory"):
            await disk.rename("/src", "/dst")
        assert (tmp_path / "src").is_dir()
