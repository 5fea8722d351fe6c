"""Record types: FileInfo, AuthScheme, ShareEntry and raw gateway records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .utils import share_id_for

DEFAULT_PERMISSIONS = "rw"


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Snapshot of a file or directory at operation time.

    ``size`` is a byte count for files and a child count for directories.
    ``created`` and ``modified`` are always 0: the gateway primitives used
    to build a listing carry no timestamps.
    """

    name: str
    path: str
    size: int = 0
    created: int = 0
    modified: int = 0
    is_directory: bool = False
    permissions: str = DEFAULT_PERMISSIONS

    @classmethod
    def for_path(cls, path: str, *, size: int = 0, is_directory: bool = False) -> FileInfo:
        """Build a FileInfo whose ``name`` is the last segment of *path*."""
        if not path.startswith("/"):
            path = "/" + path
        return cls(
            name=path.split("/")[-1],
            path=path,
            size=size,
            is_directory=is_directory,
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire shape, camelCase keys."""
        return {
            "name": self.name,
            "path": self.path,
            "size": self.size,
            "created": self.created,
            "modified": self.modified,
            "isDirectory": self.is_directory,
            "permissions": self.permissions,
        }


class AuthScheme(str, Enum):
    """Access policy attached to a shared path."""

    PUBLIC = "Public"
    PRIVATE = "Private"


@dataclass(frozen=True, slots=True)
class ShareEntry:
    """One row of the share registry, keyed by ``path``."""

    path: str
    scheme: AuthScheme

    @property
    def share_id(self) -> str:
        return share_id_for(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "scheme": self.scheme.value}


@dataclass(frozen=True, slots=True)
class DirEntry:
    """Raw entry returned by ``StorageGateway.list_dir``."""

    path: str
    is_directory: bool


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Raw metadata returned by ``StorageGateway.stat``."""

    path: str
    size: int
    is_directory: bool = False
