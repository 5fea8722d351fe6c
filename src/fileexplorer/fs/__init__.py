"""Filesystem layer — storage gateways, listing, sharing."""

from fileexplorer.fs.exceptions import (
    AccessDeniedError,
    ExplorerError,
    InvalidRequestError,
    InvalidShareRequestError,
    ListingError,
    PathNotFoundError,
    ShareNotFoundError,
    StorageError,
)
from fileexplorer.fs.listing import list_directory
from fileexplorer.fs.local_disk import LocalDiskGateway
from fileexplorer.fs.protocol import StorageGateway, SupportsRename
from fileexplorer.fs.share_store import ShareStore
from fileexplorer.fs.sharing import ShareRegistry
from fileexplorer.fs.types import (
    AuthScheme,
    DirEntry,
    FileInfo,
    FileMetadata,
    ShareEntry,
)
from fileexplorer.fs.utils import normalize_path, share_id_for, share_link_for

__all__ = [
    "AccessDeniedError",
    "AuthScheme",
    "DirEntry",
    "ExplorerError",
    "FileInfo",
    "FileMetadata",
    "InvalidRequestError",
    "InvalidShareRequestError",
    "ListingError",
    "LocalDiskGateway",
    "PathNotFoundError",
    "ShareEntry",
    "ShareNotFoundError",
    "ShareRegistry",
    "ShareStore",
    "StorageError",
    "StorageGateway",
    "SupportsRename",
    "list_directory",
    "normalize_path",
    "share_id_for",
    "share_link_for",
]
