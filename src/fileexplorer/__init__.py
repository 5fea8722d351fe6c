"""fileexplorer: a remote file-management service core.

Directory listing, file CRUD, and hash-derived share links with a
public/private access policy, over a pluggable storage gateway.
"""

__version__ = "0.1.0"

from fileexplorer._explorer import FileExplorer
from fileexplorer._explorer_async import FileExplorerAsync
from fileexplorer.api import RequestDispatcher, status_for
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
from fileexplorer.fs.local_disk import LocalDiskGateway
from fileexplorer.fs.protocol import StorageGateway, SupportsRename
from fileexplorer.fs.types import AuthScheme, FileInfo, ShareEntry

__all__ = [
    "AccessDeniedError",
    "AuthScheme",
    "ExplorerError",
    "FileExplorer",
    "FileExplorerAsync",
    "FileInfo",
    "InvalidRequestError",
    "InvalidShareRequestError",
    "ListingError",
    "LocalDiskGateway",
    "PathNotFoundError",
    "RequestDispatcher",
    "ShareEntry",
    "ShareNotFoundError",
    "StorageError",
    "StorageGateway",
    "SupportsRename",
    "__version__",
    "status_for",
]
