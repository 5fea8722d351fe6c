"""Custom exception hierarchy for the file explorer."""


class ExplorerError(Exception):
    """Base exception for all file explorer errors."""


class StorageError(ExplorerError):
    """Raised when a storage gateway primitive fails (disk I/O, permissions, etc.)."""


class PathNotFoundError(StorageError):
    """Raised when a file or directory path does not exist."""


class ListingError(StorageError):
    """Raised when a directory listing cannot be produced."""


class ShareNotFoundError(ExplorerError):
    """Raised when a share identifier matches no shared path."""


class InvalidRequestError(ExplorerError):
    """Raised on a malformed request envelope."""


class InvalidShareRequestError(InvalidRequestError):
    """Raised when a shared-file request has a missing or malformed identifier."""


class AccessDeniedError(ExplorerError):
    """Raised when a share resolves to a private path."""
