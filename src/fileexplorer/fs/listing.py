"""Directory listing — raw gateway entries to a uniform FileInfo view."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import ListingError, StorageError
from .types import FileInfo
from .utils import normalize_path

if TYPE_CHECKING:
    from .protocol import StorageGateway
    from .types import DirEntry

logger = logging.getLogger(__name__)


async def list_directory(
    gateway: StorageGateway,
    path: str,
    *,
    strict_file_metadata: bool = True,
) -> list[FileInfo]:
    """List *path* as FileInfo records, in the gateway's native order.

    Directory sizes are the number of immediate children.  A sub-directory
    that cannot be listed is reported with ``size=0`` and does not fail the
    call.  A file whose metadata cannot be fetched fails the whole listing
    unless *strict_file_metadata* is False, in which case it gets
    ``size=0`` too.

    Raises:
        ListingError: the directory itself could not be listed, or a file's
            metadata could not be fetched in strict mode.
    """
    path = normalize_path(path)
    logger.debug("list_directory called with path: %s", path)

    try:
        entries = await gateway.list_dir(path)
    except (StorageError, OSError) as e:
        raise ListingError(f"Failed to read directory {path}: {e}") from e

    files: list[FileInfo] = []
    for entry in entries:
        if entry.is_directory:
            files.append(await _directory_info(gateway, entry))
        else:
            files.append(await _file_info(gateway, entry, strict_file_metadata))

    logger.debug("Returning %d entries for %s", len(files), path)
    return files


async def _directory_info(gateway: StorageGateway, entry: DirEntry) -> FileInfo:
    try:
        children = await gateway.list_dir(entry.path)
        size = len(children)
    except (StorageError, OSError):
        logger.debug("Cannot count children of %s; reporting size 0", entry.path, exc_info=True)
        size = 0
    return FileInfo.for_path(entry.path, size=size, is_directory=True)


async def _file_info(gateway: StorageGateway, entry: DirEntry, strict: bool) -> FileInfo:
    try:
        meta = await gateway.stat(entry.path)
        size = meta.size
    except (StorageError, OSError) as e:
        if strict:
            raise ListingError(f"Failed to get metadata for {entry.path}: {e}") from e
        logger.debug("Cannot stat %s; reporting size 0", entry.path, exc_info=True)
        size = 0
    return FileInfo.for_path(entry.path, size=size)
