"""Path utilities and share identifier helpers."""

from __future__ import annotations

import hashlib
import posixpath
import re

SHARE_PREFIX = "/shared/"

_SHARE_ID_RE = re.compile(r"^[0-9a-f]{32}$")


# =============================================================================
# Path Utilities
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize a virtual file system path.

    - Ensures leading /
    - Resolves .. and . references
    - Removes double slashes
    - Removes trailing slash (except for root)

    Examples:
        normalize_path("foo.txt") -> "/foo.txt"
        normalize_path("/foo//bar.txt") -> "/foo/bar.txt"
        normalize_path("/foo/../bar.txt") -> "/bar.txt"
        normalize_path("/foo/") -> "/foo"
        normalize_path("") -> "/"
    """
    if not path:
        return "/"

    path = path.strip()

    if not path.startswith("/"):
        path = "/" + path

    path = posixpath.normpath(path)

    # posixpath keeps a leading "//" as-is
    if path.startswith("//"):
        path = "/" + path.lstrip("/")

    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return path


def split_path(path: str) -> tuple[str, str]:
    """Split path into (parent_dir, filename).

    Examples:
        split_path("/foo/bar.txt") -> ("/foo", "bar.txt")
        split_path("/foo.txt") -> ("/", "foo.txt")
        split_path("/") -> ("/", "")
    """
    path = normalize_path(path)
    if path == "/":
        return "/", ""
    return posixpath.split(path)


def join_path(directory: str, filename: str) -> str:
    """Join *directory* and *filename* with a single slash.

    Examples:
        join_path("/docs", "a.txt") -> "/docs/a.txt"
        join_path("/docs/", "a.txt") -> "/docs/a.txt"
        join_path("/", "a.txt") -> "/a.txt"
    """
    return directory.rstrip("/") + "/" + filename


def validate_path(path: str) -> tuple[bool, str]:
    """Validate a path for security and compatibility issues.

    Returns:
        (is_valid, error_message) - error_message is empty if valid
    """
    if "\x00" in path:
        return False, "Path contains null bytes"

    # Reject ASCII control characters (0x01-0x1f) except \t, \n, \r
    for ch in path:
        code = ord(ch)
        if 0x01 <= code <= 0x1F and ch not in ("\t", "\n", "\r"):
            return False, f"Path contains control character: 0x{code:02x}"

    if len(path) > 4096:
        return False, "Path too long (max 4096 characters)"

    _, name = split_path(path)

    if name and len(name) > 255:
        return False, "Filename too long (max 255 characters)"

    return True, ""


# =============================================================================
# Share Identifiers
# =============================================================================


def share_id_for(path: str) -> str:
    """Deterministic, non-secret identifier for *path*.

    MD5 over the raw UTF-8 bytes, hex encoded.  The path is not normalized,
    so ``"a"`` and ``"/a"`` get different identifiers.
    """
    return hashlib.md5(path.encode("utf-8"), usedforsecurity=False).hexdigest()


def share_link_for(path: str) -> str:
    """Return the ``/shared/<id>`` link for *path*."""
    return SHARE_PREFIX + share_id_for(path)


def is_share_id(value: str) -> bool:
    """True when *value* has the shape of a share identifier."""
    return bool(_SHARE_ID_RE.match(value))
