"""RequestDispatcher — wire envelopes to FileExplorerAsync calls.

A request is a single-key dict naming the operation, with its arguments
as the value::

    {"ListDirectory": "/docs"}
    {"CreateFile": ["/docs/a.txt", [104, 105]]}
    {"ShareFile": ["/docs/a.txt", "Public"]}
    {"GetCurrentDirectory": null}

The reply is ``{"Ok": value}`` or ``{"Err": message}``.  Bytes travel as
lists of ints and FileInfo as its camelCase dict.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fileexplorer.fs.exceptions import (
    AccessDeniedError,
    ExplorerError,
    InvalidRequestError,
    PathNotFoundError,
    ShareNotFoundError,
)
from fileexplorer.fs.types import AuthScheme

if TYPE_CHECKING:
    from fileexplorer._explorer_async import FileExplorerAsync
    from fileexplorer.fs.types import FileInfo, ShareEntry

logger = logging.getLogger(__name__)


# =============================================================================
# Argument decoding / result encoding
# =============================================================================


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidRequestError(f"Expected a string, got {type(value).__name__}")
    return value


def _optional_str(value: Any) -> str | None:
    return None if value is None else _str(value)


def _bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, list):
        raise InvalidRequestError(f"Expected a byte list, got {type(value).__name__}")
    try:
        return bytes(value)
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"Invalid byte list: {e}") from e


def _scheme(value: Any) -> AuthScheme:
    try:
        return AuthScheme(value)
    except ValueError:
        raise InvalidRequestError(f"Invalid auth scheme: {value!r}") from None


def _same(value: Any) -> Any:
    return value


def _file_info(info: FileInfo) -> dict[str, Any]:
    return info.to_dict()


def _file_infos(infos: list[FileInfo]) -> list[dict[str, Any]]:
    return [i.to_dict() for i in infos]


def _byte_list(content: bytes) -> list[int]:
    return list(content)


def _share_entries(entries: list[ShareEntry]) -> list[dict[str, Any]]:
    return [e.to_dict() for e in entries]


@dataclass(frozen=True)
class _Operation:
    method: str
    params: tuple[Callable[[Any], Any], ...]
    encode: Callable[[Any], Any] = _same


_OPERATIONS: dict[str, _Operation] = {
    "ListDirectory": _Operation("list_directory", (_str,), _file_infos),
    "CreateFile": _Operation("create_file", (_str, _bytes), _file_info),
    "ReadFile": _Operation("read_file", (_str,), _byte_list),
    "UpdateFile": _Operation("update_file", (_str, _bytes), _file_info),
    "DeleteFile": _Operation("delete_file", (_str,)),
    "CreateDirectory": _Operation("create_directory", (_str,), _file_info),
    "DeleteDirectory": _Operation("delete_directory", (_str,)),
    "UploadFile": _Operation("upload_file", (_str, _str, _bytes), _file_info),
    "MoveFile": _Operation("move_file", (_str, _str), _file_info),
    "CopyFile": _Operation("copy_file", (_str, _str), _file_info),
    "ShareFile": _Operation("share_file", (_str, _scheme)),
    "UnshareFile": _Operation("unshare_file", (_str,)),
    "GetShareLink": _Operation("get_share_link", (_str,)),
    "ListShares": _Operation("list_shares", (), _share_entries),
    "ServeSharedFile": _Operation("resolve_shared_file", (_optional_str,), _byte_list),
    "GetCurrentDirectory": _Operation("get_current_directory", ()),
    "SetCurrentDirectory": _Operation("set_current_directory", (_str,)),
}

OPERATION_NAMES = frozenset(_OPERATIONS)


def _decode_args(name: str, op: _Operation, raw: Any) -> list[Any]:
    arity = len(op.params)
    if arity == 0:
        return []
    if arity == 1:
        return [op.params[0](raw)]
    if not isinstance(raw, list) or len(raw) != arity:
        raise InvalidRequestError(f"{name} expects a list of {arity} arguments")
    return [decode(value) for decode, value in zip(op.params, raw, strict=True)]


def status_for(exc: BaseException) -> int:
    """HTTP-style status code for an explorer error."""
    if isinstance(exc, InvalidRequestError):
        return 400
    if isinstance(exc, AccessDeniedError):
        return 403
    if isinstance(exc, (ShareNotFoundError, PathNotFoundError)):
        return 404
    return 500


# =============================================================================
# Dispatcher
# =============================================================================


class RequestDispatcher:
    """Routes request envelopes onto a :class:`FileExplorerAsync`.

    Transport-agnostic: a host decodes JSON from its HTTP or WebSocket
    endpoint, calls :meth:`dispatch`, and encodes the reply.  Shared-file
    routes go through :meth:`serve_shared`, which raises typed errors so the
    host can pick a status with :func:`status_for`.
    """

    def __init__(self, explorer: FileExplorerAsync) -> None:
        self._explorer = explorer

    async def dispatch(self, request: Any) -> dict[str, Any]:
        try:
            name, raw_args = self._parse(request)
            op = _OPERATIONS[name]
            args = _decode_args(name, op, raw_args)
            result = await getattr(self._explorer, op.method)(*args)
        except ExplorerError as e:
            return {"Err": str(e)}
        except Exception as e:
            logger.warning("Unexpected failure dispatching %r", request, exc_info=True)
            return {"Err": f"Internal error: {e}"}
        return {"Ok": op.encode(result)}

    async def serve_shared(self, request_path: str | None) -> bytes:
        return await self._explorer.resolve_shared_file(request_path)

    @staticmethod
    def _parse(request: Any) -> tuple[str, Any]:
        if not isinstance(request, dict) or len(request) != 1:
            raise InvalidRequestError("Request must be an object with exactly one operation")
        ((name, raw_args),) = request.items()
        if name not in _OPERATIONS:
            raise InvalidRequestError(f"Unknown operation: {name}")
        return name, raw_args
