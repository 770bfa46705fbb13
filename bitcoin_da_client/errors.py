"""
Typed error classes for the BitcoinDA client.

Every public operation raises a subclass of :class:`ClientError`, so callers
can branch on the failure kind while still catching the common base:

    from bitcoin_da_client.errors import AnchoredButNotStored, BlobNotFound

    try:
        vh = await client.create_blob(data)
    except AnchoredButNotStored as e:
        await client.store_blob(e.version_hash, data)

All errors expose:
- .code   : stable machine-readable kind (snake_case)
- .source : which boundary classified it ("rpc", "gateway" or "client")
- .data   : optional structured payload (dict)
- .to_problem() : RFC 7807-compatible dict, handy for API layers and logs
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:
    from .types import VersionHash

__all__ = [
    "ClientError",
    "TransportError",
    "AuthError",
    "RequestTimeout",
    "ProtocolError",
    "NodeRejected",
    "NotFound",
    "BlobNotFound",
    "TooLarge",
    "InvalidReference",
    "AnchoredButNotStored",
    "JsonRpcCode",
    "from_jsonrpc_error",
]


class JsonRpcCode(IntEnum):
    # JSON-RPC 2.0 reserved codes
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Node (bitcoind-family) wallet/RPC codes
    MISC_ERROR = -1
    TYPE_ERROR = -3
    WALLET_ERROR = -4
    INVALID_PARAMETER = -8
    WALLET_NOT_FOUND = -18
    WALLET_NOT_SPECIFIED = -19
    WALLET_ALREADY_LOADED = -35


class ClientError(Exception):
    """
    Base class for client errors.

    Subclasses set `default_code` and `default_status`.
    """

    default_code = "client_error"
    default_status = 500

    def __init__(
        self,
        message: str = "",
        *,
        source: str = "client",
        status: Optional[int] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = self.default_code
        self.source = source
        self.status = int(status if status is not None else self.default_status)
        self.data: Dict[str, Any] = dict(data) if data else {}

    def __str__(self) -> str:
        if self.message:
            return f"{self.code}[{self.source}]: {self.message}"
        return f"{self.code}[{self.source}]"

    def to_problem(self) -> Dict[str, Any]:
        """
        Render as an RFC 7807 "problem detail" object.
        """
        return {
            "type": f"urn:bitcoin-da:{self.code}",
            "title": self.code.replace("_", " ").title(),
            "status": self.status,
            "detail": self.message or None,
            "data": self.data or None,
        }


class TransportError(ClientError):
    """
    Connection refused, DNS/TLS failure, or an HTTP status the boundary does
    not otherwise classify. `http_status` is set when a response was received.
    """

    default_code = "transport"
    default_status = 502

    def __init__(self, message: str = "", *, http_status: Optional[int] = None, **kw: Any) -> None:
        super().__init__(message, **kw)
        self.http_status = http_status


class AuthError(ClientError):
    """The node (or gateway) rejected the configured credentials."""

    default_code = "auth"
    default_status = 401


class RequestTimeout(ClientError):
    """The operation did not complete within the configured deadline."""

    default_code = "timeout"
    default_status = 504


class ProtocolError(ClientError):
    """The peer answered, but with a malformed or unexpected response shape."""

    default_code = "protocol"
    default_status = 502


class NodeRejected(ClientError):
    """
    The node returned a JSON-RPC error object.

    Fields:
      - rpc_code: the node's numeric error code (see :class:`JsonRpcCode`)
      - rpc_message: the node's human-readable message (informational only)
      - method: the RPC method that was called
    """

    default_code = "node_rejected"
    default_status = 422

    def __init__(
        self,
        rpc_code: int,
        rpc_message: str,
        *,
        method: Optional[str] = None,
        rpc_data: Any = None,
        http_status: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"{method or '-'} code={rpc_code} msg={rpc_message!r}",
            source="rpc",
            data={"rpc_code": rpc_code, "method": method},
        )
        self.rpc_code = int(rpc_code)
        self.rpc_message = rpc_message
        self.rpc_data = rpc_data
        self.method = method
        self.http_status = http_status

    @property
    def code_enum(self) -> Optional[JsonRpcCode]:
        try:
            return JsonRpcCode(self.rpc_code)
        except ValueError:
            return None


class NotFound(ClientError):
    """The gateway does not know the requested key."""

    default_code = "not_found"
    default_status = 404


class BlobNotFound(NotFound):
    """No blob is stored under a well-formed version hash."""

    default_code = "blob_not_found"


class TooLarge(ClientError):
    """Payload exceeds the maximum blob size (local limit or HTTP 413)."""

    default_code = "too_large"
    default_status = 413

    def __init__(self, message: str = "", *, size: Optional[int] = None, limit: Optional[int] = None, **kw: Any) -> None:
        data = dict(kw.pop("data", None) or {})
        data.update({"size": size, "limit": limit})
        super().__init__(message, data=data, **kw)
        self.size = size
        self.limit = limit


class InvalidReference(ClientError):
    """The caller supplied a malformed version hash."""

    default_code = "invalid_reference"
    default_status = 400


class AnchoredButNotStored(ClientError):
    """
    The on-chain anchor exists but the gateway upload failed.

    `version_hash` is the anchored hash: retry the store step alone with
    ``client.store_blob(err.version_hash, data)``. Do not call
    ``create_blob`` again, that would anchor a second commitment.
    `cause` is the error raised by the store step.
    `timed_out` is True when that error was the operation deadline expiring.
    """

    default_code = "anchored_but_not_stored"
    default_status = 502

    def __init__(self, version_hash: "VersionHash", cause: ClientError) -> None:
        super().__init__(
            f"blob anchored as {version_hash} but gateway store failed: {cause}",
            source="client",
            data={"version_hash": str(version_hash), "cause": cause.code},
        )
        self.version_hash = version_hash
        self.cause = cause

    @property
    def timed_out(self) -> bool:
        return isinstance(self.cause, RequestTimeout)


def from_jsonrpc_error(
    err_obj: Any,
    *,
    method: Optional[str] = None,
    http_status: Optional[int] = None,
) -> ClientError:
    """
    Convert a JSON-RPC error object into NodeRejected.

    `err_obj` should resemble: {"code": int, "message": str, "data": any?}.
    Anything else is a protocol violation.
    """
    if not isinstance(err_obj, Mapping):
        return ProtocolError(f"error member is not an object: {err_obj!r}", source="rpc")
    try:
        code = int(err_obj.get("code", JsonRpcCode.INTERNAL_ERROR))
    except (TypeError, ValueError):
        return ProtocolError(f"error code is not an integer: {err_obj.get('code')!r}", source="rpc")
    return NodeRejected(
        code,
        str(err_obj.get("message", "Unknown JSON-RPC error")),
        method=method,
        rpc_data=err_obj.get("data"),
        http_status=http_status,
    )
