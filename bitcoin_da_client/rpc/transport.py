"""
Transport protocol for node JSON-RPC calls.

Defines the seam the wallet, balance and blob components depend on. The
concrete HTTP implementation lives in :mod:`bitcoin_da_client.rpc.http`;
tests plug in fakes that return canned results.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, Union, runtime_checkable

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]


@runtime_checkable
class RpcTransport(Protocol):
    """Async JSON-RPC call against the node."""

    async def call(self, method: str, params: Params = None) -> JSON:
        """Invoke `method` and return the decoded `result` member.

        Raises:
            TransportError, AuthError, RequestTimeout, ProtocolError or
            NodeRejected. Never returns an error response as a result.
        """
        ...


# Node method names
LOAD_WALLET = "loadwallet"
CREATE_WALLET = "createwallet"
GET_BALANCE = "getbalance"
CREATE_BLOB = "syscoincreatenevmblob"
GET_BLOB_DATA = "getnevmblobdata"


__all__ = [
    "JSON",
    "Params",
    "RpcTransport",
    "LOAD_WALLET",
    "CREATE_WALLET",
    "GET_BALANCE",
    "CREATE_BLOB",
    "GET_BLOB_DATA",
]
