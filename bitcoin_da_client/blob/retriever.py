"""
Blob retriever: version hash in, stored bytes out.

The version hash is validated before any request, so malformed input costs
no round trip. Plain retrieval reads the gateway only; checking the bytes
against the node's on-chain copy is the separate `verify_blob` call.

With `node_fallback` enabled, a gateway miss or transport failure is followed
by a read from the node (`getnevmblobdata`). If that read fails too, the
gateway error is raised, chained to the node error.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..errors import BlobNotFound, ClientError, JsonRpcCode, NodeRejected, NotFound, ProtocolError, TransportError
from ..gateway.transport import GatewayTransport
from ..rpc.transport import GET_BLOB_DATA, RpcTransport
from ..types import VersionHash
from ..utils.bytes import BytesLike, ensure_bytes, from_hex
from ..utils.deadline import Deadline
from ._steps import bounded

log = logging.getLogger(__name__)

VersionHashLike = Union[str, VersionHash]


class BlobRetriever:
    def __init__(self, rpc: RpcTransport, gateway: GatewayTransport, *, node_fallback: bool = False) -> None:
        self._rpc = rpc
        self._gateway = gateway
        self.node_fallback = bool(node_fallback)

    async def get_blob(self, version_hash: VersionHashLike, *, deadline: Optional[Deadline] = None) -> bytes:
        vh = VersionHash.parse(version_hash)
        try:
            return await self._from_gateway(vh, deadline)
        except (BlobNotFound, TransportError) as e:
            if not self.node_fallback:
                raise
            gateway_error: ClientError = e

        log.warning("gateway read of %s failed (%s); falling back to node", vh, gateway_error)
        try:
            return await self.get_blob_from_node(vh, deadline=deadline)
        except ClientError as e:
            raise gateway_error from e

    async def get_blob_from_cloud(self, version_hash: VersionHashLike, *, deadline: Optional[Deadline] = None) -> bytes:
        """Gateway read only, no fallback."""
        return await self._from_gateway(VersionHash.parse(version_hash), deadline)

    async def get_blob_from_node(self, version_hash: VersionHashLike, *, deadline: Optional[Deadline] = None) -> bytes:
        """Read the blob data the node keeps for `version_hash`."""
        vh = VersionHash.parse(version_hash)
        params = [{"versionhash_or_txid": vh.hex, "getdata": True}]
        result = await bounded(self._rpc.call(GET_BLOB_DATA, params), deadline)
        hex_data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(hex_data, str):
            raise ProtocolError(f"{GET_BLOB_DATA}: missing data in response", source="rpc")
        try:
            return from_hex(hex_data)
        except ValueError as e:
            raise ProtocolError(f"{GET_BLOB_DATA}: data is not hex: {e}", source="rpc") from e

    async def verify_blob(
        self,
        version_hash: VersionHashLike,
        data: Optional[BytesLike] = None,
        *,
        deadline: Optional[Deadline] = None,
    ) -> bool:
        """
        Compare the node's copy of the blob with `data`, or with the gateway's
        copy when `data` is None. False when the node does not know the hash.
        """
        vh = VersionHash.parse(version_hash)
        expected = ensure_bytes(data) if data is not None else await self._from_gateway(vh, deadline)
        try:
            on_chain = await self.get_blob_from_node(vh, deadline=deadline)
        except NodeRejected as e:
            if e.rpc_code == JsonRpcCode.METHOD_NOT_FOUND:
                raise
            log.info("node has no blob %s: %s", vh, e)
            return False
        return on_chain == expected

    async def _from_gateway(self, vh: VersionHash, deadline: Optional[Deadline]) -> bytes:
        try:
            return await bounded(self._gateway.download(str(vh)), deadline)
        except NotFound as e:
            raise BlobNotFound(f"no blob stored under {vh}", source=e.source, data={"version_hash": str(vh)}) from e


__all__ = ["BlobRetriever"]
