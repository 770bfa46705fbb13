"""
Blob publisher: turn a byte payload into an anchored, stored version hash.

Steps
-----
1. Anchor   `syscoincreatenevmblob({"data": <hex>})` on the node. The node
            answers with the blob's versioned hash. A failure here leaves
            nothing behind and is raised as-is.
2. Store    upload the raw bytes to the gateway under that hash. Any failure
            from here on is raised as AnchoredButNotStored, which carries the
            hash so the caller can run `store_blob` alone.
3. Finalize the gateway's confirmation must name the same hash (or none).

The anchor is never retried by this client and identical payloads are never
deduplicated; whether two anchors of the same bytes share a hash is node and
gateway policy.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import AnchoredButNotStored, ClientError, InvalidReference, ProtocolError, TooLarge
from ..gateway.transport import GatewayTransport
from ..rpc.transport import CREATE_BLOB, RpcTransport
from ..types import GatewayRef, VersionHash
from ..utils.bytes import BytesLike, ensure_bytes, to_hex
from ..utils.deadline import Deadline
from ._steps import bounded

log = logging.getLogger(__name__)


class BlobPublisher:
    def __init__(self, rpc: RpcTransport, gateway: GatewayTransport, *, max_blob_size: int) -> None:
        self._rpc = rpc
        self._gateway = gateway
        self.max_blob_size = int(max_blob_size)

    async def create_blob(self, data: BytesLike, *, deadline: Optional[Deadline] = None) -> VersionHash:
        payload = ensure_bytes(data)
        self._check_size(payload)

        vh = await self._anchor(payload, deadline)
        try:
            await self.store_blob(vh, payload, deadline=deadline)
        except ClientError as e:
            log.warning("blob %s anchored but not stored: %s", vh, e)
            raise AnchoredButNotStored(vh, e) from e
        log.debug("blob %s published (%d bytes)", vh, len(payload))
        return vh

    async def store_blob(
        self,
        version_hash: VersionHash,
        data: BytesLike,
        *,
        deadline: Optional[Deadline] = None,
    ) -> GatewayRef:
        """Upload `data` under an already anchored `version_hash`. Never anchors."""
        vh = VersionHash.parse(version_hash)
        payload = ensure_bytes(data)
        self._check_size(payload)

        ref = await bounded(self._gateway.upload(payload, version_hash=vh), deadline)
        self._finalize(vh, ref)
        return ref

    # --- steps

    def _check_size(self, payload: bytes) -> None:
        if len(payload) > self.max_blob_size:
            raise TooLarge(
                f"blob size ({len(payload)}) exceeds maximum allowed ({self.max_blob_size})",
                size=len(payload),
                limit=self.max_blob_size,
            )

    async def _anchor(self, payload: bytes, deadline: Optional[Deadline]) -> VersionHash:
        # named parameter form, as the node requires for this method
        result = await bounded(self._rpc.call(CREATE_BLOB, [{"data": to_hex(payload)}]), deadline)
        raw = result.get("versionhash") if isinstance(result, dict) else None
        if not isinstance(raw, str):
            raise ProtocolError(f"{CREATE_BLOB}: missing versionhash in {result!r}", source="rpc")
        try:
            return VersionHash.parse(raw)
        except InvalidReference as e:
            raise ProtocolError(f"{CREATE_BLOB}: node returned malformed versionhash {raw!r}", source="rpc") from e

    @staticmethod
    def _finalize(vh: VersionHash, ref: GatewayRef) -> None:
        if not VersionHash.is_valid(ref.reference) or VersionHash.parse(ref.reference) != vh:
            raise ProtocolError(
                f"gateway stored blob under {ref.reference!r}, expected {vh}",
                source="gateway",
                data={"reference": ref.reference, "version_hash": str(vh)},
            )


__all__ = ["BlobPublisher"]
