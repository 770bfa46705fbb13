"""
Transport protocol for the DA gateway (PoDA cloud).

The blob publisher and retriever depend on this protocol only; the httpx
implementation is :class:`bitcoin_da_client.gateway.http.HttpGatewayTransport`.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..types import GatewayRef, VersionHash
from ..utils.bytes import BytesLike


@runtime_checkable
class GatewayTransport(Protocol):
    """Async upload/download of raw blob bytes."""

    async def upload(self, data: BytesLike, *, version_hash: Optional[VersionHash] = None) -> GatewayRef:
        """Store `data`, keyed by `version_hash` when given.

        Raises:
            TooLarge, TransportError, RequestTimeout.
        """
        ...

    async def download(self, reference: str) -> bytes:
        """Fetch the bytes stored under `reference`.

        Raises:
            NotFound, TransportError, RequestTimeout.
        """
        ...


__all__ = ["GatewayTransport"]
