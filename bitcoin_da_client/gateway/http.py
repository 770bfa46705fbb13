from __future__ import annotations

"""
DA gateway transport over httpx.

Endpoints (conventions)
-----------------------
- POST {gateway}/blob/{versionhash}   (or {gateway}/blob when no hash is known yet)
    Body: raw bytes (application/octet-stream)
    Returns: 2xx; optional JSON {"versionhash": "...", "size": 1234}

- GET  {gateway}/blob/{versionhash}
    Returns: the stored bytes unchanged (200), or 404 for unknown keys. The
    body is never reinterpreted, whatever Content-Type the gateway sends.

Failures are classified here: 404 → NotFound, 413 → TooLarge, httpx timeouts
→ RequestTimeout, anything else → TransportError. Payloads over the configured
maximum are refused before any request is made. No retries.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from ..config import EndpointConfig
from ..errors import NotFound, ProtocolError, RequestTimeout, TooLarge, TransportError
from ..types import GatewayRef, VersionHash
from ..utils.bytes import BytesLike, ensure_bytes

log = logging.getLogger(__name__)

_REF_KEYS = ("versionhash", "versionHash", "reference", "commitment")


def _detail(resp: httpx.Response) -> str:
    # Try to enrich with server JSON error if present
    try:
        j = resp.json()
        if isinstance(j, dict):
            return str(j.get("detail") or j.get("error") or j)
        return str(j)
    except ValueError:
        return resp.text[:256]


class HttpGatewayTransport:
    """Async gateway client. Keeps one httpx.AsyncClient; use `async with` or `aclose()`."""

    def __init__(
        self,
        config: EndpointConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self.base_url = config.gateway_url
        self.max_blob_size = config.max_blob_size
        self._own_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            headers=config.http_headers(),
        )

    # --- context management

    async def aclose(self) -> None:
        if self._own_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpGatewayTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- high-level API

    def blob_url(self, reference: str) -> str:
        return f"{self.base_url}/blob/{quote(reference, safe='')}"

    async def upload(self, data: BytesLike, *, version_hash: Optional[VersionHash] = None) -> GatewayRef:
        """
        Upload raw bytes. Keyed by `version_hash` when given.

        Returns GatewayRef(reference, size?). When the gateway does not name a
        reference, the key it was given is the reference.
        """
        payload = ensure_bytes(data)
        if len(payload) > self.max_blob_size:
            raise TooLarge(
                f"blob size ({len(payload)}) exceeds maximum allowed ({self.max_blob_size})",
                source="gateway",
                size=len(payload),
                limit=self.max_blob_size,
            )

        url = self.blob_url(str(version_hash)) if version_hash is not None else f"{self.base_url}/blob"
        log.debug("gateway POST %s (%d bytes)", url, len(payload))
        resp = await self._send(
            "POST",
            url,
            content=payload,
            headers={"Content-Type": "application/octet-stream"},
        )
        if resp.status_code == 413:
            raise TooLarge(
                f"gateway refused {len(payload)} bytes: {_detail(resp)}",
                source="gateway",
                size=len(payload),
                limit=self.max_blob_size,
            )
        self._raise_for_status(resp)
        return self._parse_upload(resp, version_hash)

    async def download(self, reference: str) -> bytes:
        """
        Download the raw bytes stored under `reference`.
        """
        url = self.blob_url(reference)
        log.debug("gateway GET %s", url)
        resp = await self._send("GET", url, headers={"Accept": "application/octet-stream"})
        if resp.status_code == 404:
            raise NotFound(f"gateway has no blob {reference}", source="gateway", data={"reference": reference})
        self._raise_for_status(resp)
        return resp.content

    # --- internals

    async def _send(self, method: str, url: str, **kw: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kw)
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"{method} {url}: {e.__class__.__name__}", source="gateway") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}", source="gateway") from e

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.is_success:
            return
        msg = f"HTTP {resp.status_code} for {resp.request.method} {resp.request.url}"
        detail = _detail(resp)
        if detail:
            msg += f": {detail}"
        raise TransportError(msg, source="gateway", http_status=resp.status_code)

    @staticmethod
    def _parse_upload(resp: httpx.Response, version_hash: Optional[VersionHash]) -> GatewayRef:
        body: Dict[str, Any] = {}
        if resp.content:
            try:
                parsed = resp.json()
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                body = parsed

        reference = next((body[k] for k in _REF_KEYS if isinstance(body.get(k), str) and body[k]), None)
        if reference is None:
            if version_hash is None:
                raise ProtocolError("gateway did not return a reference for an unkeyed upload", source="gateway")
            reference = str(version_hash)

        size = body.get("size")
        return GatewayRef(reference=reference, size=size if isinstance(size, int) else None)


__all__ = ["HttpGatewayTransport"]
