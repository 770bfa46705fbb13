from __future__ import annotations

"""
HTTP JSON-RPC transport (async) for the Syscoin node.

- JSON-RPC 2.0 over HTTP(S) with basic authentication, via httpx.
- Classifies every failure at this boundary into a ClientError subclass, so
  no raw httpx exception reaches the caller.
- Never retries: a replayed `syscoincreatenevmblob` would anchor twice.

Example:
    from bitcoin_da_client.config import EndpointConfig
    from bitcoin_da_client.rpc.http import HttpRpcTransport

    async with HttpRpcTransport(EndpointConfig(rpc_url="http://127.0.0.1:8370",
                                               rpc_user="u", rpc_password="p")) as rpc:
        balance = await rpc.call("getbalance")
"""

import json
import logging
from decimal import Decimal
from itertools import count
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from ..config import EndpointConfig
from ..errors import (
    AuthError,
    ClientError,
    ProtocolError,
    RequestTimeout,
    TransportError,
    from_jsonrpc_error,
)
from .transport import JSON, Params

log = logging.getLogger(__name__)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _normalize_params(params: Params) -> Any:
    if params is None:
        return []
    if isinstance(params, Mapping):
        return dict(params)
    if isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray)):
        return list(params)
    raise TypeError(f"params must be a sequence or mapping, got {type(params).__name__}")


class HttpRpcTransport:
    """JSON-RPC 2.0 client over httpx.AsyncClient."""

    def __init__(
        self,
        config: EndpointConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._ids = count(1)
        self._own_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            headers=config.http_headers(),
        )

    @property
    def url(self) -> str:
        return self._config.rpc_url

    # --- context manager -------------------------------------------------

    async def __aenter__(self) -> "HttpRpcTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._own_client:
            await self._client.aclose()

    # --- public API ------------------------------------------------------

    async def call(self, method: str, params: Params = None) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise."""
        if not isinstance(method, str) or not method:
            raise ValueError("method must be a non-empty string")
        payload = self._make_payload(method, params)
        resp = await self._post(method, payload)
        return self._handle_response(method, resp)

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": _normalize_params(params),
        }

    async def _post(self, method: str, payload: Dict[str, Any]) -> httpx.Response:
        body = json.dumps(payload, separators=(",", ":"))
        log.debug("rpc %s id=%s (%d bytes) -> %s", method, payload["id"], len(body), self.url)
        try:
            return await self._client.post(
                self.url,
                content=body,
                headers={"Content-Type": "application/json"},
                auth=httpx.BasicAuth(self._config.rpc_user, self._config.rpc_password),
            )
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"{method}: {e.__class__.__name__}", source="rpc") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method}: {e.__class__.__name__}: {e}", source="rpc") from e

    def _handle_response(self, method: str, r: httpx.Response) -> JSON:
        status = r.status_code
        if status in (401, 403):
            raise AuthError(f"{method}: node rejected credentials (HTTP {status})", source="rpc", status=status)

        # bitcoind reports JSON-RPC errors with HTTP 404/500 and a JSON body,
        # so decode before looking at the status.
        try:
            resp = r.json(parse_float=Decimal)
        except ValueError as e:
            if not _is_success(status):
                raise TransportError(
                    f"{method}: HTTP {status}: {r.text[:256]}", source="rpc", http_status=status
                ) from e
            raise ProtocolError(f"{method}: non-JSON response from node: {r.text[:256]!r}", source="rpc") from e

        if isinstance(resp, dict) and resp.get("error") is not None:
            err: ClientError = from_jsonrpc_error(resp["error"], method=method, http_status=status)
            log.debug("rpc %s rejected: %s", method, err)
            raise err
        if not _is_success(status):
            raise TransportError(f"{method}: HTTP {status}", source="rpc", http_status=status)
        if not isinstance(resp, dict) or "result" not in resp:
            raise ProtocolError(f"{method}: malformed JSON-RPC response", source="rpc", data={"body": str(resp)[:256]})
        return resp["result"]


__all__ = ["HttpRpcTransport"]
