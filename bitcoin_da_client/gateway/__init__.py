"""
bitcoin_da_client.gateway
-------------------------

Off-chain blob storage access (the DA gateway).

- GatewayTransport:     the protocol the blob paths depend on (see .transport)
- HttpGatewayTransport: POST/GET of raw bytes over httpx (see .http)
"""

from __future__ import annotations

from .http import HttpGatewayTransport
from .transport import GatewayTransport

__all__ = ["GatewayTransport", "HttpGatewayTransport"]
