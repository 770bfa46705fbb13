"""
bitcoin_da_client.rpc
---------------------

Node JSON-RPC access.

This package exposes:
- RpcTransport:     the protocol components depend on (see .transport)
- HttpRpcTransport: JSON-RPC 2.0 over HTTP with basic auth (see .http)
"""

from __future__ import annotations

from .http import HttpRpcTransport
from .transport import RpcTransport

__all__ = ["RpcTransport", "HttpRpcTransport"]
