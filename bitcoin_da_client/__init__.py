"""
BitcoinDA client: Python
Convenience exports for the Syscoin node RPC + PoDA gateway client.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import EndpointConfig, MAX_BLOB_SIZE  # noqa: F401
from .errors import (  # noqa: F401
    AnchoredButNotStored,
    AuthError,
    BlobNotFound,
    ClientError,
    InvalidReference,
    JsonRpcCode,
    NodeRejected,
    NotFound,
    ProtocolError,
    RequestTimeout,
    TooLarge,
    TransportError,
)
from .types import Balance, GatewayRef, VersionHash  # noqa: F401

# Transports
from .rpc import HttpRpcTransport, RpcTransport  # noqa: F401
from .gateway import GatewayTransport, HttpGatewayTransport  # noqa: F401

# Facade
from .client import SyscoinClient  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "EndpointConfig", "MAX_BLOB_SIZE",
    "ClientError", "TransportError", "AuthError", "RequestTimeout", "ProtocolError",
    "NodeRejected", "NotFound", "BlobNotFound", "TooLarge", "InvalidReference",
    "AnchoredButNotStored", "JsonRpcCode",
    "VersionHash", "GatewayRef", "Balance",
    # Transports
    "RpcTransport", "HttpRpcTransport", "GatewayTransport", "HttpGatewayTransport",
    # Facade
    "SyscoinClient",
]
