"""
Client configuration: node RPC endpoint and credentials, DA gateway, timeout.

- One immutable value, shared read-only by every component of a client.
- Supports overrides via environment variables (SYSCOIN_DA_*).
- Derived configs (another wallet, other overrides) are new values.

Environment variables (all optional):

  SYSCOIN_DA_RPC_URL        (http/https)
  SYSCOIN_DA_RPC_USER
  SYSCOIN_DA_RPC_PASSWORD
  SYSCOIN_DA_GATEWAY_URL    (http/https)
  SYSCOIN_DA_TIMEOUT        (float seconds, whole-operation deadline)
  SYSCOIN_DA_MAX_BLOB_SIZE  (bytes; supports KiB/MiB suffixes)
  SYSCOIN_DA_NODE_FALLBACK  (1/true/yes to read from the node when the gateway fails)
  SYSCOIN_DA_USER_AGENT     (str)
"""

from __future__ import annotations

import dataclasses
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

from .version import user_agent as _default_user_agent

DEFAULT_TIMEOUT = 30.0

# Maximum payload accepted by the Syscoin PoDA endpoint (2 MiB).
MAX_BLOB_SIZE = 2 * 1024 * 1024

_DEFAULT_RPC = "http://127.0.0.1:8370"
_DEFAULT_GATEWAY = "http://poda.tanenbaum.io/vh"
_WALLET_SUFFIX = re.compile(r"/wallet/[^/]*$")


_SIZE_RE = re.compile(
    r"^\s*(?P<num>(?:\d+)(?:\.\d+)?)\s*(?P<unit>bytes?|b|kb|kib|mb|mib)?\s*$",
    re.IGNORECASE,
)

_UNITS = {
    "b": 1,
    "byte": 1,
    "bytes": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000**2,
    "mib": 1024**2,
}


def _parse_size(value: Optional[str], *, default: int) -> int:
    """Parse human sizes like '4096', '512KiB', '2MiB' → bytes."""
    if not value:
        return default
    m = _SIZE_RE.match(value)
    if not m:
        raise ValueError(f"Invalid size: {value!r}")
    unit = (m.group("unit") or "b").lower()
    return int(float(m.group("num")) * _UNITS[unit])


def _parse_bool(value: Optional[str], *, default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _ensure_scheme(url: str, allowed: tuple[str, ...] = ("http", "https")) -> str:
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(frozen=True)
class EndpointConfig:
    rpc_url: str = _DEFAULT_RPC
    rpc_user: str = ""
    rpc_password: str = field(default="", repr=False)
    gateway_url: str = _DEFAULT_GATEWAY
    # Whole-operation deadline in seconds, covering connect, request and response.
    timeout: float = DEFAULT_TIMEOUT
    max_blob_size: int = MAX_BLOB_SIZE
    node_fallback: bool = False
    user_agent: str = field(default_factory=_default_user_agent)

    def __post_init__(self) -> None:
        _ensure_scheme(self.rpc_url)
        _ensure_scheme(self.gateway_url)
        if not self.timeout or self.timeout <= 0:
            raise ValueError(f"timeout must be a positive number of seconds, got {self.timeout!r}")
        if self.max_blob_size < 0:
            raise ValueError("max_blob_size must be non-negative")
        # frozen; normalize through object.__setattr__
        object.__setattr__(self, "timeout", float(self.timeout))
        object.__setattr__(self, "gateway_url", self.gateway_url.rstrip("/"))

    @classmethod
    def from_env(cls, prefix: str = "SYSCOIN_DA_") -> "EndpointConfig":
        timeout = _env(f"{prefix}TIMEOUT")
        return cls(
            rpc_url=_env(f"{prefix}RPC_URL", _DEFAULT_RPC) or _DEFAULT_RPC,
            rpc_user=_env(f"{prefix}RPC_USER", "") or "",
            rpc_password=_env(f"{prefix}RPC_PASSWORD", "") or "",
            gateway_url=_env(f"{prefix}GATEWAY_URL", _DEFAULT_GATEWAY) or _DEFAULT_GATEWAY,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
            max_blob_size=_parse_size(_env(f"{prefix}MAX_BLOB_SIZE"), default=MAX_BLOB_SIZE),
            node_fallback=_parse_bool(_env(f"{prefix}NODE_FALLBACK"), default=False),
            user_agent=_env(f"{prefix}USER_AGENT") or _default_user_agent(),
        )

    def with_overrides(self, **overrides: Any) -> "EndpointConfig":
        """
        Copy with keyword overrides. `None` values keep the current setting;
        unknown keys raise TypeError.
        """
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"unknown EndpointConfig option(s): {', '.join(unknown)}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def with_wallet(self, name: str) -> "EndpointConfig":
        """
        Config whose RPC endpoint targets `{node}/wallet/{name}`. A config that
        is already bound to a wallet is rebound, not nested.
        """
        if not name:
            raise ValueError("wallet name must be non-empty")
        base = _WALLET_SUFFIX.sub("", self.rpc_url.rstrip("/"))
        return dataclasses.replace(self, rpc_url=f"{base}/wallet/{quote(name, safe='')}")

    def http_headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent}

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view; the password is never included."""
        return {
            "rpc_url": self.rpc_url,
            "rpc_user": self.rpc_user,
            "gateway_url": self.gateway_url,
            "timeout": self.timeout,
            "max_blob_size": int(self.max_blob_size),
            "node_fallback": bool(self.node_fallback),
            "user_agent": self.user_agent,
        }


__all__ = ["EndpointConfig", "DEFAULT_TIMEOUT", "MAX_BLOB_SIZE"]
