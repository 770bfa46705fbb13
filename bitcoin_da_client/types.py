"""
Value types passed between the facade, the blob paths and the transports.

VersionHash
    The node's 32-byte versioned hash for a blob. It is the only key the
    gateway and the node accept for retrieval. Rendered as 64 lowercase hex
    characters without prefix, which is the form both endpoints expect.

GatewayRef
    What the gateway reported back for an upload.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from .errors import InvalidReference

VERSION_HASH_BYTES = 32

_VH_RE = re.compile(r"^(?:0[xX])?([0-9a-fA-F]{64})$")

Balance = Decimal


@dataclass(frozen=True)
class VersionHash:
    hex: str

    def __post_init__(self) -> None:
        # Direct construction goes through the same check as parse().
        if not isinstance(self.hex, str) or not re.fullmatch(r"[0-9a-f]{64}", self.hex):
            raise InvalidReference(
                f"version hash must be {VERSION_HASH_BYTES * 2} lowercase hex chars, got {self.hex!r}"
            )

    @classmethod
    def parse(cls, value: Union[str, "VersionHash"]) -> "VersionHash":
        """
        Accept an existing VersionHash or a 64-char hex string with optional
        '0x' prefix, any case. Raise InvalidReference otherwise.
        """
        if isinstance(value, VersionHash):
            return value
        if not isinstance(value, str):
            raise InvalidReference(f"version hash must be a string, got {type(value).__name__}")
        m = _VH_RE.match(value.strip())
        if m is None:
            raise InvalidReference(f"malformed version hash: {value!r}")
        return cls(m.group(1).lower())

    @classmethod
    def is_valid(cls, value: object) -> bool:
        try:
            cls.parse(value)  # type: ignore[arg-type]
        except InvalidReference:
            return False
        return True

    @property
    def prefixed(self) -> str:
        return "0x" + self.hex

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.hex)

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True)
class GatewayRef:
    reference: str
    size: Optional[int] = None


__all__ = ["VERSION_HASH_BYTES", "VersionHash", "GatewayRef", "Balance"]
