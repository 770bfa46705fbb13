from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def ensure_bytes(data: BytesLike) -> bytes:
    """
    Ensure a blob payload is bytes.

    Accepts bytes / bytearray / memoryview. Strings are rejected: a blob is
    opaque bytes, and silently encoding text would hide caller mistakes.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"blob payload must be bytes-like, got {type(data).__name__}")


def strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_hex(b: BytesLike) -> str:
    """Bytes -> bare lowercase hex, the form the node expects."""
    return bytes(b).hex()


def from_hex(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even length; case-insensitive.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a string")
    s = strip_0x(s)
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


__all__ = ["BytesLike", "ensure_bytes", "strip_0x", "to_hex", "from_hex"]
