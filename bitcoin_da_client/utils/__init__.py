"""Small helpers shared by the transports and the blob paths."""

from .bytes import BytesLike, ensure_bytes, from_hex, strip_0x, to_hex  # noqa: F401
from .deadline import Deadline  # noqa: F401

__all__ = ["BytesLike", "ensure_bytes", "from_hex", "strip_0x", "to_hex", "Deadline"]
