"""
Version of the bitcoin-da-client package.

Kept as a static PEP 440 string so it can be read without importing httpx.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"


def user_agent() -> str:
    """Default User-Agent sent to the node and the DA gateway."""
    return f"bitcoin-da-client-python/{__version__}"


__all__ = ["__version__", "user_agent"]
