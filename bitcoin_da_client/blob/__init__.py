"""
bitcoin_da_client.blob
======================

The two blob paths:

- BlobPublisher.create_blob: anchor on-chain, store at the gateway, return the version hash
- BlobRetriever.get_blob:    validate the version hash, fetch the bytes from the gateway
"""

from __future__ import annotations

from .publisher import BlobPublisher
from .retriever import BlobRetriever

__all__ = ["BlobPublisher", "BlobRetriever"]
