"""
Shared pytest fixtures:
- anyio backend pinned to asyncio (the client uses asyncio deadlines)
- FakeNode: in-memory JSON-RPC node (wallets, balance, blob anchoring)
- FakeGateway: in-memory DA gateway
- Config and client factories wired to the fakes

Both fakes record every call so tests can assert how many network round
trips an operation made.
"""
from __future__ import annotations

import asyncio
import hashlib
from typing import Any, Dict, List, Optional, Tuple

import pytest

from bitcoin_da_client.client import SyscoinClient
from bitcoin_da_client.config import EndpointConfig
from bitcoin_da_client.errors import JsonRpcCode, NodeRejected, NotFound, TooLarge
from bitcoin_da_client.types import GatewayRef, VersionHash


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def fake_version_hash(data: bytes) -> str:
    """Versioned-hash shape: 0x01 || sha256(data)[1:]."""
    return "01" + hashlib.sha256(data).hexdigest()[2:]


class FakeNode:
    """
    Minimal in-memory node implementing the methods the client calls.

    `fail` maps a method name to an exception raised on its next call.
    `delay` (seconds) is slept before every answer.
    """

    def __init__(self, *, balance: Any = 10.5, wallets: Optional[Dict[str, bool]] = None) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.balance = balance
        # name -> loaded?
        self.wallets: Dict[str, bool] = dict(wallets or {})
        self.blobs: Dict[str, bytes] = {}
        self.fail: Dict[str, Exception] = {}
        self.delay = 0.0

    def methods(self) -> List[str]:
        return [m for (m, _p) in self.calls]

    async def call(self, method: str, params=None):
        self.calls.append((method, params))
        if self.delay:
            await asyncio.sleep(self.delay)
        if method in self.fail:
            raise self.fail.pop(method)

        if method == "loadwallet":
            name = params[0]
            if name not in self.wallets:
                raise NodeRejected(JsonRpcCode.WALLET_NOT_FOUND, "Wallet file not found.", method=method)
            if self.wallets[name]:
                raise NodeRejected(JsonRpcCode.WALLET_ALREADY_LOADED, "Wallet already loaded.", method=method)
            self.wallets[name] = True
            return {"name": name, "warning": ""}

        if method == "createwallet":
            name = params[0]
            if name in self.wallets:
                raise NodeRejected(JsonRpcCode.WALLET_ERROR, "Database already exists.", method=method)
            self.wallets[name] = True
            return {"name": name, "warning": ""}

        if method == "getbalance":
            return self.balance

        if method == "syscoincreatenevmblob":
            data = bytes.fromhex(params[0]["data"])
            vh = fake_version_hash(data)
            self.blobs[vh] = data
            return {"versionhash": vh, "datasize": len(data), "txid": "ab" * 32}

        if method == "getnevmblobdata":
            vh = params[0]["versionhash_or_txid"]
            if vh not in self.blobs:
                raise NodeRejected(JsonRpcCode.MISC_ERROR, "Could not find blob information for versionhash", method=method)
            return {"versionhash": vh, "data": self.blobs[vh].hex()}

        raise NodeRejected(JsonRpcCode.METHOD_NOT_FOUND, "Method not found", method=method)


class FakeGateway:
    """In-memory gateway keyed by version hash."""

    def __init__(self, *, max_blob_size: int = 2 * 1024 * 1024) -> None:
        self.calls: List[Tuple[str, str]] = []
        self.store: Dict[str, bytes] = {}
        self.max_blob_size = max_blob_size
        self.fail: Dict[str, Exception] = {}
        self.delay = 0.0
        # when set, upload confirms this reference instead of the key it was given
        self.reference_override: Optional[str] = None

    async def upload(self, data, *, version_hash: Optional[VersionHash] = None) -> GatewayRef:
        key = str(version_hash)
        self.calls.append(("upload", key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if "upload" in self.fail:
            raise self.fail.pop("upload")
        if len(data) > self.max_blob_size:
            raise TooLarge("too large", source="gateway", size=len(data), limit=self.max_blob_size)
        self.store[key] = bytes(data)
        return GatewayRef(reference=self.reference_override or key, size=len(data))

    async def download(self, reference: str) -> bytes:
        self.calls.append(("download", reference))
        if self.delay:
            await asyncio.sleep(self.delay)
        if "download" in self.fail:
            raise self.fail.pop("download")
        if reference not in self.store:
            raise NotFound(f"unknown {reference}", source="gateway")
        return self.store[reference]


@pytest.fixture
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def config() -> EndpointConfig:
    return EndpointConfig(
        rpc_url="http://node.test:8370",
        rpc_user="u",
        rpc_password="p",
        gateway_url="http://gateway.test/vh",
        timeout=5.0,
    )


@pytest.fixture
def client(config: EndpointConfig, node: FakeNode, gateway: FakeGateway) -> SyscoinClient:
    return SyscoinClient(config, rpc=node, gateway=gateway)
