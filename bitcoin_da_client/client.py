"""
bitcoin_da_client.client
========================

One entry point over the node RPC and the DA gateway.

Typical usage
-------------
    from bitcoin_da_client import SyscoinClient

    async with SyscoinClient.connect(
        "http://127.0.0.1:8370", "u", "p", "http://poda.tanenbaum.io/vh", timeout=30,
    ) as client:
        await client.ensure_loaded("wallet12")
        wallet = client.for_wallet("wallet12")

        balance = await wallet.get_balance()
        vh = await wallet.create_blob(b"hello")
        data = await wallet.get_blob(vh)

Design notes
------------
* The only state is the immutable EndpointConfig and the two transports, so a
  client can be shared by concurrent tasks without locks.
* Every operation runs under one deadline of `config.timeout` seconds, started
  when the call begins and shared by all of its network steps.
* Nothing is retried. In particular `create_blob` never re-anchors; when the
  gateway store fails it raises AnchoredButNotStored and `store_blob` is the
  caller's retry for that step alone.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from .balance import BalanceReader
from .blob import BlobPublisher, BlobRetriever
from .config import EndpointConfig
from .gateway import GatewayTransport, HttpGatewayTransport
from .rpc import HttpRpcTransport, RpcTransport
from .types import Balance, GatewayRef, VersionHash
from .utils.bytes import BytesLike
from .utils.deadline import Deadline
from .wallet import WalletManager

VersionHashLike = Union[str, VersionHash]


class SyscoinClient:
    """
    Client facade for wallet, balance and blob operations.

    Parameters
    ----------
    config : EndpointConfig
        Endpoints, credentials, timeout and blob size limit.
    rpc : RpcTransport | None
        Node transport. Built from `config` when omitted (and then closed by `aclose`).
    gateway : GatewayTransport | None
        Gateway transport. Built from `config` when omitted (and then closed by `aclose`).
    """

    def __init__(
        self,
        config: EndpointConfig,
        *,
        rpc: Optional[RpcTransport] = None,
        gateway: Optional[GatewayTransport] = None,
    ) -> None:
        self.config = config
        self._owned: List[Any] = []
        if rpc is None:
            rpc = HttpRpcTransport(config)
            self._owned.append(rpc)
        if gateway is None:
            gateway = HttpGatewayTransport(config)
            self._owned.append(gateway)
        self._rpc = rpc
        self._gateway = gateway

        self._wallets = WalletManager(rpc)
        self._balance = BalanceReader(rpc)
        self._publisher = BlobPublisher(rpc, gateway, max_blob_size=config.max_blob_size)
        self._retriever = BlobRetriever(rpc, gateway, node_fallback=config.node_fallback)

    @classmethod
    def connect(
        cls,
        rpc_url: str,
        rpc_user: str,
        rpc_password: str,
        gateway_url: str,
        timeout: Optional[float] = None,
        **options: Any,
    ) -> "SyscoinClient":
        """Build a client from plain parameters; `timeout` defaults to 30 s."""
        config = EndpointConfig(
            rpc_url=rpc_url,
            rpc_user=rpc_user,
            rpc_password=rpc_password,
            gateway_url=gateway_url,
        ).with_overrides(timeout=timeout, **options)
        return cls(config)

    def for_wallet(self, name: str, *, rpc: Optional[RpcTransport] = None) -> "SyscoinClient":
        """
        Client whose node calls target `{rpc_url}/wallet/{name}`. Shares this
        client's gateway transport; its own RPC transport is closed by its `aclose`.
        """
        config = self.config.with_wallet(name)
        client = SyscoinClient(config, rpc=rpc or HttpRpcTransport(config), gateway=self._gateway)
        if rpc is None:
            client._owned.append(client._rpc)
        return client

    # --- context manager

    async def __aenter__(self) -> "SyscoinClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for transport in self._owned:
            await transport.aclose()
        self._owned.clear()

    # --- wallet / balance

    @property
    def max_blob_size(self) -> int:
        return self.config.max_blob_size

    def _deadline(self, what: str) -> Deadline:
        return Deadline(self.config.timeout, what=what)

    async def ensure_loaded(self, name: str) -> None:
        """Load wallet `name`, creating it on first use. Safe to call repeatedly."""
        await self._deadline("ensure_loaded").run(self._wallets.ensure_loaded(name))

    # alias
    create_or_load_wallet = ensure_loaded

    async def get_balance(self, account: Optional[str] = None, include_watchonly: Optional[bool] = None) -> Balance:
        return await self._deadline("get_balance").run(self._balance.get_balance(account, include_watchonly))

    # --- blobs

    async def create_blob(self, data: BytesLike) -> VersionHash:
        """Anchor and store `data`; return its version hash."""
        return await self._publisher.create_blob(data, deadline=self._deadline("create_blob"))

    async def store_blob(self, version_hash: VersionHashLike, data: BytesLike) -> GatewayRef:
        """Retry the gateway store for an already anchored blob."""
        return await self._publisher.store_blob(
            VersionHash.parse(version_hash), data, deadline=self._deadline("store_blob")
        )

    async def get_blob(self, version_hash: VersionHashLike) -> bytes:
        return await self._retriever.get_blob(version_hash, deadline=self._deadline("get_blob"))

    async def get_blob_from_cloud(self, version_hash: VersionHashLike) -> bytes:
        return await self._retriever.get_blob_from_cloud(version_hash, deadline=self._deadline("get_blob_from_cloud"))

    async def get_blob_from_node(self, version_hash: VersionHashLike) -> bytes:
        return await self._retriever.get_blob_from_node(version_hash, deadline=self._deadline("get_blob_from_node"))

    async def verify_blob(self, version_hash: VersionHashLike, data: Optional[BytesLike] = None) -> bool:
        return await self._retriever.verify_blob(version_hash, data, deadline=self._deadline("verify_blob"))


__all__ = ["SyscoinClient"]
