"""
Wallet manager: make sure a node-managed wallet is loaded.

`ensure_loaded` probes with `loadwallet` and only creates the wallet when the
node reports it does not exist. Both outcomes are told apart by the node's
numeric error code, never by message text:

    loadwallet  ok                      -> done
    loadwallet  WALLET_ALREADY_LOADED   -> done (idempotent)
    loadwallet  WALLET_NOT_FOUND        -> createwallet
    createwallet ok / ALREADY_LOADED    -> done
    anything else                       -> raised unchanged
"""

from __future__ import annotations

import logging

from .errors import JsonRpcCode, NodeRejected
from .rpc.transport import CREATE_WALLET, LOAD_WALLET, RpcTransport

log = logging.getLogger(__name__)


class WalletManager:
    def __init__(self, rpc: RpcTransport) -> None:
        self._rpc = rpc

    async def ensure_loaded(self, name: str) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("wallet name must be a non-empty string")
        try:
            await self._rpc.call(LOAD_WALLET, [name])
            log.debug("wallet %r loaded", name)
            return
        except NodeRejected as e:
            if e.rpc_code == JsonRpcCode.WALLET_ALREADY_LOADED:
                log.debug("wallet %r already loaded", name)
                return
            if e.rpc_code != JsonRpcCode.WALLET_NOT_FOUND:
                raise

        log.info("wallet %r not found on node; creating it", name)
        try:
            await self._rpc.call(CREATE_WALLET, [name])
        except NodeRejected as e:
            # another caller created and loaded it in between
            if e.rpc_code != JsonRpcCode.WALLET_ALREADY_LOADED:
                raise


__all__ = ["WalletManager"]
