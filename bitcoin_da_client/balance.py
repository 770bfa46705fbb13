"""Balance reader: one `getbalance` call, decoded to an exact Decimal."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from .errors import ProtocolError
from .rpc.transport import GET_BALANCE, RpcTransport
from .types import Balance


def _to_decimal(value: Any) -> Balance:
    # bool is an int subclass; a node never answers a balance with one
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ProtocolError(f"balance is not numeric: {value!r}", source="rpc")
    amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    if not amount.is_finite():
        raise ProtocolError(f"balance is not finite: {value!r}", source="rpc")
    if amount < 0:
        raise ProtocolError(f"balance is negative: {value!r}", source="rpc")
    return amount


class BalanceReader:
    def __init__(self, rpc: RpcTransport) -> None:
        self._rpc = rpc

    async def get_balance(
        self,
        account: Optional[str] = None,
        include_watchonly: Optional[bool] = None,
    ) -> Balance:
        """
        Spendable balance in SYS. `include_watchonly` is only sent together
        with `account`, matching the node's positional signature
        (use account="*" for the default).
        """
        params: List[Any] = []
        if account is not None:
            params.append(account)
            if include_watchonly is not None:
                params.append(bool(include_watchonly))
        result = await self._rpc.call(GET_BALANCE, params)
        return _to_decimal(result)


__all__ = ["BalanceReader"]
