"""
Single per-operation deadline.

Each facade operation creates one Deadline when the call begins. Every
network step awaits through :meth:`Deadline.run`, which bounds it by the time
left rather than by a fresh timeout, so a multi-step operation (anchor then
store) cannot exceed the configured budget in total.

Must be created from inside a running event loop.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from ..errors import RequestTimeout

T = TypeVar("T")


class Deadline:
    def __init__(self, timeout: float, *, what: str = "operation") -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = float(timeout)
        self.what = what
        self._loop = asyncio.get_running_loop()
        self._expires_at = self._loop.time() + self.timeout

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._loop.time())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def _timeout_error(self) -> RequestTimeout:
        return RequestTimeout(
            f"{self.what} exceeded {self.timeout:g}s deadline",
            data={"timeout": self.timeout},
        )

    async def run(self, aw: Awaitable[T]) -> T:
        """Await `aw` within the time left; raise RequestTimeout on expiry."""
        if self.expired():
            # never started; close it so it does not warn
            close = getattr(aw, "close", None)
            if close is not None:
                close()
            raise self._timeout_error()
        try:
            return await asyncio.wait_for(aw, timeout=self.remaining())
        except asyncio.TimeoutError as e:
            raise self._timeout_error() from e


__all__ = ["Deadline"]
