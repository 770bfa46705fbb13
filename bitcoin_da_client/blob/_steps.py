from __future__ import annotations

from typing import Awaitable, Optional, TypeVar

from ..utils.deadline import Deadline

T = TypeVar("T")


async def bounded(aw: Awaitable[T], deadline: Optional[Deadline]) -> T:
    """Await one network step, under the caller's deadline when there is one."""
    if deadline is None:
        return await aw
    return await deadline.run(aw)
