"""Per-call deadlines for provider requests."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")


async def with_deadline(aw: Awaitable[T], seconds: float | None) -> T:
    """Await *aw*, raising ``TimeoutError`` after *seconds*.

    ``None`` or a non-positive value waits indefinitely. On expiry the
    awaited call is cancelled.
    """
    if seconds is None or seconds <= 0:
        return await aw
    async with asyncio.timeout(seconds):
        return await aw
