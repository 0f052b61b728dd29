"""Cooperative suspension points.

Hashing components never talk to the event loop directly. They await a
``YieldPoint`` so that hosts with their own scheduling (or tests that count
suspensions) can plug in a different one.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

YieldPoint = Callable[[], Awaitable[None]]


async def cooperative_yield() -> None:
    """Give the running event loop a chance to run other tasks."""
    await asyncio.sleep(0)
