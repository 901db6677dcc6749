"""
Fire-and-forget dispatch for side effects that must never fail or slow down
the request that triggered them (live pushes, analytics enqueueing).

Tasks are kept in a module-level set until they finish so the event loop
does not garbage-collect them mid-flight.
"""

import asyncio
import logging
from typing import Coroutine, Set

logger = logging.getLogger(__name__)

_pending: Set[asyncio.Task] = set()


def _on_done(task: asyncio.Task) -> None:
    _pending.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Background task %s failed: %s", task.get_name(), exc, exc_info=exc)


def fire_and_forget(coro: Coroutine, name: str = "background") -> asyncio.Task:
    """Schedule ``coro`` on the running loop without awaiting it."""
    task = asyncio.create_task(coro, name=name)
    _pending.add(task)
    task.add_done_callback(_on_done)
    return task


def pending_count() -> int:
    return len(_pending)


async def drain_background_tasks() -> None:
    """Wait for every scheduled task (shutdown hook and tests)."""
    while _pending:
        await asyncio.gather(*list(_pending), return_exceptions=True)
