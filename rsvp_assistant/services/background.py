"""
Background Runner - Fire-and-forget execution of side effects.

The conversational reply never waits on persistence or notification calls.
Tasks are kept referenced until done so they are not garbage collected
mid-flight, and any exception that escapes them is logged.
"""

import asyncio
import logging
from typing import Coroutine, Set

logger = logging.getLogger(__name__)


class BackgroundRunner:
    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine, name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def drain(self) -> None:
        """Waits for every task spawned so far. Used on shutdown and in tests."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Background task '{task.get_name()}' was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background task '{task.get_name()}' failed: {error!r}")
