"""Fire-and-forget background dispatch."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """Runs coroutines as detached tasks with their own failure boundary.

    Callers never await the dispatched work. Failures are logged and
    discarded. Pending tasks are referenced until they finish so the event
    loop cannot garbage-collect them mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """Schedule ``coro`` and return immediately."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Background task '{task.get_name()}' was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"Background task '{task.get_name()}' failed: {exc}")

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for pending tasks; cancel whatever is left after ``timeout``."""
        if not self._tasks:
            return

        tasks = list(self._tasks)
        logger.info(f"Draining {len(tasks)} background task(s)")
        _, still_pending = await asyncio.wait(tasks, timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            await asyncio.gather(*still_pending, return_exceptions=True)


# Global dispatcher instance
background_dispatcher = BackgroundDispatcher()
