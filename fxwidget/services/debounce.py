from __future__ import annotations

"""Cancellable, re-armable delayed call bound to the running event loop."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger("fxwidget.debounce")


class Debouncer:
    """Run ``action`` once ``delay`` seconds after the most recent ``trigger()``.

    Each trigger cancels the pending timer, so a burst of triggers inside the
    window collapses into a single call. The action is a coroutine function;
    it is started as a task and the task is tracked until it finishes.
    """

    def __init__(self, delay: float, action: Callable[[], Awaitable[None]]):
        self._delay = delay
        self._action = action
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        task = asyncio.get_running_loop().create_task(self._action())
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("debounced action failed", exc_info=task.exception())

    async def drain(self) -> None:
        """Wait for actions already fired (not the pending timer)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        self.cancel()
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
