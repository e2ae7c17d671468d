from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.app.ports.output import ITickHandle, ITickScheduler

logger = logging.getLogger(__name__)


class _AsyncioTickHandle(ITickHandle):
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    def attach(self, task: asyncio.Task[None]) -> None:
        self._task = task
        if self._cancelled:
            task.cancel()

    def cancel(self) -> None:
        self._cancelled = True
        task = self._task
        if task is None or task.done():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            task.cancel()
        else:
            self._loop.call_soon_threadsafe(task.cancel)

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(slots=True)
class AsyncioTickScheduler(ITickScheduler):
    """One asyncio task per scheduled callback, on a single event loop.

    If `loop` is not given, `schedule` must be called from inside the running
    loop. Calls from other threads are handed over with
    `call_soon_threadsafe`.
    """

    loop: asyncio.AbstractEventLoop | None = None

    def _target_loop(self) -> asyncio.AbstractEventLoop:
        if self.loop is not None:
            return self.loop
        return asyncio.get_running_loop()

    def schedule(
        self, *, name: str, period_s: float, callback: Callable[[], None]
    ) -> _AsyncioTickHandle:
        loop = self._target_loop()
        handle = _AsyncioTickHandle(loop)

        async def run() -> None:
            while not handle.cancelled:
                await asyncio.sleep(period_s)
                if handle.cancelled:
                    return
                try:
                    callback()
                except Exception:
                    logger.exception("Tick task %s failed", name)

        def start() -> None:
            handle.attach(loop.create_task(run(), name=f"tick-{name}"))

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            start()
        else:
            loop.call_soon_threadsafe(start)
        return handle
