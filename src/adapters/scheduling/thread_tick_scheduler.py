from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from src.app.ports.output import ITickHandle, ITickScheduler

logger = logging.getLogger(__name__)


class _ThreadTickHandle(ITickHandle):
    def __init__(self, stop_event: threading.Event, thread: threading.Thread) -> None:
        self._stop_event = stop_event
        self._thread = thread

    def cancel(self) -> None:
        self._stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not threading.current_thread():
            self._thread.join(timeout)


@dataclass(slots=True)
class ThreadTickScheduler(ITickScheduler):
    """One daemon thread per scheduled task.

    Each thread runs its callback sequentially, so ticks of the same task
    never overlap. Cancelling only signals the thread; it is never joined
    from `cancel`, because the callback may be waiting on a lock the
    canceller holds.
    """

    daemon: bool = True

    def schedule(
        self, *, name: str, period_s: float, callback: Callable[[], None]
    ) -> _ThreadTickHandle:
        stop_event = threading.Event()

        def run() -> None:
            while not stop_event.wait(period_s):
                try:
                    callback()
                except Exception:
                    logger.exception("Tick task %s failed", name)

        thread = threading.Thread(target=run, name=f"tick-{name}", daemon=self.daemon)
        handle = _ThreadTickHandle(stop_event, thread)
        thread.start()
        return handle
