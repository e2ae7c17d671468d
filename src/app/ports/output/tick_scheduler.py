from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable


class ITickHandle(ABC):
    """Handle to one recurring tick task."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop future ticks. Safe to call more than once, and from the tick itself."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        raise NotImplementedError


class ITickScheduler(ABC):
    """Port for running a callback periodically.

    Implementations must never run two ticks of the same handle at once.
    """

    @abstractmethod
    def schedule(
        self, *, name: str, period_s: float, callback: Callable[[], None]
    ) -> ITickHandle:
        raise NotImplementedError
