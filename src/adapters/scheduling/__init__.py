from .asyncio_tick_scheduler import AsyncioTickScheduler
from .thread_tick_scheduler import ThreadTickScheduler

__all__ = [
    "AsyncioTickScheduler",
    "ThreadTickScheduler",
]
