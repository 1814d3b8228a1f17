"""
Dispatchers deliver listener notifications on the host's main context.

Remote-session completions may run on any thread; listeners must only be
called on the thread that owns the host's event loop.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional


class Dispatcher(ABC):
    """Runs callbacks on the host's main execution context."""

    @abstractmethod
    def dispatch(self, callback: Callable[[], None]) -> None:
        pass


class ImmediateDispatcher(Dispatcher):
    """Runs callbacks synchronously in the calling thread."""

    def dispatch(self, callback: Callable[[], None]) -> None:
        callback()


class EventLoopDispatcher(Dispatcher):
    """Schedules callbacks on an asyncio event loop, from any thread."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def dispatch(self, callback: Callable[[], None]) -> None:
        self.loop.call_soon_threadsafe(callback)
