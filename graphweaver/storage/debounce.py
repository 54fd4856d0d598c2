"""
Debounced async action.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from config.logging_config import get_logger

logger = get_logger(__name__)


class Debouncer:
    """
    Runs an async action once after calls stop arriving for delay_ms.

    schedule() restarts the timer; flush() runs a pending action now;
    cancel() drops it. Must be used from inside a running event loop.

    Usage:
        debouncer = Debouncer(1000, save)
        debouncer.schedule()
        debouncer.schedule()   # save runs once, 1s after this call
        await debouncer.flush()
    """

    def __init__(self, delay_ms: float, action: Callable[[], Awaitable[None]]):
        self.delay_ms = delay_ms
        self.action = action
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self):
        """(Re)start the timer."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay_ms / 1000.0, self._fire)

    def _fire(self):
        self._handle = None
        self._task = asyncio.ensure_future(self._run())

    async def _run(self):
        try:
            await self.action()
        except Exception as e:
            logger.error(f"Debounced action failed: {e}")

    def cancel(self):
        """Drop any pending run."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def flush(self):
        """Run a pending action immediately and wait for any run in flight."""
        if self._handle is not None:
            self.cancel()
            await self._run()
        if self._task is not None and not self._task.done():
            await self._task
