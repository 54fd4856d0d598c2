"""
Cooperative pause/resume gate with cancellable waits.
"""

import asyncio

from config.logging_config import get_logger
from .errors import BatchCancelledError

logger = get_logger(__name__)


class PauseGate:
    """
    Blocks the scheduler between chunks while paused.

    Every wait (pause or inter-chunk delay) is released by cancel(),
    which makes the waiter raise BatchCancelledError instead of hanging.

    Usage:
        gate = PauseGate()
        gate.pause()
        ...
        await gate.wait_if_paused()   # returns after gate.resume()
        await gate.sleep(1000)        # cancellable delay
    """

    def __init__(self):
        self._resumed = asyncio.Event()
        self._resumed.set()  # Start unpaused
        self._cancelled = asyncio.Event()

    @property
    def is_paused(self) -> bool:
        return not self._resumed.is_set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def pause(self):
        """Block the next wait_if_paused() call."""
        self._resumed.clear()

    def resume(self):
        """Release waiters blocked by pause()."""
        self._resumed.set()

    def cancel(self):
        """Release every pending wait; waiters raise BatchCancelledError."""
        self._cancelled.set()
        self._resumed.set()  # Unpause if paused
        logger.debug("PauseGate cancelled")

    def reset(self):
        """Unpause for a new run. Cancellation is permanent."""
        self._resumed.set()

    def raise_if_cancelled(self):
        if self._cancelled.is_set():
            raise BatchCancelledError("Batch cancelled")

    async def wait_if_paused(self):
        """Suspend until resumed; no-op when not paused."""
        self.raise_if_cancelled()
        if self.is_paused:
            logger.debug("Waiting for resume")
            await self._resumed.wait()
        self.raise_if_cancelled()

    async def sleep(self, delay_ms: float):
        """Sleep for delay_ms, returning early with BatchCancelledError on cancel()."""
        self.raise_if_cancelled()
        if delay_ms <= 0:
            return
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=delay_ms / 1000.0)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()
