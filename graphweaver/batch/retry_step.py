"""
Bounded retry around a single file's transform.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from config.logging_config import get_logger
from config.constants import BATCH_MAX_RETRIES, BATCH_RETRY_DELAY_MS
from graphweaver.interfaces import DocumentFile
from .errors import BatchCancelledError

logger = get_logger(__name__)


TransformFunc = Callable[[DocumentFile], Awaitable[Any]]
SleepFunc = Callable[[float], Awaitable[None]]


async def _default_sleep(delay_ms: float) -> None:
    await asyncio.sleep(delay_ms / 1000.0)


class RetryableStep:
    """
    Calls a transform and retries it with a fixed delay.

    Pure retry wrapper: no shared state is touched. After max_retries
    failed retries the last error propagates unchanged; the caller turns
    it into a failed FileProcessingResult.

    Usage:
        step = RetryableStep()
        outcome = await step.execute(file, transform, max_retries=2, retry_delay_ms=500)
    """

    def __init__(self, sleep: Optional[SleepFunc] = None):
        """
        Args:
            sleep: Async delay function taking milliseconds. Defaults to
                asyncio.sleep; the scheduler passes a cancellable one.
        """
        self._sleep = sleep or _default_sleep

    async def execute(
        self,
        file: DocumentFile,
        transform_func: TransformFunc,
        max_retries: int = BATCH_MAX_RETRIES,
        retry_delay_ms: float = BATCH_RETRY_DELAY_MS,
    ) -> Any:
        """
        Run transform_func(file), retrying on failure.

        Args:
            file: Document to transform
            transform_func: Async transform
            max_retries: Retries after the first attempt
            retry_delay_ms: Delay between attempts

        Returns:
            Whatever transform_func returns

        Raises:
            The last exception raised by transform_func once retries are exhausted.
        """
        attempt = 0
        while True:
            try:
                return await transform_func(file)
            except BatchCancelledError:
                raise
            except Exception as e:
                if attempt >= max_retries:
                    if max_retries:
                        logger.warning(
                            f"{file.path}: giving up after {max_retries} retries: {e}"
                        )
                    raise
                attempt += 1
                logger.info(f"{file.path}: retry {attempt}/{max_retries} after error: {e}")
                await self._sleep(retry_delay_ms)
