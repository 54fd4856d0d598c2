"""
Chunked batch scheduling.
Runs chunks sequentially and the files inside a chunk concurrently.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
import asyncio

from config.logging_config import get_logger
from graphweaver.interfaces import DocumentFile
from .errors import BatchCancelledError, OrchestrationError
from .models import (
    Clock,
    FileChunk,
    FileProcessingResult,
    ProcessingError,
    ProcessingOptions,
    now_ms,
)
from .pause_gate import PauseGate
from .retry_step import RetryableStep, TransformFunc

logger = get_logger(__name__)


@dataclass
class SchedulerHooks:
    """
    Direct-call hooks the orchestrator uses to follow scheduling.

    Hooks run on the scheduler's logical thread. An exception raised by
    a hook is a failure of the machinery and aborts the run.
    """
    on_chunk_start: Optional[Callable[[FileChunk], None]] = None
    on_chunk_complete: Optional[Callable[[FileChunk, List[FileProcessingResult]], None]] = None
    on_file_start: Optional[Callable[[DocumentFile], None]] = None
    on_file_complete: Optional[Callable[[FileProcessingResult, Optional[ProcessingError]], None]] = None


class ChunkScheduler:
    """
    Processes documents chunk by chunk.

    Features:
    - Fixed-size chunks, strictly sequential
    - Concurrency within a chunk bounded by a semaphore
    - Per-file retry via RetryableStep
    - Pause gate checked before each chunk, cancellable delays

    Usage:
        scheduler = ChunkScheduler(
            options=options,
            transform_func=processor.transform,
            hooks=SchedulerHooks(on_file_complete=record),
        )
        results = await scheduler.run(files)
    """

    def __init__(
        self,
        options: ProcessingOptions,
        transform_func: TransformFunc,
        gate: Optional[PauseGate] = None,
        hooks: Optional[SchedulerHooks] = None,
        retry_step: Optional[RetryableStep] = None,
        clock: Clock = now_ms,
    ):
        """
        Initialize chunk scheduler.

        Args:
            options: Validated processing options for this run
            transform_func: Async function(file) -> TransformOutcome
            gate: Pause gate shared with the orchestrator
            hooks: Progress hooks
            retry_step: Retry wrapper (defaults to one using the gate's sleep)
            clock: Millisecond clock
        """
        self.options = options
        self.transform_func = transform_func
        self.gate = gate or PauseGate()
        self.hooks = hooks or SchedulerHooks()
        self.retry_step = retry_step or RetryableStep(sleep=self.gate.sleep)
        self.clock = clock

        logger.debug(
            f"ChunkScheduler initialized: "
            f"chunk_size={options.chunk_size}, "
            f"concurrency={options.effective_concurrency}, "
            f"retries={options.max_retries}"
        )

    def cancel(self):
        """Cancel ongoing processing."""
        self.gate.cancel()
        logger.info("ChunkScheduler: cancellation requested")

    @staticmethod
    def create_chunks(files: Sequence[DocumentFile], chunk_size: int) -> List[FileChunk]:
        """Split files into chunks of chunk_size; the last chunk may be smaller."""
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0 (got {chunk_size})")
        return [
            FileChunk(index=index, files=list(files[start:start + chunk_size]))
            for index, start in enumerate(range(0, len(files), chunk_size))
        ]

    async def run(self, files: Sequence[DocumentFile]) -> List[FileProcessingResult]:
        """
        Process all files.

        Args:
            files: Documents in processing order

        Returns:
            One FileProcessingResult per file, in input order

        Raises:
            BatchCancelledError: If the gate was cancelled
            OrchestrationError: If a hook or the scheduling itself failed
        """
        if not files:
            return []

        chunks = self.create_chunks(files, self.options.chunk_size)
        results: List[FileProcessingResult] = []

        logger.info(
            f"Processing {len(files)} files in {len(chunks)} chunks "
            f"(concurrency {self.options.effective_concurrency})"
        )

        for chunk in chunks:
            await self.gate.wait_if_paused()

            self._call(self.hooks.on_chunk_start, chunk)
            chunk_results = await self._process_chunk(chunk)
            results.extend(chunk_results)
            self._call(self.hooks.on_chunk_complete, chunk, chunk_results)

            logger.debug(
                f"Chunk {chunk.index + 1}/{len(chunks)} complete: "
                f"{sum(1 for r in chunk_results if r.success)}/{chunk.size} succeeded"
            )

            if chunk.index < len(chunks) - 1:
                await self.gate.sleep(self.options.delay_between_chunks_ms)

        return results

    async def _process_chunk(self, chunk: FileChunk) -> List[FileProcessingResult]:
        """Run every file of a chunk and wait for all of them to settle."""
        semaphore = asyncio.Semaphore(self.options.effective_concurrency)

        async def process_single(file: DocumentFile) -> FileProcessingResult:
            async with semaphore:
                return await self._process_file(file)

        tasks = [process_single(file) for file in chunk.files]
        settled = await asyncio.gather(*tasks, return_exceptions=True)

        # Every file has settled; now surface machinery failures
        final_results = []
        for file, outcome in zip(chunk.files, settled):
            if isinstance(outcome, BatchCancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.error(f"Scheduler failure on {file.path}: {outcome}")
                raise OrchestrationError(
                    f"Scheduler failed while processing {file.path}: {outcome}"
                ) from outcome
            final_results.append(outcome)

        return final_results

    async def _process_file(self, file: DocumentFile) -> FileProcessingResult:
        """Transform one file, converting transform failures into a failed result."""
        self._call(self.hooks.on_file_start, file)
        start_time = self.clock()
        error: Optional[ProcessingError] = None

        try:
            outcome = await self.retry_step.execute(
                file,
                self.transform_func,
                max_retries=self.options.max_retries,
                retry_delay_ms=self.options.retry_delay_ms,
            )
        except BatchCancelledError:
            raise
        except Exception as e:
            finished = self.clock()
            result = FileProcessingResult(
                success=False,
                path=file.path,
                processing_time=finished - start_time,
                error=str(e) or type(e).__name__,
            )
            error = ProcessingError(
                file_path=file.path,
                error=result.error,
                timestamp=finished,
                retry_count=self.options.max_retries,
            )
        else:
            result = FileProcessingResult(
                success=True,
                path=file.path,
                front_matter_generated=bool(getattr(outcome, "front_matter_generated", False)),
                wikilinks_generated=bool(getattr(outcome, "wikilinks_generated", False)),
                processing_time=self.clock() - start_time,
            )

        self._call(self.hooks.on_file_complete, result, error)
        return result

    @staticmethod
    def _call(hook, *args):
        if hook is not None:
            hook(*args)
