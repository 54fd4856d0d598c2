"""
Progress tracking and reporting.
Maintains the live ProcessingStatus of a batch run.
"""

from typing import Any, Callable, Dict, Optional

from config.logging_config import get_logger
from .errors import OrchestrationError
from .models import (
    Clock,
    FileProcessingResult,
    ProcessingError,
    ProcessingState,
    ProcessingStatus,
    now_ms,
)

logger = get_logger(__name__)


class ProgressTracker:
    """
    Tracks per-file progress of one batch run.

    Invariants:
    - files_processed + files_remaining == files_queued after start()
    - files_processed counts attempted files, successful or not
    - the error list is append-only during a run and reset by start()

    Usage:
        tracker = ProgressTracker()
        tracker.start(total_files=10)

        tracker.file_started("notes/a.md")
        tracker.record_result(result)      # updates counts and ETA

        snapshot = tracker.snapshot()       # copy for observers
    """

    def __init__(self, clock: Clock = now_ms):
        """
        Initialize progress tracker.

        Args:
            clock: Millisecond clock used for start time and ETA
        """
        self.clock = clock
        self.status = ProcessingStatus()

    @property
    def percentage(self) -> float:
        return self.status.percentage

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since start(), 0 before any run."""
        if self.status.start_time is None:
            return 0.0
        return self.clock() - self.status.start_time

    def set_state(self, state: ProcessingState):
        """Mirror the state machine's state into the status."""
        self.status.state = state

    def start(self, total_files: int, start_time: Optional[float] = None):
        """
        Reset the status for a new run.

        Args:
            total_files: Number of files queued
            start_time: Run start in ms (defaults to now)
        """
        self.status = ProcessingStatus(
            state=self.status.state,
            files_queued=total_files,
            files_processed=0,
            files_remaining=total_files,
            start_time=self.clock() if start_time is None else start_time,
        )
        logger.debug(f"Progress tracking started: {total_files} files")

    def file_started(self, path: str):
        """Record the file most recently started."""
        self.status.current_file = path

    def record_result(
        self,
        result: FileProcessingResult,
        error: Optional[ProcessingError] = None,
    ) -> ProcessingStatus:
        """
        Account for one completed file (success or failure).

        Args:
            result: The file's single result
            error: Error record for a failed file

        Returns:
            The updated status (live object; use snapshot() to hand out)

        Raises:
            OrchestrationError: If more results arrive than files were queued
        """
        status = self.status
        if status.files_remaining <= 0:
            raise OrchestrationError(
                f"Progress overflow: result for {result.path} after "
                f"{status.files_processed}/{status.files_queued} files"
            )

        status.files_processed += 1
        status.files_remaining -= 1
        if error is not None:
            status.errors.append(error)
        if status.current_file == result.path:
            status.current_file = None

        status.estimated_time_remaining_ms = self.estimate_remaining_ms()
        return status

    def estimate_remaining_ms(self) -> Optional[float]:
        """(elapsed / processed) * remaining, or None before the first file completes."""
        status = self.status
        if status.files_processed <= 0:
            return None
        return (self.elapsed_ms / status.files_processed) * status.files_remaining

    def finish(self):
        """Mark the run as fully processed."""
        self.status.current_file = None
        self.status.estimated_time_remaining_ms = 0.0
        logger.debug(
            f"Progress complete: {self.status.files_processed}/{self.status.files_queued} "
            f"({self.elapsed_ms:.0f}ms)"
        )

    def fail(self, error: str):
        """Mark progress as failed; counts are left as they were."""
        self.status.current_file = None
        self.status.estimated_time_remaining_ms = None
        logger.error(f"Progress failed: {error}")

    def reset(self):
        """Return to an empty status, keeping the mirrored state."""
        self.status = ProcessingStatus(state=self.status.state)

    def snapshot(self) -> ProcessingStatus:
        """Copy of the current status for external readers."""
        return self.status.snapshot()

    def get_state(self) -> Dict[str, Any]:
        """Get current state as dictionary."""
        return {
            **self.status.to_dict(),
            "elapsed_ms": self.elapsed_ms,
        }


def create_logging_observer(log_interval: int = 5) -> Callable[[Any], None]:
    """
    Create a progress observer that logs every N updates.

    Subscribe it to the orchestrator's progress event:
        orchestrator.on(BatchEvent.PROGRESS, create_logging_observer())

    Args:
        log_interval: Log every N updates

    Returns:
        Observer function taking a ProgressEvent
    """
    counter = {"count": 0}

    def observer(event) -> None:
        status = event.status
        counter["count"] += 1
        if counter["count"] % log_interval == 0 or status.files_remaining == 0:
            eta = status.estimated_time_remaining_ms
            eta_text = f"{eta / 1000:.1f}s" if eta is not None else "n/a"
            logger.info(
                f"Progress: {status.files_processed}/{status.files_queued} "
                f"({status.percentage:.1f}%) - errors: {len(status.errors)} - ETA: {eta_text}"
            )

    return observer
