"""
Result aggregation.
Reduces per-file results into the terminal ProcessingStats of a batch.
"""

from typing import List, Optional, Sequence

from config.logging_config import get_logger
from .models import Clock, FileProcessingResult, ProcessingStats, now_ms

logger = get_logger(__name__)


class StatsAggregator:
    """
    Aggregates file results into a ProcessingStats summary.

    Pure: no I/O and no shared state; persisting the summary is the
    caller's job.

    Usage:
        aggregator = StatsAggregator()
        stats = aggregator.aggregate(results, start_time=started_ms)
    """

    def __init__(self, clock: Clock = now_ms):
        self.clock = clock

    def aggregate(
        self,
        results: Sequence[FileProcessingResult],
        start_time: float,
        end_time: Optional[float] = None,
    ) -> ProcessingStats:
        """
        Build the summary of one batch.

        Args:
            results: Exactly one result per input file
            start_time: Batch start in ms
            end_time: Batch end in ms (defaults to now)

        Returns:
            ProcessingStats with processed = successes, errors = failures
            and the mean processing time over all results
        """
        successful = [r for r in results if r.success]
        failed = [r for r in results if not r.success]
        skipped = [r for r in successful if r.skipped]

        average = (
            sum(r.processing_time for r in results) / len(results)
            if results else 0.0
        )

        stats = ProcessingStats(
            total_files=len(results),
            processed_files=len(successful),
            error_files=len(failed),
            skipped_files=len(skipped),
            start_time=start_time,
            end_time=self.clock() if end_time is None else end_time,
            average_processing_time=average,
        )

        if failed:
            logger.warning(f"Aggregation: {len(failed)} files failed")

        logger.info(
            f"Aggregated {stats.total_files} files: "
            f"{stats.processed_files} processed, {stats.error_files} failed, "
            f"{stats.skipped_files} unchanged (avg {average:.0f}ms)"
        )

        return stats

    @staticmethod
    def failed_paths(results: Sequence[FileProcessingResult]) -> List[str]:
        """Paths of failed files, in result order."""
        return [r.path for r in results if not r.success]
