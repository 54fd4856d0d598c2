"""
Unit tests for graphweaver.batch.progress_tracker module.
"""

import pytest
from unittest.mock import patch

from conftest import ManualClock
from graphweaver.batch.errors import OrchestrationError
from graphweaver.batch.event_bus import ProgressEvent
from graphweaver.batch.models import (
    FileProcessingResult,
    ProcessingError,
    ProcessingState,
    ProcessingStatus,
)
from graphweaver.batch.progress_tracker import ProgressTracker, create_logging_observer


def ok(path: str) -> FileProcessingResult:
    return FileProcessingResult(success=True, path=path)


class TestProgressTracker:
    """Tests for ProgressTracker class."""

    @pytest.fixture
    def clock(self):
        return ManualClock(start=0.0)

    @pytest.fixture
    def tracker(self, clock):
        return ProgressTracker(clock=clock)

    def test_initial_status(self, tracker):
        assert tracker.status.files_queued == 0
        assert tracker.percentage == 0.0
        assert tracker.elapsed_ms == 0.0

    def test_start(self, tracker, clock):
        """start() resets counters for a new run."""
        clock.advance(500)
        tracker.start(total_files=6)

        assert tracker.status.files_queued == 6
        assert tracker.status.files_processed == 0
        assert tracker.status.files_remaining == 6
        assert tracker.status.start_time == 500
        assert tracker.status.estimated_time_remaining_ms is None

    def test_record_result_updates_counts(self, tracker):
        tracker.start(total_files=3)
        tracker.file_started("a.md")
        assert tracker.status.current_file == "a.md"

        tracker.record_result(ok("a.md"))

        assert tracker.status.files_processed == 1
        assert tracker.status.files_remaining == 2
        assert tracker.status.current_file is None
        assert tracker.status.files_processed + tracker.status.files_remaining == 3

    def test_failed_result_records_error(self, tracker):
        """Failures count as processed and append an error."""
        tracker.start(total_files=2)
        error = ProcessingError("b.md", "boom", 10.0, 3)

        tracker.record_result(FileProcessingResult(success=False, path="b.md", error="boom"), error)

        assert tracker.status.files_processed == 1
        assert tracker.status.errors == [error]

    def test_eta(self, tracker, clock):
        """4000 ms elapsed, 2 of 6 processed: 8000 ms remaining."""
        tracker.start(total_files=6, start_time=0.0)
        clock.advance(4000)

        tracker.record_result(ok("a.md"))
        tracker.record_result(ok("b.md"))

        assert tracker.status.estimated_time_remaining_ms == 8000.0

    def test_overflow_raises(self, tracker):
        """More results than queued files is a machinery failure."""
        tracker.start(total_files=1)
        tracker.record_result(ok("a.md"))

        with pytest.raises(OrchestrationError):
            tracker.record_result(ok("b.md"))

    def test_finish_zeroes_eta(self, tracker):
        tracker.start(total_files=1)
        tracker.record_result(ok("a.md"))
        tracker.finish()
        assert tracker.status.estimated_time_remaining_ms == 0.0
        assert tracker.percentage == 100.0

    def test_fail_keeps_counts(self, tracker):
        tracker.start(total_files=2)
        tracker.record_result(ok("a.md"))
        tracker.fail("scheduler crashed")
        assert tracker.status.files_processed == 1
        assert tracker.status.estimated_time_remaining_ms is None

    def test_state_survives_start_and_reset(self, tracker):
        """The mirrored state is owned by the state machine."""
        tracker.set_state(ProcessingState.RUNNING)
        tracker.start(total_files=2)
        assert tracker.status.state is ProcessingState.RUNNING
        tracker.reset()
        assert tracker.status.state is ProcessingState.RUNNING
        assert tracker.status.files_queued == 0

    def test_snapshot_is_a_copy(self, tracker):
        tracker.start(total_files=2)
        snapshot = tracker.snapshot()
        tracker.record_result(ok("a.md"), ProcessingError("a.md", "x", 0.0, 0))
        assert snapshot.files_processed == 0
        assert snapshot.errors == []

    def test_get_state(self, tracker, clock):
        tracker.start(total_files=2, start_time=0.0)
        clock.advance(250)
        state = tracker.get_state()
        assert state["files_queued"] == 2
        assert state["elapsed_ms"] == 250


class TestLoggingObserver:
    """Tests for create_logging_observer."""

    def test_logs_every_interval_and_at_end(self):
        observer = create_logging_observer(log_interval=2)

        with patch("graphweaver.batch.progress_tracker.logger") as mock_logger:
            observer(ProgressEvent(ProcessingStatus(files_queued=3, files_processed=1, files_remaining=2)))
            assert mock_logger.info.call_count == 0
            observer(ProgressEvent(ProcessingStatus(files_queued=3, files_processed=2, files_remaining=1)))
            assert mock_logger.info.call_count == 1
            observer(ProgressEvent(ProcessingStatus(files_queued=3, files_processed=3, files_remaining=0)))
            assert mock_logger.info.call_count == 2
