"""
Batch orchestrator.

Top-level façade: validates a batch request, drives the chunk scheduler,
keeps the state machine and progress tracker current, notifies observers
through the event bus and hands the final stats to the stats sink.
"""

from dataclasses import replace
from functools import partial
from typing import Any, Callable, Mapping, Optional, Union
import asyncio

from config.logging_config import get_logger
from graphweaver.interfaces import DocumentFile, DocumentStore, StatsSink, TextGenerator
from graphweaver.processing.document_processor import DocumentProcessor

from .chunk_scheduler import ChunkScheduler, SchedulerHooks
from .errors import InvalidStateTransition, OrchestrationError
from .event_bus import (
    BatchEvent,
    ChunkEvent,
    CompleteEvent,
    EventBus,
    EventHandler,
    FileCompleteEvent,
    FileStartEvent,
    ProgressEvent,
    StartEvent,
)
from .models import (
    DEFAULT_PROCESSING_OPTIONS,
    BatchRequest,
    BatchResult,
    Clock,
    FileChunk,
    FileProcessingResult,
    ProcessingError,
    ProcessingOptions,
    ProcessingState,
    ProcessingStats,
    ProcessingStatus,
    now_ms,
)
from .pause_gate import PauseGate
from .progress_tracker import ProgressTracker
from .state_machine import ProcessingStateMachine, StateTransition
from .stats_aggregator import StatsAggregator

logger = get_logger(__name__)


class BatchOrchestrator:
    """
    Orchestrates batch document processing using sub-modules.

    Collaborators are injected, never looked up:
    - DocumentStore for reading and writing documents
    - TextGenerators keyed by step ("front_matter", "wikilinks")
    - StatsSink for completed-run summaries (optional)

    Internally:
    - ChunkScheduler for chunked, concurrent processing
    - ProcessingStateMachine for Idle/Running/Paused/Error
    - ProgressTracker for counts and ETA
    - StatsAggregator for the terminal summary
    - EventBus for observers

    pause() and resume() called in the wrong state are no-ops that
    return False.

    Usage:
        orchestrator = BatchOrchestrator(store, generators, stats_sink=sink)
        orchestrator.on(BatchEvent.PROGRESS, on_progress)

        result = await orchestrator.process(BatchRequest(
            files=await store.list(),
            generate_front_matter=True,
            generate_wikilinks=False,
        ))
    """

    def __init__(
        self,
        document_store: DocumentStore,
        generators: Optional[Mapping[str, TextGenerator]] = None,
        stats_sink: Optional[StatsSink] = None,
        options: Optional[ProcessingOptions] = None,
        event_bus: Optional[EventBus] = None,
        processor: Optional[DocumentProcessor] = None,
        clock: Clock = now_ms,
    ):
        """
        Initialize orchestrator.

        Args:
            document_store: Store holding the documents
            generators: Text generators keyed by step name
            stats_sink: Optional sink for completed-run stats
            options: Default processing options (validated here)
            event_bus: Optional shared event bus
            processor: Optional custom per-file processor
            clock: Millisecond clock
        """
        self.options = (options or DEFAULT_PROCESSING_OPTIONS).validate()
        self.document_store = document_store
        self.processor = processor or DocumentProcessor(document_store, generators or {})
        self.stats_sink = stats_sink
        self.event_bus = event_bus or EventBus()
        self.clock = clock

        self.state_machine = ProcessingStateMachine(clock=clock)
        self.tracker = ProgressTracker(clock=clock)
        self.aggregator = StatsAggregator(clock=clock)
        self.gate = PauseGate()

        self.state_machine.add_listener(self._on_transition)
        self._destroyed = False

        logger.info(
            f"BatchOrchestrator initialized: "
            f"chunk_size={self.options.chunk_size}, "
            f"concurrency={self.options.max_concurrent_processing}, "
            f"retries={self.options.max_retries}"
        )

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> ProcessingState:
        return self.state_machine.state

    @property
    def status(self) -> ProcessingStatus:
        """Read-only snapshot of the current status."""
        return self.tracker.snapshot()

    def on(self, event: Union[BatchEvent, str], handler: EventHandler) -> Callable[[], None]:
        """Subscribe to an event; returns the unsubscribe function."""
        return self.event_bus.on(event, handler)

    def off(self, event: Union[BatchEvent, str], handler: EventHandler) -> bool:
        return self.event_bus.off(event, handler)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def resolve_options(self, request: BatchRequest) -> ProcessingOptions:
        """
        Validate a request and compute its effective options.

        Raises:
            BatchValidationError: If the request or merged options are invalid
        """
        request.validate()
        options = self.options.with_overrides(request.options)
        options = replace(
            options,
            generate_front_matter=request.generate_front_matter,
            generate_wikilinks=request.generate_wikilinks,
        ).validate()
        self.processor.check_capabilities(
            generate_front_matter=options.generate_front_matter,
            generate_wikilinks=options.generate_wikilinks,
        )
        return options

    async def process(self, request: BatchRequest) -> BatchResult:
        """
        Process a batch end-to-end.

        Args:
            request: Files, generate flags and optional option overrides

        Returns:
            BatchResult with one result per file and the run's stats

        Raises:
            BatchValidationError: Malformed request (no state change, no events)
            InvalidStateTransition: A run is active or the last run failed
                without reset()
            OrchestrationError: The run aborted; state is now Error
        """
        options = self.resolve_options(request)
        if self._destroyed:
            raise OrchestrationError("Orchestrator has been destroyed")
        if not self.state_machine.is_idle:
            raise InvalidStateTransition(self.state, ProcessingState.RUNNING)

        files = list(request.files)
        start_time = self.clock()

        self.gate.reset()
        self.tracker.start(len(files), start_time)
        self.state_machine.transition_to(ProcessingState.RUNNING, f"{len(files)} files")
        self.event_bus.emit(BatchEvent.START, StartEvent(total_files=len(files)))

        scheduler = ChunkScheduler(
            options=options,
            transform_func=partial(
                self.processor.transform,
                generate_front_matter=options.generate_front_matter,
                generate_wikilinks=options.generate_wikilinks,
            ),
            gate=self.gate,
            hooks=SchedulerHooks(
                on_chunk_start=self._on_chunk_start,
                on_chunk_complete=self._on_chunk_complete,
                on_file_start=self._on_file_start,
                on_file_complete=self._on_file_complete,
            ),
            clock=self.clock,
        )

        try:
            results = await scheduler.run(files)
            # A run paused after its last chunk completes only once resumed
            await self.gate.wait_if_paused()
            if len(results) != len(files):
                raise OrchestrationError(
                    f"Expected {len(files)} results, got {len(results)}"
                )
        except OrchestrationError as e:
            self._abort(str(e))
            raise
        except asyncio.CancelledError:
            self._abort("task cancelled")
            raise
        except Exception as e:
            self._abort(str(e))
            raise OrchestrationError(f"Batch processing failed: {e}") from e

        self.tracker.finish()
        stats = self.aggregator.aggregate(results, start_time=start_time)
        self.state_machine.transition_to(ProcessingState.IDLE, "batch complete")
        self.event_bus.emit(BatchEvent.COMPLETE, CompleteEvent(stats=stats))
        self._persist(stats)

        logger.info(
            f"Batch completed: {stats.processed_files}/{stats.total_files} processed, "
            f"{stats.error_files} failed, {stats.duration_ms:.0f}ms"
        )

        return BatchResult(file_results=results, stats=stats)

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def pause(self) -> bool:
        """
        Pause after the current chunk. In-flight files finish normally.

        Returns:
            True if paused, False if not running (no-op)
        """
        if self.state is not ProcessingState.RUNNING:
            logger.warning(f"pause() ignored in state {self.state.value}")
            return False

        self.gate.pause()
        self.state_machine.transition_to(ProcessingState.PAUSED, "pause requested")
        self.event_bus.emit(BatchEvent.PAUSE)
        return True

    def resume(self) -> bool:
        """
        Resume a paused run.

        Returns:
            True if resumed, False if not paused (no-op)
        """
        if self.state is not ProcessingState.PAUSED:
            logger.warning(f"resume() ignored in state {self.state.value}")
            return False

        self.state_machine.transition_to(ProcessingState.RUNNING, "resume requested")
        self.gate.resume()
        self.event_bus.emit(BatchEvent.RESUME)
        return True

    def reset(self) -> bool:
        """
        Clear an Error state so a new run can start.

        Returns:
            True if reset, False if not in Error (no-op)
        """
        if self.state is not ProcessingState.ERROR:
            logger.warning(f"reset() ignored in state {self.state.value}")
            return False

        self.state_machine.transition_to(ProcessingState.IDLE, "reset")
        self.tracker.reset()
        return True

    async def destroy(self):
        """
        Shut down: release pause and delay waits, drop subscribers and
        close the stats sink. A running batch aborts with BatchCancelledError.
        """
        if self._destroyed:
            return
        self._destroyed = True
        self.gate.cancel()
        self.event_bus.clear()

        if self.stats_sink is not None:
            try:
                await self.stats_sink.close()
            except Exception as e:
                logger.error(f"Stats sink close failed: {e}")

        logger.info("BatchOrchestrator destroyed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _abort(self, reason: str):
        """Move a failed run to Error."""
        self.tracker.fail(reason)
        if self.state_machine.can_transition(ProcessingState.ERROR):
            self.state_machine.transition_to(ProcessingState.ERROR, reason)
        logger.error(f"Batch aborted: {reason}")

    def _persist(self, stats: ProcessingStats):
        """Hand stats to the sink; failures are logged, never raised."""
        if self.stats_sink is None:
            return
        try:
            self.stats_sink.append(stats)
        except Exception as e:
            logger.error(f"Failed to persist batch stats: {e}")

    def _on_transition(self, transition: StateTransition):
        self.tracker.set_state(transition.current)

    def _on_chunk_start(self, chunk: FileChunk):
        self.event_bus.emit(BatchEvent.CHUNK_START, ChunkEvent.from_chunk(chunk))

    def _on_chunk_complete(self, chunk: FileChunk, results: Any):
        self.event_bus.emit(BatchEvent.CHUNK_COMPLETE, ChunkEvent.from_chunk(chunk))

    def _on_file_start(self, file: DocumentFile):
        self.tracker.file_started(file.path)
        self.event_bus.emit(BatchEvent.FILE_START, FileStartEvent(file=file))

    def _on_file_complete(
        self,
        result: FileProcessingResult,
        error: Optional[ProcessingError],
    ):
        self.tracker.record_result(result, error)
        self.event_bus.emit(BatchEvent.FILE_COMPLETE, FileCompleteEvent(result=result))
        if error is not None:
            logger.warning(f"File failed: {error.file_path} ({error.error})")
            self.event_bus.emit(BatchEvent.ERROR, error)
        self.event_bus.emit(BatchEvent.PROGRESS, ProgressEvent(status=self.tracker.snapshot()))
