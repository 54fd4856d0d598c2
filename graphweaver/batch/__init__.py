"""
Batch processing sub-modules.

The orchestrator composes small, separately testable parts: scheduling,
retry, pause gating, state, progress, aggregation and events.
"""

from .errors import (
    BatchError,
    BatchValidationError,
    InvalidStateTransition,
    OrchestrationError,
    BatchCancelledError,
)
from .models import (
    ProcessingState,
    ProcessingOptions,
    DEFAULT_PROCESSING_OPTIONS,
    ProcessingError,
    ProcessingStatus,
    TransformOutcome,
    FileProcessingResult,
    ProcessingStats,
    FileChunk,
    BatchRequest,
    BatchResult,
    now_ms,
)
from .retry_step import RetryableStep
from .pause_gate import PauseGate
from .chunk_scheduler import ChunkScheduler, SchedulerHooks
from .progress_tracker import ProgressTracker, create_logging_observer
from .state_machine import ProcessingStateMachine, StateTransition, TRANSITIONS
from .event_bus import (
    BatchEvent,
    EventBus,
    StartEvent,
    ChunkEvent,
    FileStartEvent,
    FileCompleteEvent,
    ProgressEvent,
    CompleteEvent,
)
from .stats_aggregator import StatsAggregator
from .orchestrator import BatchOrchestrator

__all__ = [
    # Errors
    'BatchError',
    'BatchValidationError',
    'InvalidStateTransition',
    'OrchestrationError',
    'BatchCancelledError',
    # Data model
    'ProcessingState',
    'ProcessingOptions',
    'DEFAULT_PROCESSING_OPTIONS',
    'ProcessingError',
    'ProcessingStatus',
    'TransformOutcome',
    'FileProcessingResult',
    'ProcessingStats',
    'FileChunk',
    'BatchRequest',
    'BatchResult',
    'now_ms',
    # Scheduling
    'RetryableStep',
    'PauseGate',
    'ChunkScheduler',
    'SchedulerHooks',
    # State and progress
    'ProgressTracker',
    'create_logging_observer',
    'ProcessingStateMachine',
    'StateTransition',
    'TRANSITIONS',
    # Events
    'BatchEvent',
    'EventBus',
    'StartEvent',
    'ChunkEvent',
    'FileStartEvent',
    'FileCompleteEvent',
    'ProgressEvent',
    'CompleteEvent',
    # Aggregation
    'StatsAggregator',
    # Orchestrator
    'BatchOrchestrator',
]
