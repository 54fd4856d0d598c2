"""
Data model for batch document processing.

Options, live status, per-file results and the terminal stats record
shared by the scheduler, tracker, aggregator and orchestrator.
"""

from dataclasses import dataclass, field, fields, replace, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
import time

from config.constants import (
    BATCH_CHUNK_SIZE,
    BATCH_DELAY_BETWEEN_CHUNKS_MS,
    BATCH_MAX_RETRIES,
    BATCH_RETRY_DELAY_MS,
    BATCH_MAX_CONCURRENT_PROCESSING,
    BATCH_GENERATE_FRONT_MATTER,
    BATCH_GENERATE_WIKILINKS,
)
from graphweaver.interfaces import DocumentFile
from .errors import BatchValidationError


# Clock returning epoch milliseconds; injectable for tests
Clock = Callable[[], float]


def now_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000.0


class ProcessingState(Enum):
    """Canonical orchestrator state."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class ProcessingOptions:
    """Options for one batch run (immutable once the run starts)."""
    chunk_size: int = BATCH_CHUNK_SIZE
    delay_between_chunks_ms: int = BATCH_DELAY_BETWEEN_CHUNKS_MS
    max_retries: int = BATCH_MAX_RETRIES
    retry_delay_ms: int = BATCH_RETRY_DELAY_MS
    generate_front_matter: bool = BATCH_GENERATE_FRONT_MATTER
    generate_wikilinks: bool = BATCH_GENERATE_WIKILINKS
    max_concurrent_processing: int = BATCH_MAX_CONCURRENT_PROCESSING

    @property
    def effective_concurrency(self) -> int:
        """In-flight files allowed within one chunk."""
        return min(self.chunk_size, self.max_concurrent_processing)

    def validate(self) -> "ProcessingOptions":
        """
        Check option ranges.

        Raises:
            BatchValidationError: If any option is out of range
        """
        problems = []
        for name in ("chunk_size", "max_concurrent_processing"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                problems.append(f"{name} must be an integer > 0 (got {value!r})")
        for name in ("delay_between_chunks_ms", "max_retries", "retry_delay_ms"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                problems.append(f"{name} must be an integer >= 0 (got {value!r})")
        for name in ("generate_front_matter", "generate_wikilinks"):
            if not isinstance(getattr(self, name), bool):
                problems.append(f"{name} must be a boolean")

        if problems:
            raise BatchValidationError("Invalid processing options: " + "; ".join(problems))
        return self

    def with_overrides(
        self,
        overrides: Union["ProcessingOptions", Mapping[str, Any], None],
    ) -> "ProcessingOptions":
        """
        Merge partial options over this instance.

        Args:
            overrides: Full options, a mapping of option names, or None

        Returns:
            New ProcessingOptions (not yet validated)
        """
        if overrides is None:
            return self
        if isinstance(overrides, ProcessingOptions):
            return overrides

        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise BatchValidationError(f"Unknown processing options: {', '.join(unknown)}")
        return replace(self, **dict(overrides))


DEFAULT_PROCESSING_OPTIONS = ProcessingOptions()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ProcessingError:
    """A per-file failure recorded during a run."""
    file_path: str
    error: str
    timestamp: float
    retry_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProcessingStatus:
    """Live snapshot of a run, owned and mutated by the orchestrator."""
    state: ProcessingState = ProcessingState.IDLE
    files_queued: int = 0
    files_processed: int = 0
    files_remaining: int = 0
    current_file: Optional[str] = None
    start_time: Optional[float] = None
    estimated_time_remaining_ms: Optional[float] = None
    errors: List[ProcessingError] = field(default_factory=list)

    @property
    def percentage(self) -> float:
        """Completion percentage in [0, 100]; 0 when nothing is queued."""
        if self.files_queued == 0:
            return 0.0
        return self.files_processed / self.files_queued * 100.0

    def snapshot(self) -> "ProcessingStatus":
        """Copy-out for observers; the error list is copied too."""
        return replace(self, errors=list(self.errors))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "state": self.state.value,
            "files_queued": self.files_queued,
            "files_processed": self.files_processed,
            "files_remaining": self.files_remaining,
            "current_file": self.current_file,
            "start_time": self.start_time,
            "estimated_time_remaining_ms": self.estimated_time_remaining_ms,
            "percentage": self.percentage,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass(frozen=True)
class TransformOutcome:
    """What a successful per-file transform changed."""
    front_matter_generated: bool = False
    wikilinks_generated: bool = False


@dataclass(frozen=True)
class FileProcessingResult:
    """Result of processing a single file, produced exactly once per file per batch."""
    success: bool
    path: str
    front_matter_generated: bool = False
    wikilinks_generated: bool = False
    processing_time: float = 0.0  # ms
    error: Optional[str] = None

    @property
    def skipped(self) -> bool:
        """Succeeded without changing the document."""
        return self.success and not (self.front_matter_generated or self.wikilinks_generated)


@dataclass(frozen=True)
class ProcessingStats:
    """Terminal summary of one batch."""
    total_files: int
    processed_files: int
    error_files: int
    skipped_files: int
    start_time: float
    end_time: float
    average_processing_time: float

    @property
    def duration_ms(self) -> float:
        return self.end_time - self.start_time

    @property
    def success_rate(self) -> float:
        """Share of files that succeeded (0.0 for an empty batch)."""
        if self.total_files == 0:
            return 0.0
        return self.processed_files / self.total_files

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessingStats":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class FileChunk:
    """A bounded group of files processed concurrently."""
    index: int
    files: List[DocumentFile]

    @property
    def size(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]


@dataclass
class BatchRequest:
    """Input to BatchOrchestrator.process()."""
    files: Sequence[DocumentFile]
    generate_front_matter: bool
    generate_wikilinks: bool
    options: Union[ProcessingOptions, Mapping[str, Any], None] = None

    def validate(self) -> None:
        """
        Reject malformed requests before anything runs.

        Raises:
            BatchValidationError: If files is not a non-empty list of
                documents or a generate flag is not a boolean
        """
        if not isinstance(self.files, (list, tuple)) or len(self.files) == 0:
            raise BatchValidationError("Batch request must contain a non-empty list of files")
        if not all(isinstance(f, DocumentFile) for f in self.files):
            raise BatchValidationError("Batch request files must be DocumentFile instances")
        if not isinstance(self.generate_front_matter, bool):
            raise BatchValidationError("generate_front_matter must be a boolean")
        if not isinstance(self.generate_wikilinks, bool):
            raise BatchValidationError("generate_wikilinks must be a boolean")


@dataclass(frozen=True)
class BatchResult:
    """Output of BatchOrchestrator.process()."""
    file_results: List[FileProcessingResult]
    stats: ProcessingStats
