"""
Typed publish/subscribe channel for batch observers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from config.logging_config import get_logger
from graphweaver.interfaces import DocumentFile
from .models import (
    FileChunk,
    FileProcessingResult,
    ProcessingError,
    ProcessingStats,
    ProcessingStatus,
)

logger = get_logger(__name__)


class BatchEvent(Enum):
    """Events emitted by the orchestrator."""
    START = "start"
    CHUNK_START = "chunkStart"
    CHUNK_COMPLETE = "chunkComplete"
    FILE_START = "fileStart"
    FILE_COMPLETE = "fileComplete"
    PROGRESS = "progress"
    PAUSE = "pause"
    RESUME = "resume"
    ERROR = "error"
    COMPLETE = "complete"


@dataclass(frozen=True)
class StartEvent:
    total_files: int


@dataclass(frozen=True)
class ChunkEvent:
    index: int
    files: List[str]
    size: int

    @classmethod
    def from_chunk(cls, chunk: FileChunk) -> "ChunkEvent":
        return cls(index=chunk.index, files=chunk.paths, size=chunk.size)


@dataclass(frozen=True)
class FileStartEvent:
    file: DocumentFile


@dataclass(frozen=True)
class FileCompleteEvent:
    result: FileProcessingResult


@dataclass(frozen=True)
class ProgressEvent:
    status: ProcessingStatus


@dataclass(frozen=True)
class CompleteEvent:
    stats: ProcessingStats


# Per-file error events carry the ProcessingError record itself;
# pause and resume carry no payload.
EventPayload = Union[
    StartEvent, ChunkEvent, FileStartEvent, FileCompleteEvent,
    ProgressEvent, ProcessingError, CompleteEvent, None,
]
EventHandler = Callable[[Any], None]
EventName = Union[BatchEvent, str]


class EventBus:
    """
    Synchronous, in-process event channel.

    Handlers run in subscription order on the emitter's thread, so the
    delivery order equals the emission order. A failing handler is logged
    and skipped; it never affects the emitter or other handlers.

    Usage:
        bus = EventBus()
        unsubscribe = bus.on(BatchEvent.PROGRESS, lambda e: print(e.status.percentage))
        bus.emit(BatchEvent.PROGRESS, ProgressEvent(status))
        unsubscribe()
    """

    def __init__(self):
        self._handlers: Dict[BatchEvent, List[EventHandler]] = {}

    @staticmethod
    def _resolve(event: EventName) -> BatchEvent:
        if isinstance(event, BatchEvent):
            return event
        try:
            return BatchEvent(event)
        except ValueError:
            raise ValueError(f"Unknown batch event: {event!r}") from None

    def on(self, event: EventName, handler: EventHandler) -> Callable[[], None]:
        """
        Subscribe a handler.

        Returns:
            Function that removes this subscription
        """
        kind = self._resolve(event)
        self._handlers.setdefault(kind, []).append(handler)
        return lambda: self.off(kind, handler)

    def off(self, event: EventName, handler: EventHandler) -> bool:
        """Remove a handler; returns False if it was not subscribed."""
        handlers = self._handlers.get(self._resolve(event), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def emit(self, event: EventName, payload: EventPayload = None):
        """Deliver payload to every handler of event."""
        kind = self._resolve(event)
        for handler in list(self._handlers.get(kind, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Event handler error on '{kind.value}': {e}")

    def listener_count(self, event: Optional[EventName] = None) -> int:
        if event is None:
            return sum(len(h) for h in self._handlers.values())
        return len(self._handlers.get(self._resolve(event), []))

    def clear(self):
        """Remove all handlers."""
        self._handlers.clear()
