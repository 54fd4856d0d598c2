"""
Collaborator capabilities required by the batch core.

The orchestrator only sees these abstractions; concrete stores,
generators and sinks are injected by the caller.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DocumentFile:
    """A document known to the store."""
    path: str
    basename: str

    @classmethod
    def from_path(cls, path: str) -> "DocumentFile":
        """Build from a store-relative path, deriving basename without extension."""
        name = path.rsplit("/", 1)[-1]
        basename = name.rsplit(".", 1)[0] if "." in name else name
        return cls(path=path, basename=basename)


@dataclass
class GeneratedText:
    """Output of a text generation step."""
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerationInput:
    """Input to a text generation step."""
    content: str
    path: Optional[str] = None
    existing_pages: List[str] = field(default_factory=list)


class DocumentStore(ABC):
    """Read, write and enumerate documents."""

    @abstractmethod
    async def read(self, path: str) -> str:
        """Return the full content of a document."""
        pass

    @abstractmethod
    async def write(self, path: str, content: str) -> None:
        """Replace the content of a document."""
        pass

    @abstractmethod
    async def list(self) -> List[DocumentFile]:
        """Enumerate all documents."""
        pass


class TextGenerator(ABC):
    """
    One AI-backed transform step (front matter, wikilinks, ...).

    Implementations return the transformed document content and may
    raise on failure; retries are the caller's concern.
    """

    name: str = "generator"

    @abstractmethod
    async def generate(self, input: GenerationInput) -> GeneratedText:
        """Transform the input document content."""
        pass


class StatsSink(ABC):
    """Append-only persistence for completed-run summaries."""

    @abstractmethod
    def append(self, stats) -> None:
        """Record one ProcessingStats summary."""
        pass

    @abstractmethod
    def list(self) -> list:
        """Return recorded summaries, oldest first."""
        pass

    async def flush(self) -> None:
        """Force any pending save. Default: nothing buffered."""
        return None

    async def close(self) -> None:
        """Release resources, flushing first."""
        await self.flush()
