"""
Pytest configuration and shared fixtures for GraphWeaver tests.
"""
import sys
import pytest
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from graphweaver.interfaces import (
    DocumentFile,
    DocumentStore,
    GeneratedText,
    GenerationInput,
    TextGenerator,
)
from graphweaver.batch.models import ProcessingOptions


# ============================================================================
# Fakes
# ============================================================================

class InMemoryDocumentStore(DocumentStore):
    """Document store backed by a dict of path -> content."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents = dict(documents or {})
        self.writes: List[str] = []
        self.list_calls = 0

    async def read(self, path: str) -> str:
        if path not in self.documents:
            raise FileNotFoundError(path)
        return self.documents[path]

    async def write(self, path: str, content: str) -> None:
        self.documents[path] = content
        self.writes.append(path)

    async def list(self) -> List[DocumentFile]:
        self.list_calls += 1
        return [DocumentFile.from_path(p) for p in sorted(self.documents)]


class StubGenerator(TextGenerator):
    """
    Generator applying a fixed transform.

    Paths in fail_paths always fail; paths in flaky fail that many
    times before succeeding.
    """

    def __init__(
        self,
        name: str,
        transform: Optional[Callable[[str], str]] = None,
        fail_paths: Iterable[str] = (),
        flaky: Optional[Dict[str, int]] = None,
    ):
        self.name = name
        self.transform = transform or (lambda content: content + f"\n<!-- {name} -->")
        self.fail_paths = set(fail_paths)
        self.flaky = dict(flaky or {})
        self.inputs: List[GenerationInput] = []

    @property
    def calls(self) -> List[str]:
        return [i.path for i in self.inputs]

    async def generate(self, input: GenerationInput) -> GeneratedText:
        self.inputs.append(input)
        if input.path in self.fail_paths:
            raise RuntimeError(f"generation failed for {input.path}")
        if self.flaky.get(input.path, 0) > 0:
            self.flaky[input.path] -= 1
            raise RuntimeError(f"transient failure for {input.path}")
        return GeneratedText(content=self.transform(input.content))


class ManualClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


def add_title(content: str) -> str:
    return "---\ntitle: Generated\n---\n" + content


def make_files(count: int) -> List[DocumentFile]:
    return [DocumentFile.from_path(f"notes/note{i}.md") for i in range(count)]


def make_documents(count: int) -> Dict[str, str]:
    return {f"notes/note{i}.md": f"Body of note {i}." for i in range(count)}


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=1_000.0)


@pytest.fixture
def fast_options() -> ProcessingOptions:
    """Options without delays so tests do not sleep."""
    return ProcessingOptions(
        chunk_size=2,
        delay_between_chunks_ms=0,
        max_retries=0,
        retry_delay_ms=0,
        max_concurrent_processing=3,
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(make_documents(5))


@pytest.fixture
def front_matter_generator() -> StubGenerator:
    return StubGenerator("front_matter", transform=add_title)


@pytest.fixture
def wikilink_generator() -> StubGenerator:
    return StubGenerator("wikilinks")


@pytest.fixture
def generators(front_matter_generator, wikilink_generator) -> Dict[str, StubGenerator]:
    return {"front_matter": front_matter_generator, "wikilinks": wikilink_generator}
