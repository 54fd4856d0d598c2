"""
GraphWeaver - batch front matter and wikilink generation for Markdown vaults.

Usage:
    from graphweaver import BatchOrchestrator, BatchRequest
    from graphweaver.storage import LocalDocumentStore

    store = LocalDocumentStore("~/vault")
    orchestrator = BatchOrchestrator(store, generators)
    result = await orchestrator.process(BatchRequest(
        files=await store.list(),
        generate_front_matter=True,
        generate_wikilinks=True,
    ))
"""

from .interfaces import (
    DocumentFile,
    DocumentStore,
    GeneratedText,
    GenerationInput,
    StatsSink,
    TextGenerator,
)
from .batch import (
    BatchEvent,
    BatchOrchestrator,
    BatchRequest,
    BatchResult,
    ProcessingOptions,
    ProcessingState,
    ProcessingStats,
)

__all__ = [
    "DocumentFile",
    "DocumentStore",
    "GeneratedText",
    "GenerationInput",
    "StatsSink",
    "TextGenerator",
    "BatchEvent",
    "BatchOrchestrator",
    "BatchRequest",
    "BatchResult",
    "ProcessingOptions",
    "ProcessingState",
    "ProcessingStats",
]

__version__ = "1.0.0"
