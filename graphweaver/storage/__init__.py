"""
Document stores and stats sinks.
"""

from .local_store import LocalDocumentStore
from .debounce import Debouncer
from .stats_sink import InMemoryStatsSink, JsonFileStatsSink

__all__ = [
    "LocalDocumentStore",
    "Debouncer",
    "InMemoryStatsSink",
    "JsonFileStatsSink",
]
