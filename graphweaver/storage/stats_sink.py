"""
Stats sinks: persistence for completed-run summaries.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional, Union

from config.constants import STATS_HISTORY_LIMIT, STATS_SAVE_DEBOUNCE_MS
from config.logging_config import get_logger
from graphweaver.batch.models import ProcessingStats
from graphweaver.interfaces import StatsSink
from .debounce import Debouncer

logger = get_logger(__name__)


class InMemoryStatsSink(StatsSink):
    """Keeps summaries in a list (tests, one-off runs)."""

    def __init__(self, history_limit: Optional[int] = None):
        self.history_limit = history_limit
        self._history: List[ProcessingStats] = []

    def append(self, stats: ProcessingStats) -> None:
        self._history.append(stats)
        if self.history_limit and len(self._history) > self.history_limit:
            del self._history[:-self.history_limit]

    def list(self) -> List[ProcessingStats]:
        return list(self._history)


class JsonFileStatsSink(StatsSink):
    """
    Appends summaries to a JSON file.

    Features:
    - History loaded at construction; a corrupt file starts empty
    - Bounded history (oldest entries dropped)
    - Saves debounced so bursts of runs cause one write
    - flush()/close() force the pending save
    """

    def __init__(
        self,
        path: Union[str, Path],
        debounce_ms: float = STATS_SAVE_DEBOUNCE_MS,
        history_limit: int = STATS_HISTORY_LIMIT,
    ):
        self.path = Path(path)
        self.history_limit = history_limit
        self._history: List[ProcessingStats] = []
        self._debouncer = Debouncer(debounce_ms, self._save)
        self._load()

    def _load(self):
        """Load history from disk"""
        if not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._history = [ProcessingStats.from_dict(item) for item in data.get("history", [])]
            logger.debug(f"Loaded {len(self._history)} stats entries from {self.path}")
        except Exception as e:
            logger.warning(f"Failed to load stats history from {self.path}: {e}")
            self._history = []

    def _write(self, payload: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        tmp_path.replace(self.path)

    async def _save(self):
        """Save history to disk"""
        payload = {"history": [s.to_dict() for s in self._history]}
        await asyncio.to_thread(self._write, payload)
        logger.debug(f"Saved {len(self._history)} stats entries to {self.path}")

    def append(self, stats: ProcessingStats) -> None:
        self._history.append(stats)
        if len(self._history) > self.history_limit:
            del self._history[:-self.history_limit]
        self._debouncer.schedule()

    def list(self) -> List[ProcessingStats]:
        return list(self._history)

    async def flush(self) -> None:
        await self._debouncer.flush()
