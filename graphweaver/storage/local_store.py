"""
Filesystem document store.
"""

import asyncio
from pathlib import Path
from typing import List, Sequence, Union

from config.constants import DOCUMENT_EXTENSIONS
from config.logging_config import get_logger
from graphweaver.interfaces import DocumentFile, DocumentStore

logger = get_logger(__name__)


class LocalDocumentStore(DocumentStore):
    """
    DocumentStore over a directory of Markdown files.

    Paths are POSIX-style and relative to the root. Blocking file I/O
    runs in a worker thread so concurrent files do not stall the loop.
    Hidden directories (".obsidian", ".git", ...) are not listed.
    """

    def __init__(
        self,
        root: Union[str, Path],
        extensions: Sequence[str] = DOCUMENT_EXTENSIONS,
        encoding: str = "utf-8",
    ):
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise FileNotFoundError(f"Vault directory not found: {self.root}")
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.encoding = encoding

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValueError(f"Path escapes vault root: {path}")
        return target

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(self._resolve(path).read_text, encoding=self.encoding)

    async def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        await asyncio.to_thread(target.write_text, content, encoding=self.encoding)

    async def list(self) -> List[DocumentFile]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> List[DocumentFile]:
        files = []
        for candidate in sorted(self.root.rglob("*")):
            relative = candidate.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if candidate.is_file() and candidate.suffix.lower() in self.extensions:
                files.append(DocumentFile(path=relative.as_posix(), basename=candidate.stem))
        logger.debug(f"Found {len(files)} documents under {self.root}")
        return files
