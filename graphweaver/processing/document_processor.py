"""
Per-file transform used by the batch orchestrator.

Reads one document, runs the requested generators in order (front
matter, then wikilinks) and writes the document back only if it changed.
"""

from typing import List, Mapping, Optional

from config.logging_config import get_logger
from graphweaver.batch.errors import BatchValidationError
from graphweaver.batch.models import TransformOutcome
from graphweaver.interfaces import (
    DocumentFile,
    DocumentStore,
    GenerationInput,
    TextGenerator,
)
from graphweaver.text import has_front_matter

logger = get_logger(__name__)

FRONT_MATTER_STEP = "front_matter"
WIKILINKS_STEP = "wikilinks"


class DocumentProcessor:
    """
    Applies generators to one document.

    Front matter is generated only for documents that have none.
    Wikilink suggestions are given the basenames of every document in
    the store; the list is read once and cached until refresh_pages().

    Usage:
        processor = DocumentProcessor(store, {"front_matter": fm, "wikilinks": wl})
        outcome = await processor.transform(file, generate_front_matter=True)
    """

    def __init__(self, store: DocumentStore, generators: Mapping[str, TextGenerator]):
        self.store = store
        self.generators = dict(generators)
        self._pages: Optional[List[str]] = None

    def check_capabilities(self, generate_front_matter: bool, generate_wikilinks: bool):
        """
        Raises:
            BatchValidationError: If a requested step has no generator
        """
        missing = []
        if generate_front_matter and FRONT_MATTER_STEP not in self.generators:
            missing.append(FRONT_MATTER_STEP)
        if generate_wikilinks and WIKILINKS_STEP not in self.generators:
            missing.append(WIKILINKS_STEP)
        if missing:
            raise BatchValidationError(f"No generator configured for: {', '.join(missing)}")

    def refresh_pages(self):
        """Forget the cached page list."""
        self._pages = None

    async def existing_pages(self) -> List[str]:
        if self._pages is None:
            self._pages = sorted({f.basename for f in await self.store.list()})
        return self._pages

    async def transform(
        self,
        file: DocumentFile,
        generate_front_matter: bool = True,
        generate_wikilinks: bool = False,
    ) -> TransformOutcome:
        """
        Transform one document.

        Returns:
            TransformOutcome saying which steps changed the document

        Raises:
            Any store or generator error; the caller retries.
        """
        original = await self.store.read(file.path)
        content = original
        front_matter_generated = False
        wikilinks_generated = False

        if generate_front_matter:
            if has_front_matter(content):
                logger.debug(f"{file.path}: front matter present, skipped")
            else:
                output = await self.generators[FRONT_MATTER_STEP].generate(
                    GenerationInput(content=content, path=file.path)
                )
                front_matter_generated = output.content != content
                content = output.content

        if generate_wikilinks:
            output = await self.generators[WIKILINKS_STEP].generate(
                GenerationInput(
                    content=content,
                    path=file.path,
                    existing_pages=[p for p in await self.existing_pages() if p != file.basename],
                )
            )
            wikilinks_generated = output.content != content
            content = output.content

        if content != original:
            await self.store.write(file.path, content)
            logger.debug(f"{file.path}: written")

        return TransformOutcome(
            front_matter_generated=front_matter_generated,
            wikilinks_generated=wikilinks_generated,
        )
