"""
Wikilink generation.
"""

import json
from typing import Any, List

from config.logging_config import get_logger
from graphweaver.interfaces import GeneratedText, GenerationInput
from graphweaver.text import add_wikilinks, extract_wikilinks, split_head
from .base import BaseGenerator, GenerationError, strip_code_fences

logger = get_logger(__name__)


WIKILINK_PROMPT = """Analyze the following note and suggest key phrases that should become wikilinks.
Prefer phrases that match existing pages in the vault. Only suggest phrases that
appear verbatim in the note.
{tags}
Existing pages:
{pages}

Note content:
{content}

Respond with a JSON array of strings only."""


class WikilinkGenerator(BaseGenerator):
    """
    Asks the model for linkable phrases and links them in the note body.

    Front matter is never modified; the first plain-text occurrence of
    each suggested phrase in the body is wrapped in [[...]].
    """

    name = "wikilinks"

    def build_prompt(self, input: GenerationInput) -> str:
        tags = ""
        if self.custom_tags:
            tags = "Tags used in this knowledge base: " + ", ".join(self.custom_tags) + "\n"
        return WIKILINK_PROMPT.format(
            tags=tags,
            pages=", ".join(input.existing_pages) or "(none)",
            content=input.content,
        )

    @staticmethod
    def parse_suggested_links(reply: Any) -> List[str]:
        """
        Extract suggested phrases from a reply.

        Accepts a JSON array, an object holding an array, or text
        containing an array. Items that are not non-blank strings are dropped.

        Raises:
            GenerationError: If the reply holds no usable array
        """
        data = reply
        if isinstance(reply, str):
            text = strip_code_fences(reply)
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                start, end = text.find("["), text.rfind("]")
                if start == -1 or end <= start:
                    raise GenerationError("Wikilink reply contains no JSON array")
                try:
                    data = json.loads(text[start:end + 1])
                except json.JSONDecodeError as e:
                    raise GenerationError(f"Wikilink reply array is not valid JSON: {e}") from e

        if isinstance(data, dict):
            data = next((v for v in data.values() if isinstance(v, list)), None)
        if not isinstance(data, list):
            raise GenerationError(f"Unexpected wikilink reply format: {type(data).__name__}")
        return [item for item in data if isinstance(item, str) and item.strip()]

    async def generate(self, input: GenerationInput) -> GeneratedText:
        reply = await self.ask(self.build_prompt(input))
        suggestions = self.parse_suggested_links(reply)

        head, body = split_head(input.content)

        linked = add_wikilinks(body, suggestions)
        before = set(extract_wikilinks(body))
        added = [t for t in extract_wikilinks(linked) if t not in before]
        logger.debug(f"{input.path}: {len(added)} of {len(suggestions)} suggested links added")

        return GeneratedText(
            content=head + linked,
            metadata={"suggested": suggestions, "added": added},
        )
