"""
Front matter generation.
"""

import json
from typing import Any, Dict

import yaml

from config.logging_config import get_logger
from graphweaver.interfaces import GeneratedText, GenerationInput
from graphweaver.text import merge_front_matter
from .base import BaseGenerator, GenerationError, strip_code_fences

logger = get_logger(__name__)


FRONT_MATTER_PROMPT = """Generate YAML front matter properties for the following note.

Return a single JSON object whose keys are property names. Always include
"title", "tags" (a list of lowercase tags) and "aliases" (a list).
{properties}{tags}
Note path: {path}

Note content:
{content}

Respond with the JSON object only, no additional text."""


class FrontMatterGenerator(BaseGenerator):
    """
    Asks the model for note properties and prepends them as front matter.

    Usage:
        generator = FrontMatterGenerator(provider, custom_tags=["project"])
        output = await generator.generate(GenerationInput(content=text))
        output.content       # text with a front matter block on top
        output.metadata      # {"front_matter": {...}, ...}
    """

    name = "front_matter"

    def __init__(self, provider, model=None, custom_tags=None, custom_properties=None):
        super().__init__(provider, model=model, custom_tags=custom_tags)
        self.custom_properties = list(custom_properties or [])

    def build_prompt(self, input: GenerationInput) -> str:
        properties = ""
        if self.custom_properties:
            properties = "Also include these properties: " + ", ".join(self.custom_properties) + "\n"
        tags = ""
        if self.custom_tags:
            tags = "Prefer these existing tags where relevant: " + ", ".join(self.custom_tags) + "\n"
        return FRONT_MATTER_PROMPT.format(
            properties=properties,
            tags=tags,
            path=input.path or "(unsaved)",
            content=input.content,
        )

    @staticmethod
    def parse_response(reply: str) -> Dict[str, Any]:
        """
        Parse the model reply into a property mapping.

        Accepts a JSON object, or YAML optionally wrapped in '---' lines
        or a code fence.

        Raises:
            GenerationError: If the reply is not a non-empty mapping
        """
        text = strip_code_fences(reply)
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(text.strip().strip("-").strip())
            except yaml.YAMLError as e:
                raise GenerationError(f"Unparseable front matter reply: {e}") from e

        if not isinstance(data, dict) or not data:
            raise GenerationError("Front matter reply is not a property mapping")
        return {str(k): v for k, v in data.items()}

    async def generate(self, input: GenerationInput) -> GeneratedText:
        if not input.content.strip():
            raise ValueError(f"Cannot generate front matter for empty note: {input.path}")
        reply = await self.ask(self.build_prompt(input))
        properties = self.parse_response(reply)
        logger.debug(f"{input.path}: generated properties {sorted(properties)}")
        return GeneratedText(
            content=merge_front_matter(input.content, properties),
            metadata={"front_matter": properties},
        )
