"""
Shared plumbing for AI-backed text generators.
"""

import re
from typing import List, Optional

from ai_providers import AIMessage, BaseAIProvider
from config.logging_config import get_logger
from graphweaver.interfaces import TextGenerator

logger = get_logger(__name__)

CODE_FENCE_PATTERN = re.compile(r"^```[\w-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


class GenerationError(Exception):
    """The model's reply could not be turned into a transform."""


def strip_code_fences(text: str) -> str:
    """Unwrap a reply wrapped in a single Markdown code fence."""
    text = text.strip()
    match = CODE_FENCE_PATTERN.match(text)
    return match.group(1).strip() if match else text


class BaseGenerator(TextGenerator):
    """
    TextGenerator backed by one AI provider.

    Subclasses build a prompt, call ask() and turn the reply into new
    document content. Provider errors propagate so the batch retry
    policy applies.
    """

    name = "base"
    system_prompt = "You are a meticulous assistant for a Markdown knowledge base."

    def __init__(
        self,
        provider: BaseAIProvider,
        model: Optional[str] = None,
        custom_tags: Optional[List[str]] = None,
    ):
        self.provider = provider
        self.model = model
        self.custom_tags = list(custom_tags or [])

    async def ask(self, prompt: str) -> str:
        """Send one prompt and return the reply text."""
        kwargs = {"model": self.model} if self.model else {}
        response = await self.provider.complete(
            [AIMessage(role="user", content=prompt)],
            system_prompt=self.system_prompt,
            **kwargs
        )
        logger.debug(
            f"{self.name}: {response.model} replied "
            f"({len(response.content or '')} chars, usage={response.usage})"
        )
        return response.content or ""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} provider={self.provider!r}>"
