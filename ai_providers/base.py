"""
Base AI Provider - Abstract Interface
GraphWeaver - text generation backends
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from dataclasses import dataclass
from enum import Enum

from config.constants import GENERATION_MAX_TOKENS, GENERATION_TEMPERATURE
from config.logging_config import get_logger

logger = get_logger(__name__)


class AIProviderType(Enum):
    """Supported AI Providers"""
    CLAUDE = "claude"
    OPENAI = "openai"


@dataclass
class AIMessage:
    """Unified message format across providers"""
    role: str  # "user", "assistant"
    content: str


@dataclass
class AIResponse:
    """Unified response format"""
    content: str
    model: str
    provider: AIProviderType
    usage: Optional[Dict[str, int]] = None  # tokens used
    finish_reason: Optional[str] = None
    raw_response: Optional[Any] = None


@dataclass
class AIConfig:
    """Provider configuration"""
    api_key: str
    model: str
    max_tokens: int = GENERATION_MAX_TOKENS
    temperature: float = GENERATION_TEMPERATURE
    base_url: Optional[str] = None  # For custom endpoints


class BaseAIProvider(ABC):
    """
    Abstract base class for AI providers.
    Generators only need complete(); everything else is metadata.
    """

    def __init__(self, config: AIConfig):
        self.config = config
        self._client = None

    @property
    @abstractmethod
    def provider_type(self) -> AIProviderType:
        """Return the provider type"""
        pass

    @property
    @abstractmethod
    def supported_models(self) -> List[str]:
        """Return list of supported models"""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the client connection"""
        pass

    @abstractmethod
    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """
        Generate a completion from the AI model.

        Args:
            messages: List of conversation messages
            system_prompt: Optional system prompt
            **kwargs: model, max_tokens, temperature overrides

        Returns:
            AIResponse with the generated content
        """
        pass

    async def health_check(self) -> bool:
        """Check if the provider is available"""
        try:
            response = await self.complete(
                messages=[AIMessage(role="user", content="Hi")],
                max_tokens=5
            )
            return response.content is not None
        except Exception as e:
            logger.warning(f"Health check failed for {self.provider_type.value}: {e}")
            return False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.config.model}>"
