"""
AI Provider Manager
GraphWeaver - text generation backends

Manages the configured AI providers and allows easy switching.
"""

import os
from typing import Optional, Dict, List, Type
from dataclasses import dataclass

from config.logging_config import get_logger
from .base import BaseAIProvider, AIProviderType, AIConfig, AIResponse, AIMessage
from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider

logger = get_logger(__name__)


@dataclass
class ProviderInfo:
    """Information about an AI provider"""
    type: AIProviderType
    name: str
    description: str
    models: Dict[str, str]
    default_model: str
    env_key: str  # Environment variable name for API key


# Registry of all available providers
PROVIDER_REGISTRY: Dict[AIProviderType, Type[BaseAIProvider]] = {
    AIProviderType.CLAUDE: ClaudeProvider,
    AIProviderType.OPENAI: OpenAIProvider,
}

# Provider information
PROVIDER_INFO: Dict[AIProviderType, ProviderInfo] = {
    AIProviderType.CLAUDE: ProviderInfo(
        type=AIProviderType.CLAUDE,
        name="Anthropic Claude",
        description="Claude - careful metadata and link suggestions",
        models=ClaudeProvider.MODELS,
        default_model=ClaudeProvider.DEFAULT_MODEL,
        env_key="ANTHROPIC_API_KEY"
    ),
    AIProviderType.OPENAI: ProviderInfo(
        type=AIProviderType.OPENAI,
        name="OpenAI GPT",
        description="GPT-4o family - fast JSON output",
        models=OpenAIProvider.MODELS,
        default_model=OpenAIProvider.DEFAULT_MODEL,
        env_key="OPENAI_API_KEY"
    ),
}

# Aliases accepted by create_provider_manager()
PROVIDER_ALIASES: Dict[str, AIProviderType] = {
    "claude": AIProviderType.CLAUDE,
    "anthropic": AIProviderType.CLAUDE,
    "openai": AIProviderType.OPENAI,
    "gpt": AIProviderType.OPENAI,
}


def resolve_provider_type(name: str) -> AIProviderType:
    """Map a provider name or alias to its type."""
    ptype = PROVIDER_ALIASES.get(name.lower())
    if not ptype:
        raise ValueError(f"Unknown provider: {name}")
    return ptype


class AIProviderManager:
    """
    Manages AI providers and handles switching between them.

    Usage:
        manager = AIProviderManager()

        # Use default provider (Claude)
        response = await manager.complete([AIMessage("user", "...")])

        # Switch provider
        manager.set_provider(AIProviderType.OPENAI)
    """

    def __init__(
        self,
        default_provider: AIProviderType = AIProviderType.CLAUDE,
        api_keys: Optional[Dict[AIProviderType, str]] = None
    ):
        """
        Initialize the provider manager.

        Args:
            default_provider: Default AI provider to use
            api_keys: Optional dict of API keys for each provider.
                     If not provided, will use environment variables.
        """
        self._current_provider = default_provider
        self._api_keys = api_keys or {}
        self._providers: Dict[str, BaseAIProvider] = {}
        self._initialized: Dict[str, bool] = {}

    def _get_api_key(self, provider_type: AIProviderType) -> str:
        """Get API key for a provider from dict or environment"""
        if self._api_keys.get(provider_type):
            return self._api_keys[provider_type]

        info = PROVIDER_INFO[provider_type]
        key = os.environ.get(info.env_key)

        if not key:
            raise ValueError(
                f"API key not found for {info.name}. "
                f"Set {info.env_key} environment variable or pass api_keys dict."
            )

        return key

    def _create_provider(
        self,
        provider_type: AIProviderType,
        model: Optional[str] = None
    ) -> BaseAIProvider:
        """Create a provider instance"""
        info = PROVIDER_INFO[provider_type]
        provider_class = PROVIDER_REGISTRY[provider_type]

        config = AIConfig(
            api_key=self._get_api_key(provider_type),
            model=model or info.default_model
        )

        return provider_class(config)

    async def get_provider(
        self,
        provider_type: Optional[AIProviderType] = None,
        model: Optional[str] = None
    ) -> BaseAIProvider:
        """
        Get a provider instance, initializing if needed.

        Args:
            provider_type: Provider to get (uses current if None)
            model: Specific model to use
        """
        ptype = provider_type or self._current_provider
        cache_key = f"{ptype.value}:{model or 'default'}"

        if cache_key not in self._providers:
            self._providers[cache_key] = self._create_provider(ptype, model)

        provider = self._providers[cache_key]

        if cache_key not in self._initialized:
            await provider.initialize()
            self._initialized[cache_key] = True
            logger.info(f"Provider ready: {provider}")

        return provider

    def set_provider(self, provider_type: AIProviderType) -> None:
        """Set the current default provider"""
        if provider_type not in PROVIDER_REGISTRY:
            raise ValueError(f"Unknown provider: {provider_type}")
        self._current_provider = provider_type

    @property
    def current_provider(self) -> AIProviderType:
        """Get current provider type"""
        return self._current_provider

    @staticmethod
    def list_providers() -> List[ProviderInfo]:
        """List all available providers"""
        return list(PROVIDER_INFO.values())

    def get_available_providers(self) -> List[ProviderInfo]:
        """Get list of providers that have API keys configured"""
        available = []
        for ptype, info in PROVIDER_INFO.items():
            try:
                self._get_api_key(ptype)
                available.append(info)
            except ValueError:
                pass
        return available

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        provider: Optional[AIProviderType] = None,
        model: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using specified or current provider"""
        p = await self.get_provider(provider, model)
        return await p.complete(messages, system_prompt, **kwargs)

    async def health_check(
        self,
        provider: Optional[AIProviderType] = None
    ) -> Dict[str, bool]:
        """
        Check health of providers.

        Args:
            provider: Specific provider to check, or all available if None
        """
        results = {}

        if provider:
            providers_to_check = [provider]
        else:
            providers_to_check = [p.type for p in self.get_available_providers()]

        for ptype in providers_to_check:
            try:
                p = await self.get_provider(ptype)
                results[ptype.value] = await p.health_check()
            except Exception as e:
                results[ptype.value] = False
                logger.warning(f"Health check failed for {ptype.value}: {e}")

        return results


def create_provider_manager(
    default_provider: str = "claude",
    api_keys: Optional[Dict[str, str]] = None
) -> AIProviderManager:
    """
    Factory function to create a provider manager.

    Args:
        default_provider: Name of default provider ("claude", "openai")
        api_keys: Optional dict with provider names as keys and API keys as values

    Returns:
        Configured AIProviderManager instance
    """
    default_type = resolve_provider_type(default_provider)

    typed_keys = None
    if api_keys:
        typed_keys = {}
        for name, key in api_keys.items():
            ptype = PROVIDER_ALIASES.get(name.lower())
            if ptype and key:
                typed_keys[ptype] = key

    return AIProviderManager(default_provider=default_type, api_keys=typed_keys)
