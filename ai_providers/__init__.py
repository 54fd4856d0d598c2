"""
AI Providers Package
GraphWeaver - text generation backends

Supports:
- Anthropic Claude (claude-sonnet-4, claude-3.5-haiku, etc.)
- OpenAI GPT (gpt-4o, gpt-4o-mini, etc.)

Usage:
    from ai_providers import create_provider_manager, AIMessage

    manager = create_provider_manager("claude")
    provider = await manager.get_provider()

    response = await provider.complete(
        [AIMessage(role="user", content="Suggest tags for: ...")],
        system_prompt="Reply with JSON only."
    )
    print(response.content)
"""

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
    AIConfig
)

from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider

from .manager import (
    AIProviderManager,
    ProviderInfo,
    PROVIDER_REGISTRY,
    PROVIDER_INFO,
    create_provider_manager,
    resolve_provider_type,
)

__all__ = [
    # Base classes
    "BaseAIProvider",
    "AIProviderType",
    "AIMessage",
    "AIResponse",
    "AIConfig",

    # Providers
    "ClaudeProvider",
    "OpenAIProvider",

    # Manager
    "AIProviderManager",
    "ProviderInfo",
    "PROVIDER_REGISTRY",
    "PROVIDER_INFO",
    "create_provider_manager",
    "resolve_provider_type",
]

__version__ = "1.0.0"
