"""
Generator registry.

Maps step names to generator classes so the set of transforms is chosen
by configuration rather than hard-wired into the orchestrator.
"""

from typing import Dict, List, Optional, Type

from ai_providers import BaseAIProvider
from graphweaver.processing import FRONT_MATTER_STEP, WIKILINKS_STEP
from .base import BaseGenerator
from .front_matter import FrontMatterGenerator
from .wikilinks import WikilinkGenerator

FRONT_MATTER = FRONT_MATTER_STEP
WIKILINKS = WIKILINKS_STEP

GENERATOR_REGISTRY: Dict[str, Type[BaseGenerator]] = {
    FRONT_MATTER: FrontMatterGenerator,
    WIKILINKS: WikilinkGenerator,
}


def create_generator(kind: str, provider: BaseAIProvider, **kwargs) -> BaseGenerator:
    """
    Create a registered generator.

    Args:
        kind: Registry key ("front_matter", "wikilinks")
        provider: AI provider the generator calls
        **kwargs: Generator-specific options (model, custom_tags, ...)
    """
    generator_class = GENERATOR_REGISTRY.get(kind)
    if generator_class is None:
        raise ValueError(
            f"Unknown generator: {kind} (available: {', '.join(sorted(GENERATOR_REGISTRY))})"
        )
    return generator_class(provider, **kwargs)


def build_generators(
    provider: BaseAIProvider,
    model: Optional[str] = None,
    custom_tags: Optional[List[str]] = None,
    custom_properties: Optional[List[str]] = None,
) -> Dict[str, BaseGenerator]:
    """Create every registered generator sharing one provider."""
    return {
        FRONT_MATTER: create_generator(
            FRONT_MATTER, provider,
            model=model, custom_tags=custom_tags, custom_properties=custom_properties,
        ),
        WIKILINKS: create_generator(
            WIKILINKS, provider, model=model, custom_tags=custom_tags,
        ),
    }
