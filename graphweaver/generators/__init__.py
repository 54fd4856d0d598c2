"""
AI-backed text generators.
"""

from .base import BaseGenerator, GenerationError, strip_code_fences
from .front_matter import FrontMatterGenerator
from .wikilinks import WikilinkGenerator
from .factory import (
    FRONT_MATTER,
    WIKILINKS,
    GENERATOR_REGISTRY,
    create_generator,
    build_generators,
)

__all__ = [
    "BaseGenerator",
    "GenerationError",
    "strip_code_fences",
    "FrontMatterGenerator",
    "WikilinkGenerator",
    "FRONT_MATTER",
    "WIKILINKS",
    "GENERATOR_REGISTRY",
    "create_generator",
    "build_generators",
]
