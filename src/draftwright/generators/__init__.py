"""
Generators turning a Specification into files.
"""

from .base import Generator, GeneratorContext, GeneratorResult
from .registry import DEFAULT_GENERATORS, GeneratorRegistry, default_registry

__all__ = [
    "DEFAULT_GENERATORS",
    "Generator",
    "GeneratorContext",
    "GeneratorRegistry",
    "GeneratorResult",
    "default_registry",
]
