"""
Generator registry.

An ordered collection of generators keyed by name. Registration order is
execution order, so later generators win when two emit the same path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .actions import ActionsGenerator
from .base import Generator, GeneratorContext
from .controllers import ControllersGenerator
from .factories import FactoriesGenerator
from .migrations import MigrationsGenerator
from .models import ModelsGenerator
from .pages import PagesGenerator
from .requests import RequestsGenerator
from .routes import RoutesGenerator
from .seeders import SeedersGenerator
from .tests import TestsGenerator
from .typescript import TypeScriptGenerator

logger = logging.getLogger(__name__)

DEFAULT_GENERATORS: tuple[type[Generator], ...] = (
    ModelsGenerator,
    MigrationsGenerator,
    FactoriesGenerator,
    SeedersGenerator,
    ActionsGenerator,
    ControllersGenerator,
    RequestsGenerator,
    RoutesGenerator,
    PagesGenerator,
    TypeScriptGenerator,
    TestsGenerator,
)


class GeneratorRegistry:
    """
    Ordered name -> generator mapping.

    Example:
        registry = GeneratorRegistry()
        registry.register(ModelsGenerator(context))
        for generator in registry.select(["model"]):
            ...
    """

    def __init__(self, generators: Iterable[Generator] = ()):
        self._generators: dict[str, Generator] = {}
        for generator in generators:
            self.register(generator)

    def register(self, generator: Generator) -> None:
        """
        Add a generator at the end of the execution order.

        Raises:
            ValueError: If a generator with the same name is already registered
        """
        if generator.name in self._generators:
            raise ValueError(f"Generator '{generator.name}' is already registered")
        self._generators[generator.name] = generator

    def names(self) -> list[str]:
        return list(self._generators)

    def get(self, name: str) -> Generator | None:
        return self._generators.get(name)

    def select(self, only: Iterable[str] | None = None) -> list[Generator]:
        """
        Generators to run, in registration order.

        Unknown names in ``only`` are ignored; ``None`` or an empty
        selection selects everything.
        """
        wanted = set(only or ())
        if not wanted:
            return list(self._generators.values())
        unknown = wanted - self._generators.keys()
        if unknown:
            logger.debug("Ignoring unknown generator names: %s", ", ".join(sorted(unknown)))
        return [generator for name, generator in self._generators.items() if name in wanted]

    def without(self, names: Iterable[str]) -> GeneratorRegistry:
        """New registry with ``names`` removed."""
        excluded = set(names)
        return GeneratorRegistry(
            generator for name, generator in self._generators.items() if name not in excluded
        )

    def __iter__(self) -> Iterator[Generator]:
        return iter(self._generators.values())

    def __len__(self) -> int:
        return len(self._generators)

    def __contains__(self, name: object) -> bool:
        return name in self._generators


def default_registry(context: GeneratorContext, disabled: Iterable[str] = ()) -> GeneratorRegistry:
    """Registry holding the built-in generators, minus ``disabled``."""
    registry = GeneratorRegistry(generator_cls(context) for generator_cls in DEFAULT_GENERATORS)
    return registry.without(disabled)


__all__ = [
    "DEFAULT_GENERATORS",
    "GeneratorRegistry",
    "default_registry",
]
