"""
Build planning.

Describes what a build would do without running any generator or touching
the filesystem. Steps follow the generator registration order: for every
entity a scaffold step and a patch step (covering the entity-scoped
generators), then one step per remaining generator that supports the draft.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from . import ir
from .strings import snake_case

if TYPE_CHECKING:
    from ..generators.base import Generator


def build_plan(spec: ir.Specification, generators: Iterable[Generator]) -> list[ir.PlanStep]:
    """
    Ordered plan steps for building ``spec`` with ``generators``.

    Args:
        spec: Parsed draft
        generators: Generators in execution order

    Returns:
        Plan steps; empty when no generator has anything to do
    """
    generators = list(generators)
    entity_scoped = [g for g in generators if g.entity_scoped]
    others = [g for g in generators if not g.entity_scoped]

    steps: list[ir.PlanStep] = []
    for entity in spec.entities.values():
        applicable = [g for g in entity_scoped if g.applies_to(spec, entity)]
        if not applicable:
            continue
        steps.append(
            ir.PlanStep(
                kind=ir.PlanStepKind.SCAFFOLD,
                name=f"scaffold {entity.name}",
                description=f"Create {entity.name} files if missing",
                command=f"draftwright build --only {applicable[0].name}",
            )
        )
        names = ", ".join(g.name for g in applicable)
        steps.append(
            ir.PlanStep(
                kind=ir.PlanStepKind.GENERATE,
                name=f"patch {entity.name}",
                description=f"Apply draft to {snake_case(entity.name)} ({names})",
                generator=names,
            )
        )

    for generator in others:
        if not generator.supports(spec):
            continue
        steps.append(
            ir.PlanStep(
                kind=ir.PlanStepKind.GENERATE,
                name=generator.name,
                description=generator.description or f"Run {generator.name} generator",
                generator=generator.name,
            )
        )
    return steps


__all__ = [
    "build_plan",
]
