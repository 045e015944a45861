"""
Tests generator.

Generates a pytest module per entity (exercising its resource routes) and
per action (a placeholder asserting the action exists).
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from ..core.strings import snake_case
from .base import Generator, GeneratorResult
from .columns import module_name
from .routes import resource_slug


class TestsGenerator(Generator):
    """Generate starter test modules."""

    # Keep pytest from collecting this class
    __test__ = False

    name = "test"
    description = "Starter tests"
    default_ownership = ir.FileOwnership.SCAFFOLD_ONLY

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities) or bool(spec.actions)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for entity in spec.entities.values():
            path = self.output_path("tests", f"test_{module_name(entity.name)}.py")
            self._write_file(result, path, self._build_entity_test(entity))
        for action in spec.actions.values():
            path = self.output_path("tests", f"test_{snake_case(action.name)}.py")
            self._write_file(result, path, self._build_action_test(action))
        return result

    def _build_entity_test(self, entity: ir.EntityDef) -> str:
        slug = resource_slug(entity.name)
        stem = module_name(entity.name)
        return "\n".join(
            [
                '"""',
                f"Tests for the {entity.name} resource.",
                '"""',
                "",
                "",
                f"def test_{stem}_index(client):",
                f'    response = client.get("/{slug}")',
                "    assert response.status_code == 200",
                "",
                "",
                f"def test_{stem}_create_page(client):",
                f'    response = client.get("/{slug}/create")',
                "    assert response.status_code == 200",
                "",
            ]
        )

    def _build_action_test(self, action: ir.ActionDef) -> str:
        stem = snake_case(action.name)
        return "\n".join(
            [
                '"""',
                f"Tests for the {action.name} action.",
                '"""',
                f"from app.actions.{stem} import {action.name}",
                "",
                "",
                f"def test_{stem}_has_handle():",
                f'    assert callable(getattr({action.name}, "handle", None))',
                "",
            ]
        )
