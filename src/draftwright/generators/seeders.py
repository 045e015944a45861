"""
Seeders generator.

Generates ``app/seeders/<category>/<entity>_seeder.py`` for every entity
that declares a ``seeder`` block.
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from .base import Generator, GeneratorResult
from .columns import module_name
from .factories import factory_class, factory_module


class SeedersGenerator(Generator):
    """Generate seeder classes grouped by seeder category."""

    name = "seeder"
    description = "Database seeders"
    default_ownership = ir.FileOwnership.REGENERATE
    entity_scoped = True

    def supports(self, spec: ir.Specification) -> bool:
        return any(self.applies_to(spec, entity) for entity in spec.entities.values())

    def applies_to(self, spec: ir.Specification, entity: ir.EntityDef) -> bool:
        return entity.seeder is not None

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for entity in spec.entities.values():
            if entity.seeder is None:
                continue
            stem = module_name(entity.name)
            path = self.output_path(
                "app", "seeders", entity.seeder.category.value, f"{stem}_seeder.py"
            )
            self._write_file(result, path, self._build_seeder(entity, entity.seeder))
        return result

    def _build_seeder(self, entity: ir.EntityDef, seeder: ir.SeederConfig) -> str:
        stem = module_name(entity.name)
        lines = [
            '"""',
            f"Seeder for {entity.name} ({seeder.category.value}).",
            '"""',
        ]
        if seeder.json_data:
            lines.extend(["import json", "from pathlib import Path", ""])
        factory = factory_class(entity.name)
        lines.extend(
            [
                f"from app.factories.{factory_module(entity.name)} import {factory}",
                f"from app.models.{stem} import {entity.name}",
                "",
                "",
                f"class {entity.name}Seeder:",
                f'    category = "{seeder.category.value}"',
                f"    count = {seeder.count}",
            ]
        )
        if seeder.json_data:
            lines.append(
                f'    data_path = Path(__file__).parent.parent / "data" / "{entity.table}.json"'
            )

        lines.extend(["", "    def run(self):"])
        if seeder.json_data:
            lines.extend(
                [
                    "        if self.data_path.exists():",
                    "            self.seed_from_json()",
                    "            return",
                ]
            )
        lines.extend(
            [
                "        self.seed_from_factory()",
                "",
                "    def seed_from_factory(self):",
                f"        {factory}.create_batch(self.count)",
            ]
        )
        if seeder.json_data:
            lines.extend(
                [
                    "",
                    "    def seed_from_json(self):",
                    '        rows = json.loads(self.data_path.read_text(encoding="utf-8"))',
                    "        for row in rows:",
                    f"            {entity.name}.objects.create(**row)",
                ]
            )
        lines.append("")
        return "\n".join(lines)
