"""
Models generator.

Generates one model module per entity under ``app/models/``.
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from ..core.strings import snake_case
from .base import Generator, GeneratorResult
from .columns import belongs_to_targets, module_name, python_field, relation_name


class ModelsGenerator(Generator):
    """
    Generate model classes from entities.

    Each module contains:
    - one field per column (foreign keys as ForeignKey)
    - timestamp and soft delete columns when enabled
    - many-to-many fields for belongsToMany
    - reverse relations listed in ``RELATIONS``
    - traits and feature flags as class attributes
    """

    name = "model"
    description = "Model classes"
    default_ownership = ir.FileOwnership.SCAFFOLD_ONLY
    entity_scoped = True

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for entity in spec.entities.values():
            path = self.output_path("app", "models", f"{module_name(entity.name)}.py")
            self._write_file(result, path, self._build_model_code(entity))
        return result

    def _build_model_code(self, entity: ir.EntityDef) -> str:
        lines = [
            '"""',
            f"{entity.name} model.",
            '"""',
            "from django.db import models",
            "",
            "",
            f"class {entity.name}(models.Model):",
        ]

        targets = belongs_to_targets(entity)
        for name, field in entity.fields.items():
            lines.append(f"    {name} = {python_field(name, field, targets.get(name))}")

        if entity.timestamps:
            if "created_at" not in entity.fields:
                lines.append("    created_at = models.DateTimeField(auto_now_add=True)")
            if "updated_at" not in entity.fields:
                lines.append("    updated_at = models.DateTimeField(auto_now=True)")
        if entity.soft_deletes and "deleted_at" not in entity.fields:
            lines.append("    deleted_at = models.DateTimeField(null=True, blank=True)")

        for target in entity.relation_targets("belongsToMany"):
            accessor = snake_case(relation_name("belongsToMany", target))
            lines.append(f'    {accessor} = models.ManyToManyField("{target.entity}")')

        reverse = self._reverse_relations(entity)
        if reverse:
            lines.append("")
            lines.append("    RELATIONS = {")
            for method, (kind, target) in reverse.items():
                lines.append(f'        "{method}": ("{kind}", "{target}"),')
            lines.append("    }")

        if entity.traits:
            lines.append("")
            lines.append(f"    TRAITS = {tuple(entity.traits)!r}")

        enabled = [flag for flag, on in entity.features.items() if on]
        if enabled:
            lines.append(f"    FEATURES = {tuple(enabled)!r}")

        lines.extend(
            [
                "",
                "    class Meta:",
                f'        db_table = "{entity.table}"',
                "",
                "    def __str__(self):",
                f'        return f"{entity.name} {{self.pk}}"',
                "",
            ]
        )
        return "\n".join(lines)

    def _reverse_relations(self, entity: ir.EntityDef) -> dict[str, tuple[str, str]]:
        """Relations not backed by a column on this table."""
        relations: dict[str, tuple[str, str]] = {}
        for kind in ("hasOne", "hasMany", "morphTo", "morphOne", "morphMany"):
            for target in entity.relation_targets(kind):
                relations[relation_name(kind, target)] = (kind, target.entity)
        return relations
