"""
TypeScript type definitions generator.

Generates ``frontend/types/models.d.ts`` with one interface per entity.
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from .base import Generator, GeneratorResult
from .columns import relation_name, ts_type

HEADER = """/**
 * Model interfaces generated from the draft.
 * Do not edit by hand; rebuild instead.
 */
"""


class TypeScriptGenerator(Generator):
    """Generate TypeScript interfaces for entities."""

    name = "typescript"
    description = "TypeScript interfaces"
    default_ownership = ir.FileOwnership.REGENERATE

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        interfaces = [self._build_interface(entity) for entity in spec.entities.values()]
        content = HEADER + "\n" + "\n\n".join(interfaces) + "\n"
        self._write_file(result, self.output_path("frontend", "types", "models.d.ts"), content)
        return result

    def _build_interface(self, entity: ir.EntityDef) -> str:
        lines = [f"export interface {entity.name} {{"]
        if "id" not in entity.fields:
            lines.append("  id: number;")
        for name, field in entity.fields.items():
            lines.append(f"  {name}: {ts_type(field)};")
        if entity.timestamps:
            for name in ("created_at", "updated_at"):
                if name not in entity.fields:
                    lines.append(f"  {name}: string | null;")
        if entity.soft_deletes and "deleted_at" not in entity.fields:
            lines.append("  deleted_at: string | null;")
        for kind in ("belongsTo", "hasOne", "morphOne"):
            for target in entity.relation_targets(kind):
                lines.append(f"  {relation_name(kind, target)}?: {target.entity};")
        for kind in ("hasMany", "belongsToMany", "morphMany"):
            for target in entity.relation_targets(kind):
                lines.append(f"  {relation_name(kind, target)}?: {target.entity}[];")
        lines.append("}")
        return "\n".join(lines)
