"""
Factories generator.

Generates ``app/factories/<entity>_factory.py`` for every entity: a factory
class producing model instances filled with fake data, used by the seeders.
Foreign keys are left to the caller.
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from .base import Generator, GeneratorResult
from .columns import input_fields, module_name

# descriptor type (lowercase) -> faker expression
FAKE_VALUE_MAP: dict[str, str] = {
    "text": "fake.paragraph()",
    "mediumtext": "fake.paragraph()",
    "longtext": "fake.paragraph()",
    "integer": "fake.random_int()",
    "tinyinteger": "fake.random_int(max=127)",
    "smallinteger": "fake.random_int()",
    "biginteger": "fake.random_int()",
    "unsignedinteger": "fake.random_int()",
    "unsignedbiginteger": "fake.random_int()",
    "decimal": "fake.pydecimal(left_digits=4, right_digits=2, positive=True)",
    "float": "fake.pyfloat(left_digits=4, right_digits=2, positive=True)",
    "double": "fake.pyfloat(left_digits=4, right_digits=2, positive=True)",
    "boolean": "fake.boolean()",
    "date": "fake.date_object()",
    "datetime": "fake.date_time()",
    "timestamp": "fake.date_time()",
    "time": "fake.time_object()",
    "json": "{}",
    "uuid": "fake.uuid4()",
}


def factory_class(entity_name: str) -> str:
    return f"{entity_name}Factory"


def factory_module(entity_name: str) -> str:
    return f"{module_name(entity_name)}_factory"


def fake_value(name: str, field: ir.FieldDescriptor) -> str:
    """Faker expression for a column, picked by type and then by column name."""
    key = field.type.lower()
    if key in FAKE_VALUE_MAP:
        return FAKE_VALUE_MAP[key]

    unique = "unique." if field.is_unique else ""
    if "email" in name:
        return f"fake.{unique}safe_email()"
    if "password" in name:
        return "fake.password()"
    if "slug" in name:
        return f"fake.{unique}slug()"
    if "title" in name:
        return "fake.sentence(nb_words=3)"
    if "name" in name:
        return "fake.name()"
    if any(part in name for part in ("token", "secret", "code")):
        return "fake.pystr(max_chars=10)"
    if name.endswith("_at"):
        return "fake.date_time()"
    return f"fake.{unique}word()"


class FactoriesGenerator(Generator):
    """Generate model factories."""

    name = "factory"
    description = "Model factories"
    default_ownership = ir.FileOwnership.REGENERATE
    entity_scoped = True

    def supports(self, spec: ir.Specification) -> bool:
        return bool(spec.entities)

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for entity in spec.entities.values():
            path = self.output_path("app", "factories", f"{factory_module(entity.name)}.py")
            self._write_file(result, path, self._build_factory(entity))
        return result

    def _build_factory(self, entity: ir.EntityDef) -> str:
        lines = [
            '"""',
            f"Factory for {entity.name}.",
            '"""',
            "from faker import Faker",
            "",
            f"from app.models.{module_name(entity.name)} import {entity.name}",
            "",
            "fake = Faker()",
            "",
            "",
            f"class {factory_class(entity.name)}:",
            f"    model = {entity.name}",
            "",
            "    @staticmethod",
            "    def definition():",
            "        return {",
        ]
        for name, field in input_fields(entity).items():
            if field.is_foreign_key:
                continue
            lines.append(f'            "{name}": {fake_value(name, field)},')
        lines.extend(
            [
                "        }",
                "",
                "    @classmethod",
                "    def make(cls, **overrides):",
                "        return cls.model(**{**cls.definition(), **overrides})",
                "",
                "    @classmethod",
                "    def create(cls, **overrides):",
                "        instance = cls.make(**overrides)",
                "        instance.save()",
                "        return instance",
                "",
                "    @classmethod",
                "    def create_batch(cls, count, **overrides):",
                "        return [cls.create(**overrides) for _ in range(count)]",
                "",
            ]
        )
        return "\n".join(lines)
