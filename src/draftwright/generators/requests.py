"""
Requests generator.

Generates input validation classes under ``app/requests/`` for entities
that have CRUD actions in the draft:

- ``Create<Entity>`` -> ``store_<entity>_request.py``
- ``Update<Entity>`` -> ``update_<entity>_request.py``
- ``Delete<Entity>`` -> ``delete_<entity>_request.py``

Each class carries a ``RULES`` mapping of column -> rule strings
(``required``, ``string``, ``max:255``, ``exists:users,id`` ...).
"""

from __future__ import annotations

from pathlib import Path

from ..core import ir
from .base import Generator, GeneratorResult
from .columns import belongs_to_targets, input_fields, module_name, referenced_table

# request operation -> action name prefix
CRUD_ACTIONS = {
    "store": "Create",
    "update": "Update",
    "delete": "Delete",
}

# descriptor type (lowercase) -> base rules
RULE_MAP: dict[str, list[str]] = {
    "text": ["string"],
    "mediumtext": ["string"],
    "longtext": ["string"],
    "integer": ["integer"],
    "tinyinteger": ["integer"],
    "smallinteger": ["integer"],
    "biginteger": ["integer"],
    "unsignedinteger": ["integer", "min:0"],
    "unsignedbiginteger": ["integer", "min:0"],
    "decimal": ["numeric"],
    "float": ["numeric"],
    "double": ["numeric"],
    "boolean": ["boolean"],
    "date": ["date"],
    "datetime": ["date"],
    "timestamp": ["date"],
    "time": ["date_format:H:i"],
    "json": ["array"],
    "uuid": ["uuid"],
}


def crud_operations(spec: ir.Specification, entity: ir.EntityDef) -> list[str]:
    """Request operations (``store``, ``update``, ``delete``) the draft's actions call for."""
    return [
        operation
        for operation, prefix in CRUD_ACTIONS.items()
        if f"{prefix}{entity.name}" in spec.actions
    ]


def request_class(operation: str, entity_name: str) -> str:
    return f"{operation.capitalize()}{entity_name}Request"


def request_module(operation: str, entity_name: str) -> str:
    return f"{operation}_{module_name(entity_name)}_request"


def column_rules(
    name: str,
    field: ir.FieldDescriptor,
    table: str,
    *,
    update: bool = False,
    target: str | None = None,
) -> list[str]:
    """Validation rules for one column."""
    if "password" in name:
        if update:
            return ["nullable", "string", "confirmed", "min:8"]
        return ["required", "string", "confirmed", "min:8"]

    key = field.type.lower()
    if field.is_foreign_key:
        rules = ["integer", f"exists:{referenced_table(name, field, target)},id"]
    elif "email" in name:
        rules = ["string", "lowercase", "email", "max:255"]
    elif key in RULE_MAP:
        rules = list(RULE_MAP[key])
    else:
        length = field.argument if field.argument and field.argument.isdigit() else "255"
        rules = ["string", f"max:{length}"]

    if field.is_unique:
        rules.append(f"unique:{table},{name}")

    if field.is_nullable:
        rules.append("nullable")
    elif key != "boolean":
        rules.insert(0, "required")
    return rules


class RequestsGenerator(Generator):
    """Generate request validation classes for CRUD actions."""

    name = "request"
    description = "Request validation"
    default_ownership = ir.FileOwnership.SCAFFOLD_ONLY
    entity_scoped = True

    def supports(self, spec: ir.Specification) -> bool:
        return any(self.applies_to(spec, entity) for entity in spec.entities.values())

    def applies_to(self, spec: ir.Specification, entity: ir.EntityDef) -> bool:
        return bool(crud_operations(spec, entity))

    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        result = GeneratorResult()
        for entity in spec.entities.values():
            for operation in crud_operations(spec, entity):
                path = self.output_path(
                    "app", "requests", f"{request_module(operation, entity.name)}.py"
                )
                self._write_file(result, path, self._build_request(entity, operation))
        return result

    def build_rules(self, entity: ir.EntityDef, operation: str) -> dict[str, list[str]]:
        if operation == "delete":
            return {}
        targets = belongs_to_targets(entity)
        return {
            name: column_rules(
                name,
                field,
                entity.table,
                update=operation == "update",
                target=targets.get(name),
            )
            for name, field in input_fields(entity).items()
        }

    def _build_request(self, entity: ir.EntityDef, operation: str) -> str:
        rules = self.build_rules(entity, operation)
        lines = [
            '"""',
            f"Validation for the {operation} {entity.name} request.",
            '"""',
            "",
            "",
            f"class {request_class(operation, entity.name)}:",
        ]
        if rules:
            lines.append("    RULES = {")
            for name, column in rules.items():
                quoted = ", ".join(f'"{rule}"' for rule in column)
                lines.append(f'        "{name}": [{quoted}],')
            lines.append("    }")
        else:
            lines.append("    RULES = {}")
        lines.extend(
            [
                "",
                "    def __init__(self, data):",
                "        self.data = data",
                "",
                "    def authorize(self):",
                "        return True",
                "",
                "    def validated(self):",
                "        return {key: self.data.get(key) for key in self.RULES if key in self.data}",
                "",
            ]
        )
        return "\n".join(lines)
