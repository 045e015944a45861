"""
Structural and semantic validation for draft data.

Runs on the deserialized (and normalized) draft mapping before any
Specification is built. Every check appends a human-readable message;
nothing here raises for malformed-but-parseable input.
"""

from __future__ import annotations

import re
from typing import Any

from .ir.fields import FieldDescriptor
from .ir.specification import (
    FEATURE_FLAGS,
    RELATION_KINDS,
    SeederCategory,
    split_relation_targets,
)
from .strings import is_singular

# =============================================================================
# Validation Constants
# =============================================================================

SECTION_KEYS = ("models", "actions", "pages")
MAPPING_KEYS = ("models", "actions", "pages", "routes")

ENTITY_NAME_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")
FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
RELATION_TARGET_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*(:[A-Za-z_][A-Za-z0-9_]*)?$")
ACTION_NAME_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")
PAGE_NAME_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")
VIEW_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")

SEEDER_CATEGORIES = frozenset(category.value for category in SeederCategory)
SEEDER_KEYS = frozenset({"category", "count", "json"})


def validate_draft(data: Any) -> list[str]:
    """
    Validate a deserialized draft.

    Checks:
    - Top-level value is a mapping
    - At least one of models, actions, pages is present and non-empty
    - Section values have mapping shape
    - Entities, actions and pages are individually well formed

    Returns:
        List of error messages (empty when the draft is valid)
    """
    if not isinstance(data, dict):
        return ["Draft must be a mapping with models, actions or pages."]

    errors: list[str] = []

    for key in MAPPING_KEYS:
        if key in data and data[key] is not None and not isinstance(data[key], dict):
            errors.append(f"'{key}' must be a mapping, got {type(data[key]).__name__}.")

    if not any(isinstance(data.get(key), dict) and data[key] for key in SECTION_KEYS):
        errors.append("Draft must contain at least one of: models, actions, pages.")

    version = data.get("schema_version")
    if version is not None and not isinstance(version, (str, int, float)):
        errors.append("'schema_version' must be a string.")

    entities = data.get("models") if isinstance(data.get("models"), dict) else {}
    actions = data.get("actions") if isinstance(data.get("actions"), dict) else {}
    pages = data.get("pages") if isinstance(data.get("pages"), dict) else {}

    errors.extend(validate_entities(entities))
    errors.extend(validate_actions(actions))
    errors.extend(validate_pages(pages))
    return errors


def validate_entities(entities: dict[str, Any]) -> list[str]:
    """
    Validate normalized entity definitions.

    Checks:
    - Entity names are singular StudlyCase identifiers
    - Bodies are mappings of field descriptors plus reserved keys
    - Reserved keys carry their expected value shapes
    - ``id:<Entity>`` references point at a declared entity
    """
    errors: list[str] = []

    for name, definition in entities.items():
        if not isinstance(name, str) or not ENTITY_NAME_PATTERN.match(name):
            errors.append(
                f"Model '{name}' must be a capitalized identifier (e.g. 'Post', 'OrderItem')."
            )
        elif not is_singular(name):
            errors.append(f"Model '{name}' must be singular.")

        if definition is None:
            errors.append(f"Model '{name}' has no fields.")
            continue
        if not isinstance(definition, dict):
            errors.append(
                f"Model '{name}' must be a mapping of fields, got {type(definition).__name__}."
            )
            continue

        for key, value in definition.items():
            if key == "relationships":
                errors.extend(_validate_relationships(name, value))
            elif key == "seeder":
                errors.extend(_validate_seeder(name, value))
            elif key in ("softDeletes", "timestamps") or key in FEATURE_FLAGS:
                if not isinstance(value, bool):
                    errors.append(
                        f"Model '{name}' key '{key}' is reserved and must be true or false."
                    )
            elif key == "traits":
                if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
                    errors.append(f"Model '{name}' key 'traits' must be a list of names.")
            else:
                errors.extend(_validate_field(name, key, value, entities))

    return errors


def _validate_field(entity: str, field: Any, value: Any, entities: dict[str, Any]) -> list[str]:
    if not isinstance(field, str) or not FIELD_NAME_PATTERN.match(field):
        return [f"Model '{entity}' field '{field}' is not a valid identifier."]
    if not isinstance(value, str):
        return [
            f"Model '{entity}' field '{field}' must be a descriptor string "
            f"like 'string:255 nullable'."
        ]
    if not FieldDescriptor.is_valid_type_token(value):
        return [f"Model '{entity}' field '{field}' has an invalid type '{value}'."]

    descriptor = FieldDescriptor.parse(value)
    target = descriptor.references
    if target is not None and target not in entities:
        return [f"Model '{entity}' field '{field}' references unknown model '{target}'."]
    return []


def _validate_relationships(entity: str, value: Any) -> list[str]:
    if not isinstance(value, dict):
        return [f"Model '{entity}' key 'relationships' must be a mapping."]

    errors: list[str] = []
    for kind, targets in value.items():
        if kind not in RELATION_KINDS:
            errors.append(
                f"Model '{entity}' has unknown relationship type '{kind}'. "
                f"Expected one of: {', '.join(RELATION_KINDS)}."
            )
            continue
        if not isinstance(targets, (str, list)):
            errors.append(
                f"Model '{entity}' relationship '{kind}' must be a string or list of models."
            )
            continue
        if isinstance(targets, list) and not all(isinstance(t, str) for t in targets):
            errors.append(f"Model '{entity}' relationship '{kind}' must only list model names.")
            continue
        for target in split_relation_targets(targets):
            if not RELATION_TARGET_PATTERN.match(target):
                errors.append(
                    f"Model '{entity}' relationship '{kind}' target '{target}' "
                    f"must look like 'Model' or 'Model:alias'."
                )
    return errors


def _validate_seeder(entity: str, value: Any) -> list[str]:
    if not isinstance(value, dict):
        return [f"Model '{entity}' key 'seeder' must be a mapping."]

    errors: list[str] = []
    unknown = sorted(set(value) - SEEDER_KEYS)
    if unknown:
        errors.append(f"Model '{entity}' seeder has unknown keys: {', '.join(unknown)}.")

    category = value.get("category", "development")
    if not isinstance(category, str) or category.lower() not in SEEDER_CATEGORIES:
        errors.append(
            f"Model '{entity}' seeder category must be one of: "
            f"{', '.join(sorted(SEEDER_CATEGORIES))}."
        )

    count = value.get("count", 5)
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        errors.append(f"Model '{entity}' seeder count must be a non-negative integer.")

    if "json" in value and not isinstance(value["json"], bool):
        errors.append(f"Model '{entity}' seeder 'json' must be true or false.")
    return errors


def validate_actions(actions: dict[str, Any]) -> list[str]:
    """
    Validate action definitions.

    Checks:
    - Action names are StudlyCase identifiers
    - ``params`` is a list of names or ``{name, type}`` mappings
    - ``return: model`` has a ``model`` to resolve against
    """
    errors: list[str] = []

    for name, definition in actions.items():
        if not isinstance(name, str) or not ACTION_NAME_PATTERN.match(name):
            errors.append(f"Action '{name}' must be a capitalized identifier (e.g. 'CreatePost').")
        if definition is None:
            continue
        if not isinstance(definition, dict):
            errors.append(f"Action '{name}' must be a mapping.")
            continue

        model = definition.get("model")
        valid_model = isinstance(model, str) and ENTITY_NAME_PATTERN.match(model)
        if model is not None and not valid_model:
            errors.append(f"Action '{name}' model must be a model name.")

        params = definition.get("params")
        if params is not None:
            if not isinstance(params, list):
                errors.append(f"Action '{name}' params must be a list.")
            else:
                for param in params:
                    if isinstance(param, str):
                        continue
                    if isinstance(param, dict) and isinstance(param.get("name"), str):
                        continue
                    errors.append(
                        f"Action '{name}' params entries must be names or {{name, type}} mappings."
                    )

        returns = definition.get("return")
        if returns is not None and not isinstance(returns, str):
            errors.append(f"Action '{name}' return must be 'void', 'model' or a model name.")
        elif returns == "model" and not model:
            errors.append(f"Action '{name}' returns 'model' but declares no model.")

    return errors


def validate_pages(pages: dict[str, Any]) -> list[str]:
    """
    Validate page definitions.

    Page and view names become template paths, so both must be plain
    identifiers. The rest of a page body is opaque to the core.
    """
    errors: list[str] = []
    for name, definition in pages.items():
        if not isinstance(name, str) or not PAGE_NAME_PATTERN.match(name):
            errors.append(f"Page '{name}' must be a capitalized identifier (e.g. 'Dashboard').")
        if definition is None:
            continue
        if not isinstance(definition, dict):
            errors.append(f"Page '{name}' must be a mapping.")
            continue

        views = definition.get("views")
        if views is None:
            continue
        if not isinstance(views, list):
            errors.append(f"Page '{name}' views must be a list of view names.")
            continue
        for view in views:
            if not isinstance(view, str) or not VIEW_NAME_PATTERN.match(view):
                errors.append(
                    f"Page '{name}' view '{view}' must be a lowercase identifier (e.g. 'index')."
                )
    return errors
