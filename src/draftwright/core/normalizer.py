"""
Draft normalization.

Expands author-friendly entity shorthand into the canonical
``field: descriptor`` shape before validation, so neither the validator nor
any generator ever sees shorthand:

- a bare list of field names (either as the whole entity body or under a
  ``columns`` key) becomes typed fields via name-based inference
- ``belongsTo`` targets without a declared foreign key get one synthesized

Normalization never fails: anything it does not understand is passed
through untouched for the validator to reject.
"""

from __future__ import annotations

from typing import Any

from .inference import FOREIGN_KEY_TYPE, NULLABLE_TIMESTAMP, PRIMARY_KEY_TYPE, infer_field_type
from .ir.specification import RESERVED_KEYS, RelationTarget, split_relation_targets


def normalize_entities(entities: Any) -> Any:
    """
    Normalize the draft's ``models`` mapping.

    Args:
        entities: Raw value of the ``models`` key

    Returns:
        A new mapping with shorthand expanded; non-mapping input is returned as-is
    """
    if not isinstance(entities, dict):
        return entities

    normalized: dict[str, Any] = {}
    for name, definition in entities.items():
        if isinstance(definition, list):
            definition = _expand_field_list(definition)
        if not isinstance(definition, dict):
            normalized[name] = definition
            continue
        definition = _expand_columns_key(definition)
        definition = _add_belongs_to_foreign_keys(definition)
        normalized[name] = definition
    return normalized


def expand_shorthand_field(field_name: str) -> dict[str, str]:
    """
    Expand one bare field name into one or more typed fields.

    Examples:
        >>> expand_shorthand_field("id")
        {'id': 'bigIncrements'}
        >>> expand_shorthand_field("timestamps")
        {'created_at': 'timestamp nullable', 'updated_at': 'timestamp nullable'}
    """
    lowered = field_name.lower()
    if lowered == "id":
        return {"id": PRIMARY_KEY_TYPE}
    if lowered == "timestamps":
        return {"created_at": NULLABLE_TIMESTAMP, "updated_at": NULLABLE_TIMESTAMP}
    if lowered == "softdeletes":
        return {"deleted_at": NULLABLE_TIMESTAMP}
    return {field_name: infer_field_type(field_name)}


def _expand_field_list(items: list[Any]) -> dict[str, Any] | list[Any]:
    if not all(isinstance(item, str) for item in items):
        return items
    expanded: dict[str, Any] = {}
    for item in items:
        expanded.update(expand_shorthand_field(item))
    return expanded


def _expand_columns_key(definition: dict[str, Any]) -> dict[str, Any]:
    columns = definition.get("columns")
    if not isinstance(columns, list):
        return dict(definition)

    expanded: dict[str, Any] = {}
    for column in columns:
        if isinstance(column, str):
            expanded.update(expand_shorthand_field(column))

    rest = {key: value for key, value in definition.items() if key != "columns"}
    # Explicit descriptors win over inferred ones
    return {**expanded, **rest}


def _add_belongs_to_foreign_keys(definition: dict[str, Any]) -> dict[str, Any]:
    relationships = definition.get("relationships")
    if not isinstance(relationships, dict) or "belongsTo" not in relationships:
        return definition

    for raw_target in split_relation_targets(relationships["belongsTo"]):
        target = RelationTarget.parse(raw_target)
        if not target.entity:
            continue
        fk_column = target.foreign_key
        if fk_column == "_id" or fk_column in definition or fk_column in RESERVED_KEYS:
            continue
        definition[fk_column] = FOREIGN_KEY_TYPE
    return definition
