"""
Column type inference from field names.

Used when a draft lists bare field names instead of ``name: descriptor``
pairs. The result is a descriptor string in the same notation the draft uses.
"""

from __future__ import annotations

PRIMARY_KEY_TYPE = "bigIncrements"
NULLABLE_TIMESTAMP = "timestamp nullable"
FOREIGN_KEY_TYPE = "foreignId"
DEFAULT_TYPE = "string:255"

_TIMESTAMP_NAMES = frozenset({"created_at", "updated_at", "deleted_at", "published_at"})
_SHORT_STRING_NAMES = frozenset({"email", "name", "title", "password"})
_LONG_TEXT_NAMES = frozenset({"body", "content", "description", "bio"})
_MONEY_NAMES = frozenset({"price", "amount", "total", "quantity"})
_DATE_NAMES = frozenset({"date", "birthday"})


def infer_field_type(field_name: str) -> str:
    """
    Infer a descriptor from a field name.

    Examples:
        >>> infer_field_type("email")
        'string:255'
        >>> infer_field_type("published_at")
        'timestamp nullable'
        >>> infer_field_type("author_id")
        'foreignId'
        >>> infer_field_type("is_active")
        'boolean'
    """
    name = field_name.lower()

    if name == "id":
        return PRIMARY_KEY_TYPE
    if name in _TIMESTAMP_NAMES or name.endswith("_at"):
        return NULLABLE_TIMESTAMP
    if name.startswith(("is_", "has_")):
        return "boolean"
    if name in _SHORT_STRING_NAMES:
        return DEFAULT_TYPE
    if name == "slug":
        return "string:255 unique"
    if name in _LONG_TEXT_NAMES:
        return "longtext"
    if name in _MONEY_NAMES or "price" in name or "amount" in name:
        return "decimal:10,2"
    if name.endswith("_id"):
        return FOREIGN_KEY_TYPE
    if "json" in name or name in ("metadata", "options"):
        return "json"
    if "uuid" in name:
        return "uuid"
    if name in _DATE_NAMES or name.endswith("_date"):
        return "date"

    return DEFAULT_TYPE
