"""Tests for column type inference."""

import pytest

from draftwright.core.inference import (
    DEFAULT_TYPE,
    FOREIGN_KEY_TYPE,
    NULLABLE_TIMESTAMP,
    PRIMARY_KEY_TYPE,
    infer_field_type,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("id", PRIMARY_KEY_TYPE),
        ("created_at", NULLABLE_TIMESTAMP),
        ("archived_at", NULLABLE_TIMESTAMP),
        ("is_active", "boolean"),
        ("has_children", "boolean"),
        ("email", DEFAULT_TYPE),
        ("slug", "string:255 unique"),
        ("body", "longtext"),
        ("price", "decimal:10,2"),
        ("unit_price", "decimal:10,2"),
        ("author_id", FOREIGN_KEY_TYPE),
        ("metadata", "json"),
        ("external_uuid", "uuid"),
        ("birthday", "date"),
        ("start_date", "date"),
        ("nickname", DEFAULT_TYPE),
    ],
)
def test_infer_field_type(name: str, expected: str):
    assert infer_field_type(name) == expected


def test_inference_is_case_insensitive():
    assert infer_field_type("Is_Active") == "boolean"
