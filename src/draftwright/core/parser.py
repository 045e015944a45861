"""
Draft parser.

Single entry point from draft text to Specification:

1. Deserialize YAML (syntax errors -> ParseError with line/column)
2. Require a top-level mapping
3. Normalize entity shorthand
4. Validate (any error -> ValidationError carrying all of them)
5. Hydrate the frozen Specification

Identical input text always yields an equal Specification.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from . import ir
from .errors import DraftNotFoundError, ParseError, ValidationError, make_parse_error
from .normalizer import normalize_entities
from .validator import validate_draft

logger = logging.getLogger(__name__)


def load_draft_data(text: str, source: Path | None = None) -> dict[str, Any]:
    """
    Deserialize draft text into a mapping.

    Raises:
        ParseError: If the YAML is malformed or is not a mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark
        line = mark.line + 1 if mark is not None else 1
        column = mark.column + 1 if mark is not None else 1
        snippet = _snippet(text, line)
        message = f"Invalid YAML: {e.problem or e}"
        raise make_parse_error(message, source, line, column, snippet) from e
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("Draft must contain a YAML mapping.")
    return data


def parse_draft(text: str, source: Path | None = None) -> ir.Specification:
    """
    Parse draft text into a Specification.

    Args:
        text: Raw draft YAML
        source: Originating file, used only in error locations

    Returns:
        The validated Specification

    Raises:
        ParseError: If the text cannot be deserialized as a mapping
        ValidationError: If the draft fails validation
    """
    data = load_draft_data(text, source)
    data = {**data, "models": normalize_entities(data.get("models"))}

    errors = validate_draft(data)
    if errors:
        logger.debug("Draft %s failed validation with %d error(s)", source or "<text>", len(errors))
        raise ValidationError(errors)

    return _hydrate(data)


def parse_draft_file(path: Path) -> ir.Specification:
    """
    Read and parse a draft file.

    Raises:
        DraftNotFoundError: If ``path`` is not an existing file
        ParseError: If the text cannot be deserialized as a mapping
        ValidationError: If the draft fails validation
    """
    if not path.is_file():
        raise DraftNotFoundError(path)
    return parse_draft(path.read_text(encoding="utf-8"), source=path)


def _hydrate(data: dict[str, Any]) -> ir.Specification:
    entities = data.get("models") or {}
    actions = data.get("actions") or {}
    pages = data.get("pages") or {}
    routes = data.get("routes") or {}

    return ir.Specification(
        entities={
            name: ir.EntityDef.from_draft(name, definition or {})
            for name, definition in entities.items()
        },
        actions={
            name: ir.ActionDef.from_draft(name, definition) for name, definition in actions.items()
        },
        pages={name: dict(definition or {}) for name, definition in pages.items()},
        routes=dict(routes),
        schema_version=str(data.get("schema_version", "1.0")),
    )


def _snippet(text: str, line: int) -> str:
    """Two lines of context either side of ``line`` (1-indexed)."""
    lines = text.splitlines()
    start = max(0, line - 3)
    return "\n".join(lines[start : line + 2])


__all__ = [
    "load_draft_data",
    "parse_draft",
    "parse_draft_file",
]
