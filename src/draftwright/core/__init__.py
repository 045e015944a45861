"""
Core draftwright functionality.

IR types, draft parsing and validation, build state and change detection.
"""

from . import ir
from .changes import ChangeDetector
from .errors import (
    DraftNotFoundError,
    DraftwrightError,
    ErrorContext,
    GeneratorError,
    InvalidDraftError,
    ManifestError,
    ParseError,
    StateError,
    StateLockError,
    ValidationError,
)
from .manifest import ProjectManifest, load_manifest
from .parser import parse_draft, parse_draft_file
from .state import StateStore
from .validator import validate_draft

__all__ = [
    "ir",
    "ChangeDetector",
    "DraftwrightError",
    "DraftNotFoundError",
    "ErrorContext",
    "GeneratorError",
    "InvalidDraftError",
    "ManifestError",
    "ParseError",
    "StateError",
    "StateLockError",
    "ValidationError",
    "ProjectManifest",
    "load_manifest",
    "parse_draft",
    "parse_draft_file",
    "StateStore",
    "validate_draft",
]
