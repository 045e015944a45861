"""
draftwright - declarative, idempotent code generation from a YAML draft.

A single ``draft.yaml`` describes an application's entities, actions and
pages; a pipeline of generators turns it into source files, tracking what it
wrote so repeated builds only touch what changed.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    DraftNotFoundError,
    DraftwrightError,
    GeneratorError,
    InvalidDraftError,
    ParseError,
    StateError,
    ValidationError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "DraftwrightError",
    "DraftNotFoundError",
    "InvalidDraftError",
    "ParseError",
    "ValidationError",
    "GeneratorError",
    "StateError",
]
