"""
Error types for draft parsing, validation, generation and state handling.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class DraftwrightError(Exception):
    """Base exception for all draftwright errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class DraftNotFoundError(DraftwrightError):
    """Raised when the draft path does not resolve to an existing file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Draft file not found: {path}")


class InvalidDraftError(DraftwrightError):
    """
    Raised when a draft cannot be turned into a Specification.

    Covers both unparsable text and structurally invalid content.
    """

    @property
    def errors(self) -> list[str]:
        return [self.message]


class ParseError(InvalidDraftError):
    """
    Raised when draft text cannot be deserialized.

    Examples:
    - Invalid YAML syntax
    - Top-level value is a scalar or list instead of a mapping
    """

    pass


class ValidationError(InvalidDraftError):
    """
    Raised when a parsed draft fails structural or semantic validation.

    Carries every validation problem found, not just the first.
    """

    def __init__(self, errors: list[str], context: Optional["ErrorContext"] = None):
        self._errors = list(errors)
        super().__init__("Draft validation failed:\n" + "\n".join(self._errors), context)

    @property
    def errors(self) -> list[str]:
        return list(self._errors)


class GeneratorError(DraftwrightError):
    """
    Raised by a generator that cannot produce its artifacts.

    Examples:
    - Output path is not writable
    - Entity definition missing data the generator requires
    """

    pass


class StateError(DraftwrightError):
    """Raised when the build state file cannot be written."""

    pass


class StateLockError(StateError):
    """Raised when the exclusive state lock cannot be acquired in time."""

    pass


class ManifestError(DraftwrightError):
    """Raised when draftwright.toml is unreadable or holds invalid values."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source snippet showing the error location
    """

    file: Path | None
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "draft.yaml:10:5"
        """
        location = f"{self.file or '<draft>'}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format snippet with line numbers and an error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts two lines above the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_parse_error(
    message: str,
    file: Path | None,
    line: int,
    column: int,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path, if the text came from a file
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source snippet

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context)


__all__ = [
    "DraftwrightError",
    "DraftNotFoundError",
    "InvalidDraftError",
    "ParseError",
    "ValidationError",
    "GeneratorError",
    "StateError",
    "StateLockError",
    "ManifestError",
    "ErrorContext",
    "make_parse_error",
]
