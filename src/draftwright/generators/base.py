"""
Base generator classes.

A generator turns a Specification into one category of files (models,
migrations, routes ...). Generators do not know about each other; the
orchestrator runs them in registration order and merges their results.

Each generator:
- answers ``supports(spec)`` cheaply and without side effects
- writes its files in ``generate(spec, draft_path)`` and reports them as
  GeneratedFileRecords
- never overwrites an existing scaffold_only file unless the build is forced
- captures the prior content of any file it overwrites into ``backup``
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import ClassVar

from ..core import ir
from ..core.errors import GeneratorError
from ..core.fs import atomic_write, read_text_preserving, relative_posix, resolve_within
from ..core.hashing import compute_hash
from ..core.ownership import OwnershipPolicy
from ..core.state import StateStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class GeneratorContext:
    """
    Everything a generator may depend on, passed in at construction time.

    Attributes:
        output_root: Root directory for generated files
        ownership: Policy deciding overwrite behaviour per path
        state: Build state, for table-owning generators to look up prior paths
        force: Overwrite scaffold_only files (set by the orchestrator per build)
        clock: Source of "now" for minted file names
    """

    output_root: Path
    ownership: OwnershipPolicy
    state: StateStore
    force: bool = False
    clock: Callable[[], datetime] = _utc_now


@dataclass
class GeneratorResult:
    """
    Result from a generator execution.

    Attributes:
        generated: Absolute path -> record for every file the generator owns
        warnings: Messages to display to the user
        errors: Non-fatal problems; any error keeps the build from being recorded
        backup: Absolute path -> content the file had before this run overwrote it
    """

    generated: dict[str, ir.GeneratedFileRecord] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    backup: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """Whether generation succeeded (no errors)."""
        return len(self.errors) == 0

    def add_record(self, record: ir.GeneratedFileRecord) -> None:
        self.generated[record.path] = record

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def merge(self, other: GeneratorResult) -> None:
        """Merge another result into this one; later records win per path."""
        self.generated.update(other.generated)
        self.warnings.extend(other.warnings)
        self.errors.extend(other.errors)
        self.backup.update(other.backup)


class Generator(ABC):
    """
    Base class for all generators.

    Example:
        class ReadmeGenerator(Generator):
            name = "readme"

            def supports(self, spec: ir.Specification) -> bool:
                return bool(spec.entities)

            def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
                result = GeneratorResult()
                lines = [f"- {name}" for name in spec.entity_names()]
                self._write_file(result, self.output_path("README.md"), "\\n".join(lines))
                return result
    """

    name: ClassVar[str]
    description: ClassVar[str] = ""
    default_ownership: ClassVar[ir.FileOwnership] = ir.FileOwnership.REGENERATE
    # Produces one artifact per entity (shown per entity in build plans)
    entity_scoped: ClassVar[bool] = False
    # Reuses a previously recorded path per logical table
    table_owning: ClassVar[bool] = False

    def __init__(self, context: GeneratorContext):
        """
        Initialize generator.

        Args:
            context: Output root, ownership policy, state store and build flags
        """
        self.context = context

    @abstractmethod
    def supports(self, spec: ir.Specification) -> bool:
        """Whether this generator has anything to produce for ``spec``."""

    @abstractmethod
    def generate(self, spec: ir.Specification, draft_path: Path) -> GeneratorResult:
        """
        Generate artifacts.

        Must be idempotent: the same spec and the same files on disk yield
        byte-identical output and an identical ``generated`` map.
        """

    def applies_to(self, spec: ir.Specification, entity: ir.EntityDef) -> bool:
        """For entity-scoped generators: whether ``entity`` gets an artifact."""
        return True

    def output_path(self, *parts: str) -> Path:
        return self.context.output_root.joinpath(*parts)

    def _write_file(
        self,
        result: GeneratorResult,
        path: Path,
        content: str,
        *,
        table: str | None = None,
    ) -> ir.GeneratedFileRecord:
        """
        Write ``content`` to ``path`` honouring ownership, and record it.

        - scaffold_only files that already exist are left alone unless forced
        - unchanged files are not rewritten
        - the previous content of an overwritten file goes into ``result.backup``

        Raises:
            GeneratorError: If ``path`` is outside the output root or cannot be written
        """
        root = self.context.output_root
        if resolve_within(path, root) is None:
            raise GeneratorError(f"Refusing to write {path}: path is outside {root}")
        relative = relative_posix(path, root)
        ownership = self.context.ownership.resolve(relative, self.default_ownership)
        data = content.encode("utf-8")
        key = str(path.resolve())

        if path.exists():
            existing = path.read_bytes()
            if existing == data:
                return self._record(result, key, data, ownership, table)

            if ownership is ir.FileOwnership.SCAFFOLD_ONLY and not self.context.force:
                logger.debug("Keeping existing scaffold_only file %s", relative)
                result.add_warning(
                    f"{self.name}: kept {relative} (scaffold_only, differs from draft; "
                    f"use --force to overwrite)"
                )
                return self._record(result, key, existing, ownership, table)

            result.backup[key] = read_text_preserving(path)

        try:
            atomic_write(path, data)
        except OSError as e:
            raise GeneratorError(f"Failed to write {relative}: {e}") from e
        logger.debug("Wrote %s", relative)
        return self._record(result, key, data, ownership, table)

    @staticmethod
    def _record(
        result: GeneratorResult,
        key: str,
        data: bytes,
        ownership: ir.FileOwnership,
        table: str | None,
    ) -> ir.GeneratedFileRecord:
        record = ir.GeneratedFileRecord(
            path=key,
            content_hash=compute_hash(data),
            ownership=ownership,
            table=table,
        )
        result.add_record(record)
        return record


__all__ = [
    "Generator",
    "GeneratorContext",
    "GeneratorResult",
]
