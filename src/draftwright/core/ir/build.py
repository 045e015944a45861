"""
Build bookkeeping types for draftwright IR.

These are the values exchanged between generators, the orchestrator and the
state store: per-file records, the persisted BuildState document, and the
results of build, revert and plan operations.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

STATE_VERSION = "1.0.0"


class FileOwnership(str, Enum):
    """Whether a generated file may be silently overwritten on a later build."""

    REGENERATE = "regenerate"  # always overwritten from the draft
    SCAFFOLD_ONLY = "scaffold_only"  # created once, then owned by the developer


class GeneratedFileRecord(BaseModel):
    """
    Metadata for one file emitted by a generator.

    ``table`` is only set by table-owning generators so a later build can
    find and reuse the same path for that table.
    """

    path: str
    content_hash: str = Field(alias="hash")
    ownership: FileOwnership
    table: str | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape stored in the state file."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DraftRecord(BaseModel):
    """Last recorded hash for one draft path."""

    hash: str
    last_built: str | None = Field(default=None, alias="lastBuilt")

    model_config = ConfigDict(populate_by_name=True)


class BuildState(BaseModel):
    """
    The persisted state document.

    JSON keys: ``version``, ``lastRun``, ``drafts``, ``generated`` and the
    transient ``last_build_backup`` (present only between a build that
    overwrote files and the next revert or build).
    """

    version: str = STATE_VERSION
    last_run: str | None = Field(default=None, alias="lastRun")
    drafts: dict[str, DraftRecord] = Field(default_factory=dict)
    generated: dict[str, GeneratedFileRecord] = Field(default_factory=dict)
    last_build_backup: dict[str, str] | None = None

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> BuildState:
        """Create BuildState from the on-disk dict."""
        return BuildState.model_validate(data)

    def path_for_table(self, table: str) -> str | None:
        """Path of the recorded file that owns ``table``, if any."""
        for path, record in self.generated.items():
            if record.table == table:
                return path
        return None


class BuildStatus(str, Enum):
    """Terminal state of one build invocation."""

    BUILT = "built"
    NO_CHANGES = "no_changes"
    FAILED = "failed"
    MISSING_DRAFT = "missing_draft"
    INVALID_DRAFT = "invalid_draft"


class BuildResult(BaseModel):
    """
    Outcome of ``BuildOrchestrator.build``.

    ``success`` is True for a clean build and for ``no_changes``. A failed
    build may still list files in ``generated``: generators that succeeded
    before or after a failing one have already written to disk.
    """

    status: BuildStatus
    generated: dict[str, GeneratedFileRecord] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    backup: dict[str, str] = Field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status in (BuildStatus.BUILT, BuildStatus.NO_CHANGES) and not self.errors

    @classmethod
    def no_changes(cls) -> BuildResult:
        return cls(status=BuildStatus.NO_CHANGES)

    @classmethod
    def failure(cls, status: BuildStatus, errors: list[str]) -> BuildResult:
        return cls(status=status, errors=list(errors))


class RevertResult(BaseModel):
    """Outcome of ``BuildOrchestrator.revert``; partial restores are reported, not raised."""

    restored: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class PlanStepKind(str, Enum):
    SCAFFOLD = "scaffold"  # external scaffolding command, not run by draftwright
    GENERATE = "generate"


class PlanStep(BaseModel):
    """One conceptual step of a build, as shown by ``plan``."""

    kind: PlanStepKind
    name: str
    description: str
    generator: str | None = None
    command: str | None = None

    model_config = ConfigDict(frozen=True)
