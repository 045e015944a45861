"""
Build orchestration.

Runs one build end to end:

1. Resolve the draft path and fail fast if it is missing
2. Parse and validate the draft; fail fast without touching state
3. Skip the build when the draft hash is unchanged (unless forced)
4. Run the selected generators in registration order, best effort: a
   failing generator is reported and the remaining ones still run
5. Record the draft hash, generated files and backup only if no generator
   reported an error

Files written before a failure are not rolled back, and state keeps the
previous build's record. The next build re-runs every generator.

The whole build runs inside the state store's exclusive lock, so two
builds of the same project serialize instead of interleaving.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..generators.base import GeneratorContext, GeneratorResult
from ..generators.registry import GeneratorRegistry, default_registry
from . import ir
from .changes import ChangeDetector
from .errors import InvalidDraftError, StateError, ValidationError
from .fs import atomic_write, encode_text_preserving, resolve_within
from .hashing import compute_hash
from .manifest import ProjectManifest
from .parser import parse_draft
from .planner import build_plan
from .state import StateStore

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """
    Coordinates parsing, change detection, generators and build state.

    Example:
        orchestrator = BuildOrchestrator.from_manifest(load_manifest(Path(".")))
        result = orchestrator.build()
        if not result.success:
            for error in result.errors:
                print(error)
    """

    def __init__(
        self,
        state: StateStore,
        registry: GeneratorRegistry,
        context: GeneratorContext,
        default_draft_path: Path,
    ):
        """
        Initialize orchestrator.

        Args:
            state: Build state store
            registry: Generators to run, in order
            context: Context shared with the registry's generators
            default_draft_path: Draft used when ``build`` is called without one
        """
        self.state = state
        self.registry = registry
        self.context = context
        self.default_draft_path = default_draft_path
        self.changes = ChangeDetector(state)

    @classmethod
    def from_manifest(cls, manifest: ProjectManifest) -> BuildOrchestrator:
        """Wire the state store, ownership policy and default generators from a manifest."""
        state = StateStore(
            manifest.state_path,
            lock_timeout=manifest.state.lock_timeout,
            lock_stale_after=manifest.state.lock_stale_after,
        )
        context = GeneratorContext(
            output_root=manifest.output_root,
            ownership=manifest.ownership_policy(),
            state=state,
        )
        registry = default_registry(context, disabled=manifest.generators.disabled)
        return cls(state, registry, context, manifest.draft_path)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(
        self,
        draft_path: Path | None = None,
        only: Iterable[str] | None = None,
        force: bool = False,
    ) -> ir.BuildResult:
        """
        Build the draft.

        Never raises: every failure is reported through the result's
        ``status`` and ``errors``.

        Args:
            draft_path: Draft file (defaults to the configured draft)
            only: Restrict the build to these generator names
            force: Skip the change check and overwrite scaffold_only files
        """
        path = Path(draft_path) if draft_path is not None else self.default_draft_path
        logger.info("Building %s", path)

        if not path.is_file():
            logger.info("Draft not found: %s", path)
            return ir.BuildResult.failure(
                ir.BuildStatus.MISSING_DRAFT, [f"Draft file not found: {path}"]
            )

        try:
            with self.state.locked("build"):
                result = self._build_locked(path, only, force)
        except StateError as e:
            logger.error("Build of %s failed: %s", path, e)
            return ir.BuildResult.failure(ir.BuildStatus.FAILED, [str(e)])

        logger.info(
            "Build finished: %s (%d file(s), %d error(s))",
            result.status.value,
            len(result.generated),
            len(result.errors),
        )
        return result

    def _build_locked(
        self, path: Path, only: Iterable[str] | None, force: bool
    ) -> ir.BuildResult:
        try:
            raw = path.read_bytes()
        except OSError as e:
            logger.error("Could not read draft %s: %s", path, e)
            return ir.BuildResult.failure(
                ir.BuildStatus.FAILED, [f"Could not read draft {path}: {e}"]
            )
        digest = compute_hash(raw)

        try:
            spec = parse_draft(raw.decode("utf-8"), source=path)
        except ValidationError as e:
            return ir.BuildResult.failure(ir.BuildStatus.INVALID_DRAFT, e.errors)
        except InvalidDraftError as e:
            return ir.BuildResult.failure(ir.BuildStatus.INVALID_DRAFT, [str(e)])
        except UnicodeDecodeError as e:
            return ir.BuildResult.failure(
                ir.BuildStatus.INVALID_DRAFT, [f"Draft is not valid UTF-8: {e}"]
            )

        draft_key = str(path.resolve())
        if not force and not self.changes.has_changed(draft_key, digest):
            logger.info("No changes detected in %s", path)
            return ir.BuildResult.no_changes()

        aggregate, skipped = self._run_generators(spec, path, only, force)

        if aggregate.errors:
            logger.warning(
                "Build of %s had %d error(s); state not updated", path, len(aggregate.errors)
            )
            status = ir.BuildStatus.FAILED
        else:
            self.state.update(draft_key, digest, aggregate.generated)
            if aggregate.backup:
                self.state.save_last_build_backup(aggregate.backup)
            else:
                self.state.clear_last_build_backup()
            status = ir.BuildStatus.BUILT

        return ir.BuildResult(
            status=status,
            generated=aggregate.generated,
            skipped=skipped,
            warnings=aggregate.warnings,
            errors=aggregate.errors,
            backup=aggregate.backup,
        )

    def _run_generators(
        self,
        spec: ir.Specification,
        path: Path,
        only: Iterable[str] | None,
        force: bool,
    ) -> tuple[GeneratorResult, list[str]]:
        aggregate = GeneratorResult()
        skipped: list[str] = []

        previous_force = self.context.force
        self.context.force = force
        try:
            for generator in self.registry.select(only):
                try:
                    if not generator.supports(spec):
                        logger.debug("Skipping generator %s", generator.name)
                        skipped.append(generator.name)
                        continue

                    logger.debug("Running generator %s", generator.name)
                    result = generator.generate(spec, path)
                except Exception as e:
                    logger.warning("Generator %s failed: %s", generator.name, e, exc_info=True)
                    aggregate.add_error(f"{generator.name}: {e}")
                    continue

                namespaced = GeneratorResult(
                    generated=result.generated,
                    warnings=result.warnings,
                    errors=[f"{generator.name}: {error}" for error in result.errors],
                    backup=result.backup,
                )
                aggregate.merge(namespaced)
        finally:
            self.context.force = previous_force

        return aggregate, skipped

    # ------------------------------------------------------------------
    # Revert / status / plan
    # ------------------------------------------------------------------

    def revert(self) -> ir.RevertResult:
        """
        Restore the files the last clean build overwrote.

        Backup entries that resolve outside the output root are reported and
        skipped. The backup is cleared afterwards even if some restores
        failed, so a second revert does nothing.
        """
        restored: list[str] = []
        errors: list[str] = []
        root = self.context.output_root

        try:
            with self.state.locked("revert"):
                for raw_path, text in self.state.get_last_build_backup().items():
                    target = resolve_within(raw_path, root)
                    if target is None:
                        logger.warning("Refusing to restore %s: outside %s", raw_path, root)
                        errors.append(f"Refusing to restore {raw_path}: path is outside {root}")
                        continue
                    try:
                        atomic_write(target, encode_text_preserving(text))
                    except OSError as e:
                        errors.append(f"Failed to restore {raw_path}: {e}")
                        continue
                    logger.debug("Restored %s", target)
                    restored.append(str(target))
                self.state.clear_last_build_backup()
        except StateError as e:
            logger.error("Revert failed: %s", e)
            errors.append(str(e))

        logger.info("Reverted %d file(s), %d error(s)", len(restored), len(errors))
        return ir.RevertResult(restored=restored, errors=errors)

    def status(self) -> ir.BuildState:
        """Current build state (read without taking the lock)."""
        return self.state.load()

    def plan(self, spec: ir.Specification) -> list[ir.PlanStep]:
        return build_plan(spec, self.registry)


__all__ = [
    "BuildOrchestrator",
]
