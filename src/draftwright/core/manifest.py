"""
Project configuration loaded from draftwright.toml.

Every setting has a default, so a project without a manifest still builds:
the draft is ``draft.yaml`` in the project directory, state lives in
``.draftwright/state.json`` and generated files land in the project directory.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ManifestError
from .ownership import OwnershipPolicy
from .state import DEFAULT_STATE_PATH

MANIFEST_NAME = "draftwright.toml"

ENV_DRAFT_PATH = "DRAFTWRIGHT_DRAFT_PATH"
ENV_STATE_PATH = "DRAFTWRIGHT_STATE_PATH"
ENV_LOG_LEVEL = "DRAFTWRIGHT_LOG_LEVEL"


@dataclass
class PathsConfig:
    """File locations, relative to the project root unless absolute."""

    draft: str = "draft.yaml"
    state: str = str(DEFAULT_STATE_PATH)
    output: str = "."


@dataclass
class StateConfig:
    """State file locking."""

    lock_timeout: float = 10.0
    lock_stale_after: float = 300.0


@dataclass
class GeneratorsConfig:
    """Which registered generators take part in builds."""

    disabled: list[str] = field(default_factory=list)


@dataclass
class ProjectManifest:
    """
    Project manifest loaded from draftwright.toml.

    Examples in draftwright.toml:

        [project]
        name = "shop"

        [paths]
        draft = "specs/draft.yaml"
        output = "generated"

        [generators]
        disabled = ["test"]

        [ownership]
        "app/models/*" = "regenerate"
    """

    name: str
    project_root: Path
    paths: PathsConfig = field(default_factory=PathsConfig)
    state: StateConfig = field(default_factory=StateConfig)
    generators: GeneratorsConfig = field(default_factory=GeneratorsConfig)
    ownership: dict[str, str] = field(default_factory=dict)
    log_level: str = "WARNING"

    def _resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.project_root / path

    @property
    def draft_path(self) -> Path:
        return self._resolve(self.paths.draft)

    @property
    def state_path(self) -> Path:
        return self._resolve(self.paths.state)

    @property
    def output_root(self) -> Path:
        return self._resolve(self.paths.output)

    def ownership_policy(self) -> OwnershipPolicy:
        """Default policy with this project's overrides consulted first."""
        return OwnershipPolicy.default().extended(self.ownership)


def _section(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ManifestError(f"[{name}] in {MANIFEST_NAME} must be a table")
    return value


def load_manifest(project_root: Path) -> ProjectManifest:
    """
    Load draftwright.toml from ``project_root``.

    A missing manifest yields defaults. Environment variables override the
    draft path, state path and log level.

    Raises:
        ManifestError: If the manifest is not valid TOML or holds invalid values
    """
    project_root = project_root.resolve()
    manifest_path = project_root / MANIFEST_NAME

    data: dict = {}
    if manifest_path.exists():
        try:
            data = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ManifestError(f"Invalid {MANIFEST_NAME}: {e}") from e

    project = _section(data, "project")
    paths_data = _section(data, "paths")
    state_data = _section(data, "state")
    generators_data = _section(data, "generators")
    ownership_data = _section(data, "ownership")
    logging_data = _section(data, "logging")

    for key, value in paths_data.items():
        if not isinstance(value, str):
            raise ManifestError(f"[paths] {key} in {MANIFEST_NAME} must be a string")

    paths = PathsConfig(
        draft=os.environ.get(ENV_DRAFT_PATH) or paths_data.get("draft", "draft.yaml"),
        state=os.environ.get(ENV_STATE_PATH) or paths_data.get("state", str(DEFAULT_STATE_PATH)),
        output=paths_data.get("output", "."),
    )

    try:
        state = StateConfig(
            lock_timeout=float(state_data.get("lock_timeout", 10.0)),
            lock_stale_after=float(state_data.get("lock_stale_after", 300.0)),
        )
    except (TypeError, ValueError) as e:
        raise ManifestError(f"Invalid [state] settings in {MANIFEST_NAME}: {e}") from e

    disabled = generators_data.get("disabled", [])
    if not isinstance(disabled, list) or not all(isinstance(name, str) for name in disabled):
        raise ManifestError(f"[generators] disabled in {MANIFEST_NAME} must be a list of names")

    manifest = ProjectManifest(
        name=project.get("name", project_root.name),
        project_root=project_root,
        paths=paths,
        state=state,
        generators=GeneratorsConfig(disabled=disabled),
        ownership={str(k): str(v) for k, v in ownership_data.items()},
        log_level=os.environ.get(ENV_LOG_LEVEL) or logging_data.get("level", "WARNING"),
    )
    # Fail on bad ownership values at load time rather than mid-build
    manifest.ownership_policy()
    return manifest
