"""
draftwright CLI utilities.

Shared helpers used by the CLI commands: version display, logging setup and
project loading.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from draftwright._version import get_version
from draftwright.core.errors import ManifestError
from draftwright.core.manifest import ENV_LOG_LEVEL, ProjectManifest, load_manifest
from draftwright.core.orchestrator import BuildOrchestrator

console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"draftwright version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(
            f"  Python:        {platform.python_implementation()} {platform.python_version()}"
        )
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(level: str | None) -> None:
    """
    Configure root logging once per invocation.

    Args:
        level: Level name; falls back to DRAFTWRIGHT_LOG_LEVEL, then WARNING
    """
    name = (level or os.environ.get(ENV_LOG_LEVEL) or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format=LOG_FORMAT,
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_project(
    project: Path, log_level: str | None = None
) -> tuple[ProjectManifest, BuildOrchestrator]:
    """
    Load the manifest in ``project`` and wire an orchestrator for it.

    The manifest's ``[logging] level`` applies unless a level was given on
    the command line.
    """
    try:
        manifest = load_manifest(project)
    except ManifestError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    if log_level is None:
        configure_logging(manifest.log_level)
    return manifest, BuildOrchestrator.from_manifest(manifest)


def resolve_draft(manifest: ProjectManifest, draft: Path | None) -> Path:
    """Draft given on the command line, else the configured one."""
    return draft.resolve() if draft is not None else manifest.draft_path


__all__ = [
    "console",
    "err_console",
    "configure_logging",
    "load_project",
    "resolve_draft",
    "version_callback",
]
