"""
draftwright CLI.

Provides the main CLI application and registers all commands. Command
implementations live in draftwright.cli.commands.
"""

from __future__ import annotations

import typer

from draftwright._version import get_version

from .commands import (
    build_command,
    check_command,
    explain_command,
    plan_command,
    revert_command,
    starter_command,
    status_command,
    validate_command,
    watch_command,
)
from .utils import configure_logging, version_callback

__version__ = get_version()

app = typer.Typer(
    help="""draftwright – code generation from a YAML draft

Command Types:
  • Building: build, watch, revert
    → Generate files from the draft; only changed drafts are rebuilt

  • Inspection: plan, validate, check, explain, status
    → Read-only; never write generated files or state

  • Setup: starter
    → Write a bundled example draft
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR); default from DRAFTWRIGHT_LOG_LEVEL",
    ),
) -> None:
    """draftwright CLI main callback for global options."""
    ctx.obj = {"log_level": log_level}
    configure_logging(log_level)


app.command(name="build")(build_command)
app.command(name="plan")(plan_command)
app.command(name="validate")(validate_command)
app.command(name="check")(check_command)
app.command(name="explain")(explain_command)
app.command(name="status")(status_command)
app.command(name="revert")(revert_command)
app.command(name="watch")(watch_command)
app.command(name="starter")(starter_command)


def main() -> None:
    """Entry point for the ``draftwright`` console script."""
    app()


__all__ = [
    "__version__",
    "app",
    "main",
]
