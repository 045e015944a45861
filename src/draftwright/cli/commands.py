"""
draftwright CLI commands.

Every command takes ``--project/-p``, the directory holding draftwright.toml
(default: current directory). Draft arguments default to the manifest's
``[paths] draft``.
"""

from __future__ import annotations

import json
import time
from pathlib import Path

import typer
from rich.table import Table

from draftwright.core import ir
from draftwright.core.changes import ChangeDetector
from draftwright.core.errors import DraftNotFoundError, InvalidDraftError, ValidationError
from draftwright.core.parser import parse_draft_file
from draftwright.core.starters import list_starters, read_starter

from .utils import console, load_project, resolve_draft

PROJECT_OPTION = typer.Option(
    Path("."), "--project", "-p", help="Project directory containing draftwright.toml"
)
DRAFT_ARGUMENT = typer.Argument(None, help="Draft file (default: from draftwright.toml)")


def _log_level(ctx: typer.Context) -> str | None:
    return (ctx.obj or {}).get("log_level")


def _load_spec(draft_path: Path) -> ir.Specification:
    """Parse the draft or exit with its errors."""
    try:
        return parse_draft_file(draft_path)
    except DraftNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except ValidationError as e:
        typer.echo("Draft validation failed:", err=True)
        for error in e.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(code=1) from e
    except InvalidDraftError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except UnicodeDecodeError as e:
        typer.echo(f"Parse error: draft is not valid UTF-8 ({e})", err=True)
        raise typer.Exit(code=1) from e


def _print_build_result(result: ir.BuildResult, root: Path) -> None:
    if result.status is ir.BuildStatus.NO_CHANGES:
        console.print("No changes detected.")
        return

    for path in sorted(result.generated):
        try:
            shown = Path(path).relative_to(root.resolve()).as_posix()
        except ValueError:
            shown = path
        console.print(f"  [green]✓[/green] {shown}")
    if result.skipped:
        console.print(f"[dim]Skipped: {', '.join(result.skipped)}[/dim]")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for error in result.errors:
        typer.echo(f"Error: {error}", err=True)

    if result.success:
        console.print(f"[green]Built {len(result.generated)} file(s).[/green]")
    else:
        typer.echo(f"Build failed ({result.status.value}).", err=True)


def build_command(
    ctx: typer.Context,
    draft: Path | None = DRAFT_ARGUMENT,
    only: list[str] | None = typer.Option(  # noqa: B008
        None, "--only", "-o", help="Run only these generators (repeatable)"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Ignore the change check and overwrite scaffold_only files"
    ),
    project: Path = PROJECT_OPTION,
) -> None:
    """
    Generate code from the draft.

    Skips the build when the draft is unchanged since the last clean build.
    """
    manifest, orchestrator = load_project(project, _log_level(ctx))
    result = orchestrator.build(resolve_draft(manifest, draft), only=only or None, force=force)
    _print_build_result(result, manifest.output_root)
    if not result.success:
        raise typer.Exit(code=1)


def plan_command(
    ctx: typer.Context,
    draft: Path | None = DRAFT_ARGUMENT,
    project: Path = PROJECT_OPTION,
) -> None:
    """Show the steps a build would perform, without writing anything."""
    manifest, orchestrator = load_project(project, _log_level(ctx))
    spec = _load_spec(resolve_draft(manifest, draft))
    steps = orchestrator.plan(spec)

    table = Table(title="Build Plan")
    table.add_column("#", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Step")
    table.add_column("Description")
    for index, step in enumerate(steps, start=1):
        table.add_row(str(index), step.kind.value, step.name, step.description)
    console.print(table)

    summary = spec.summary()
    console.print(
        f"{summary['entity_count']} model(s), {summary['action_count']} action(s), "
        f"{summary['page_count']} page(s)"
    )


def validate_command(
    ctx: typer.Context,
    draft: Path | None = DRAFT_ARGUMENT,
    project: Path = PROJECT_OPTION,
) -> None:
    """Parse and validate the draft."""
    manifest, _ = load_project(project, _log_level(ctx))
    _load_spec(resolve_draft(manifest, draft))
    console.print("[green]Draft is valid.[/green]")


def check_command(
    ctx: typer.Context,
    draft: Path | None = DRAFT_ARGUMENT,
    project: Path = PROJECT_OPTION,
) -> None:
    """Run a checklist over the project: draft present, draft valid."""
    manifest, _ = load_project(project, _log_level(ctx))
    draft_path = resolve_draft(manifest, draft)

    checks: list[tuple[str, bool, str]] = []
    exists = draft_path.is_file()
    checks.append(("Draft exists", exists, str(draft_path)))

    if exists:
        try:
            parse_draft_file(draft_path)
            checks.append(("Draft valid", True, ""))
        except ValidationError as e:
            checks.append(("Draft valid", False, f"{len(e.errors)} error(s)"))
        except (InvalidDraftError, UnicodeDecodeError) as e:
            checks.append(("Draft valid", False, str(e).splitlines()[-1]))
    else:
        checks.append(("Draft valid", False, "draft missing"))

    table = Table(title="Project Check")
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Details", style="dim")
    for name, ok, details in checks:
        table.add_row(name, "[green]✓[/green]" if ok else "[red]✗[/red]", details)
    console.print(table)

    if not all(ok for _, ok, _ in checks):
        raise typer.Exit(code=1)


def explain_command(
    ctx: typer.Context,
    draft: Path | None = DRAFT_ARGUMENT,
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
    project: Path = PROJECT_OPTION,
) -> None:
    """Summarize the models, actions and pages the draft declares."""
    manifest, _ = load_project(project, _log_level(ctx))
    spec = _load_spec(resolve_draft(manifest, draft))
    summary = spec.summary()

    if as_json:
        typer.echo(json.dumps(summary, indent=2))
        return

    console.print(f"[bold]Schema version:[/bold] {summary['schema_version']}")
    console.print(f"[bold]Models ({summary['entity_count']}):[/bold]")
    for entity in spec.entities.values():
        relations = sum(len(targets) for targets in entity.relationships.values())
        console.print(
            f"  - {entity.name} ({entity.table}): {len(entity.fields)} field(s), "
            f"{relations} relation(s)"
        )
    console.print(f"[bold]Actions ({summary['action_count']}):[/bold]")
    for action in spec.actions.values():
        console.print(f"  - {action.name} -> {action.resolved_return()}")
    console.print(f"[bold]Pages ({summary['page_count']}):[/bold]")
    for name in spec.pages:
        console.print(f"  - {name}")


def status_command(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the state document as JSON"),
    project: Path = PROJECT_OPTION,
) -> None:
    """Show recorded build state."""
    _, orchestrator = load_project(project, _log_level(ctx))
    state = orchestrator.status()

    if as_json:
        typer.echo(json.dumps(state.to_dict(), indent=2))
        return

    console.print(f"State version: {state.version}")
    console.print(f"Last run: {state.last_run or 'never'}")
    for draft_path, record in state.drafts.items():
        console.print(f"Draft: {draft_path} ({record.hash[:12]})")
    backup = state.last_build_backup or {}
    console.print(f"Revertable files: {len(backup)}")

    if not state.generated:
        console.print("[yellow]No generated files recorded.[/yellow]")
        return

    table = Table(title="Generated Files")
    table.add_column("Path", style="cyan")
    table.add_column("Hash")
    table.add_column("Ownership")
    for path, record in sorted(state.generated.items()):
        table.add_row(path, record.content_hash[:12], record.ownership.value)
    console.print(table)


def revert_command(
    ctx: typer.Context,
    project: Path = PROJECT_OPTION,
) -> None:
    """Restore the files the last build overwrote."""
    _, orchestrator = load_project(project, _log_level(ctx))
    result = orchestrator.revert()

    if not result.restored and not result.errors:
        console.print("Nothing to revert.")
        return
    for path in result.restored:
        console.print(f"  [green]✓[/green] restored {path}")
    for error in result.errors:
        typer.echo(f"Error: {error}", err=True)
    if not result.success:
        raise typer.Exit(code=1)


def watch_command(
    ctx: typer.Context,
    draft: Path | None = DRAFT_ARGUMENT,
    interval: float = typer.Option(1.0, "--interval", "-i", help="Seconds between checks"),
    once: bool = typer.Option(False, "--once", help="Check once, build if needed, then exit"),
    project: Path = PROJECT_OPTION,
) -> None:
    """Rebuild whenever the draft's content changes."""
    manifest, orchestrator = load_project(project, _log_level(ctx))
    draft_path = resolve_draft(manifest, draft)
    console.print(f"Watching {draft_path} (Ctrl+C to stop)")

    last_digest: str | None = None
    try:
        while True:
            digest = ChangeDetector.compute_hash(draft_path)
            if digest != last_digest:
                last_digest = digest
                result = orchestrator.build(draft_path)
                _print_build_result(result, manifest.output_root)
            if once:
                break
            time.sleep(interval)
    except KeyboardInterrupt:
        console.print("Stopped watching.")


def starter_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Starter name (blog, saas, api)"),
    output: Path | None = typer.Option(  # noqa: B008
        None, "--output", help="Where to write the draft (default: configured draft path)"
    ),
    stdout: bool = typer.Option(False, "--stdout", help="Print the draft instead of writing it"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing draft"),
    project: Path = PROJECT_OPTION,
) -> None:
    """Write a bundled starter draft."""
    content = read_starter(name)
    if content is None:
        available = ", ".join(list_starters()) or "none"
        typer.echo(f"Error: Starter '{name}' not found. Available: {available}", err=True)
        raise typer.Exit(code=1)

    if stdout:
        typer.echo(content, nl=False)
        return

    manifest, _ = load_project(project, _log_level(ctx))
    target = output.resolve() if output is not None else manifest.draft_path
    if target.exists() and not force:
        typer.echo(f"Error: {target} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=1)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    console.print(f"[green]Starter '{name}' written to {target}[/green]")
