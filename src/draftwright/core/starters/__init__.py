"""
Bundled starter drafts.

Each ``<name>.yaml`` file in this package is a complete, valid draft that
``draftwright starter <name>`` copies into a project:

- blog.yaml: posts, comments, categories and tags with pages
- saas.yaml: teams, members, subscriptions and invoices with actions
- api.yaml: API-only resources with actions and custom routes
"""

from pathlib import Path

STARTERS_DIR = Path(__file__).parent


def list_starters() -> list[str]:
    """Names of the bundled starters, sorted."""
    return sorted(f.stem for f in STARTERS_DIR.glob("*.yaml"))


def get_starter_path(name: str) -> Path | None:
    """
    Get path to a starter draft.

    Args:
        name: Starter name (e.g. ``blog``)

    Returns:
        Path to the starter file, or None if there is no such starter
    """
    if Path(name).name != name:
        return None
    path = STARTERS_DIR / f"{name}.yaml"
    if path.is_file():
        return path
    return None


def read_starter(name: str) -> str | None:
    path = get_starter_path(name)
    return path.read_text(encoding="utf-8") if path else None


__all__ = [
    "STARTERS_DIR",
    "get_starter_path",
    "list_starters",
    "read_starter",
]
