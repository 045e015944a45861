"""
Filesystem helpers shared by generators, the state store and revert.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

# Text stored in state (backups) must round-trip arbitrary bytes
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def atomic_write(path: Path, data: bytes | str) -> None:
    """
    Atomically write ``data`` to ``path``.

    The write strategy is:
    1. create temp file in the same directory,
    2. write + flush + fsync file data,
    3. replace target via ``os.replace``.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        data = data.encode(_ENCODING, _ERRORS)

    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as file_handle:
            file_handle.write(data)
            file_handle.flush()
            os.fsync(file_handle.fileno())
        os.replace(temp_path, path)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise


def read_text_preserving(path: Path) -> str:
    """Read a file as text without losing bytes that are not valid UTF-8."""
    return path.read_bytes().decode(_ENCODING, _ERRORS)


def encode_text_preserving(text: str) -> bytes:
    """Inverse of ``read_text_preserving``."""
    return text.encode(_ENCODING, _ERRORS)


def resolve_within(path: str | Path, root: Path) -> Path | None:
    """
    Resolve ``path`` against ``root`` and return it only if it stays inside.

    Relative paths are taken relative to ``root``. Symlinked parents are
    resolved, so a link pointing outside the root is rejected too.

    Returns:
        The resolved absolute path, or None if it escapes ``root``
    """
    resolved_root = root.resolve()
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = resolved_root / candidate
    resolved = candidate.parent.resolve() / candidate.name
    if candidate.name in ("", ".", ".."):
        return None
    try:
        resolved.relative_to(resolved_root)
    except ValueError:
        return None
    return resolved


def relative_posix(path: Path, root: Path) -> str:
    """``path`` relative to ``root`` in POSIX form; absolute form when outside."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = [
    "atomic_write",
    "read_text_preserving",
    "encode_text_preserving",
    "resolve_within",
    "relative_posix",
]
