"""
Change detection for builds.

The draft's content hash is the sole gate before generators run: a build
proceeds only when no hash is recorded for the draft path or the recorded
hash differs from the current one.
"""

from __future__ import annotations

from pathlib import Path

from .hashing import compute_file_hash
from .state import StateStore


class ChangeDetector:
    """Compares the current draft hash with the one recorded by the last clean build."""

    def __init__(self, state: StateStore):
        self.state = state

    @staticmethod
    def compute_hash(draft_path: Path) -> str:
        """Content hash of the raw draft bytes (empty content if the file is absent)."""
        return compute_file_hash(draft_path)

    def has_changed(self, draft_path: Path | str, digest: str) -> bool:
        previous = self.state.get_draft_hash(str(draft_path))
        return previous is None or previous != digest


__all__ = [
    "ChangeDetector",
]
