"""
Content hashing.

Every digest in the state file is a hex-encoded SHA256 of raw bytes, so the
same content always yields the same hash regardless of which component
computed it.
"""

from __future__ import annotations

import hashlib
from pathlib import Path


def compute_hash(content: str | bytes) -> str:
    """Hex-encoded SHA256 of ``content`` (text is encoded as UTF-8)."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def compute_file_hash(file_path: Path) -> str:
    """
    Hash the raw bytes of a file.

    A missing file hashes like empty content, so an absent draft still has
    a stable digest.
    """
    sha256 = hashlib.sha256()
    if not file_path.is_file():
        return sha256.hexdigest()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


__all__ = [
    "compute_hash",
    "compute_file_hash",
]
