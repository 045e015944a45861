"""Tests for filesystem helpers."""

from pathlib import Path

import pytest

from draftwright.core.fs import (
    atomic_write,
    encode_text_preserving,
    read_text_preserving,
    relative_posix,
    resolve_within,
)


class TestAtomicWrite:
    def test_creates_parents(self, tmp_path: Path):
        path = tmp_path / "a" / "b" / "file.txt"
        atomic_write(path, "hello")
        assert path.read_text() == "hello"

    def test_replaces_content_without_temp_leftovers(self, tmp_path: Path):
        path = tmp_path / "file.txt"
        atomic_write(path, b"one")
        atomic_write(path, b"two")

        assert path.read_bytes() == b"two"
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


def test_preserving_round_trip(tmp_path: Path):
    """Bytes that are not valid UTF-8 survive a text round trip."""
    path = tmp_path / "binary.bin"
    original = b"caf\xe9 \xff\x00 ok"
    path.write_bytes(original)

    text = read_text_preserving(path)

    assert encode_text_preserving(text) == original


class TestResolveWithin:
    def test_relative_path_inside(self, tmp_path: Path):
        assert resolve_within("app/x.py", tmp_path) == tmp_path.resolve() / "app" / "x.py"

    def test_absolute_path_inside(self, tmp_path: Path):
        target = tmp_path / "app" / "x.py"
        assert resolve_within(str(target), tmp_path) == target.resolve()

    @pytest.mark.parametrize("path", ["../escape.txt", "/etc/passwd", "app/../../escape.txt"])
    def test_escaping_paths(self, tmp_path: Path, path: str):
        assert resolve_within(path, tmp_path / "root") is None

    def test_symlinked_parent_outside(self, tmp_path: Path):
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)

        assert resolve_within("link/file.txt", root) is None


def test_relative_posix(tmp_path: Path):
    assert relative_posix(tmp_path / "app" / "models" / "post.py", tmp_path) == "app/models/post.py"
    outside = Path("/elsewhere/file.py")
    assert relative_posix(outside, tmp_path) == "/elsewhere/file.py"
