"""
Unit tests for the build state store.

Tests state management for incremental builds including:
- State persistence and the on-disk JSON shape
- Fallback to defaults for unreadable state
- Last-build backups
- The exclusive state lock
"""

import json
import os
import threading
import time
from pathlib import Path

import pytest

from draftwright.core import ir
from draftwright.core.errors import StateError, StateLockError
from draftwright.core.state import StateStore

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def record() -> ir.GeneratedFileRecord:
    return ir.GeneratedFileRecord(
        path="/p/app/models/post.py",
        content_hash="abc123",
        ownership=ir.FileOwnership.SCAFFOLD_ONLY,
    )


# =============================================================================
# Load / Save
# =============================================================================


class TestLoadSave:
    """Tests for loading and saving the state document."""

    def test_missing_file_loads_defaults(self, state_store: StateStore):
        state = state_store.load()

        assert state.version == ir.STATE_VERSION
        assert state.last_run is None
        assert state.drafts == {}
        assert state.generated == {}
        assert state.last_build_backup is None

    def test_round_trip(self, state_store: StateStore, record: ir.GeneratedFileRecord):
        state = ir.BuildState(generated={record.path: record})
        state_store.save(state)

        loaded = state_store.load()

        assert loaded.generated[record.path] == record

    def test_on_disk_keys(self, state_store: StateStore, record: ir.GeneratedFileRecord):
        state_store.update("/p/draft.yaml", "d1", {record.path: record})

        data = json.loads(state_store.state_path.read_text())

        assert set(data) == {"version", "lastRun", "drafts", "generated"}
        assert data["drafts"]["/p/draft.yaml"]["hash"] == "d1"
        assert "lastBuilt" in data["drafts"]["/p/draft.yaml"]
        assert data["generated"][record.path] == {
            "path": record.path,
            "hash": "abc123",
            "ownership": "scaffold_only",
        }

    def test_table_is_stored_when_set(self, state_store: StateStore):
        migration = ir.GeneratedFileRecord(
            path="/p/app/migrations/x.py",
            content_hash="h",
            ownership=ir.FileOwnership.REGENERATE,
            table="posts",
        )
        state_store.update("/p/draft.yaml", "d1", {migration.path: migration})

        assert state_store.get_generated_path_for_table("posts") == "/p/app/migrations/x.py"
        assert state_store.get_generated_path_for_table("users") is None

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2, 3]", '{"generated": {"x": {"path": "x"}}}', ""],
    )
    def test_unreadable_state_falls_back_to_defaults(self, state_store: StateStore, content: str):
        state_store.state_path.parent.mkdir(parents=True, exist_ok=True)
        state_store.state_path.write_text(content)

        assert state_store.load() == ir.BuildState()

    def test_save_failure_raises_state_error(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = StateStore(blocker / "state.json")

        with pytest.raises(StateError):
            store.save(ir.BuildState())

    def test_clear(self, state_store: StateStore):
        state_store.update("/p/draft.yaml", "d1", {})
        state_store.clear()

        assert not state_store.state_path.exists()
        assert state_store.get_draft_hash("/p/draft.yaml") is None


# =============================================================================
# Updates
# =============================================================================


class TestUpdate:
    """Tests for recording builds."""

    def test_update_records_hash_and_timestamps(self, state_store: StateStore):
        state = state_store.update("/p/draft.yaml", "d1", {})

        assert state_store.get_draft_hash("/p/draft.yaml") == "d1"
        assert state.last_run is not None
        assert state.drafts["/p/draft.yaml"].last_built == state.last_run

    def test_update_merges_generated(self, state_store: StateStore, record: ir.GeneratedFileRecord):
        other = ir.GeneratedFileRecord(
            path="/p/app/routes.py", content_hash="r1", ownership=ir.FileOwnership.REGENERATE
        )
        state_store.update("/p/draft.yaml", "d1", {record.path: record})
        state_store.update("/p/draft.yaml", "d2", {other.path: other})

        generated = state_store.load().generated

        assert set(generated) == {record.path, other.path}

    def test_update_keeps_backup(self, state_store: StateStore):
        state_store.save_last_build_backup({"/p/a.py": "old"})
        state_store.update("/p/draft.yaml", "d1", {})

        assert state_store.get_last_build_backup() == {"/p/a.py": "old"}


class TestBackup:
    """Tests for the last-build backup."""

    def test_save_replaces_previous_backup(self, state_store: StateStore):
        state_store.save_last_build_backup({"/p/a.py": "a"})
        state_store.save_last_build_backup({"/p/b.py": "b"})

        assert state_store.get_last_build_backup() == {"/p/b.py": "b"}

    def test_clear_removes_key(self, state_store: StateStore):
        state_store.save_last_build_backup({"/p/a.py": "a"})
        state_store.clear_last_build_backup()

        assert state_store.get_last_build_backup() == {}
        data = json.loads(state_store.state_path.read_text())
        assert "last_build_backup" not in data

    def test_non_utf8_text_survives(self, state_store: StateStore):
        text = b"caf\xe9".decode("utf-8", "surrogateescape")
        state_store.save_last_build_backup({"/p/a.bin": text})

        restored = state_store.get_last_build_backup()["/p/a.bin"]

        assert restored.encode("utf-8", "surrogateescape") == b"caf\xe9"


# =============================================================================
# Locking
# =============================================================================


class TestLocking:
    """Tests for the exclusive state lock."""

    def test_lock_file_exists_only_while_held(self, state_store: StateStore):
        with state_store.locked():
            assert state_store.lock_path.exists()
        assert not state_store.lock_path.exists()

    def test_lock_is_reentrant(self, state_store: StateStore):
        with state_store.locked():
            with state_store.locked():
                state_store.update("/p/draft.yaml", "d1", {})
            assert state_store.lock_path.exists()
        assert not state_store.lock_path.exists()

    def test_second_holder_times_out(self, state_store: StateStore):
        """A concurrent holder fails instead of interleaving writes."""
        other = StateStore(state_store.state_path, lock_timeout=0.2)
        errors: list[Exception] = []

        def contend() -> None:
            try:
                with other.locked():
                    pass
            except StateLockError as e:
                errors.append(e)

        with state_store.locked():
            thread = threading.Thread(target=contend)
            thread.start()
            thread.join()

        assert len(errors) == 1
        assert "state lock" in str(errors[0])

    def test_second_holder_waits_for_release(self, state_store: StateStore):
        other = StateStore(state_store.state_path, lock_timeout=5.0)
        order: list[str] = []
        acquired = threading.Event()

        def contend() -> None:
            acquired.wait()
            with other.locked():
                order.append("second")

        thread = threading.Thread(target=contend)
        thread.start()
        with state_store.locked():
            acquired.set()
            time.sleep(0.2)
            order.append("first")
        thread.join()

        assert order == ["first", "second"]

    def test_stale_lock_is_broken(self, state_store: StateStore):
        state_store.lock_path.parent.mkdir(parents=True, exist_ok=True)
        state_store.lock_path.write_text(
            json.dumps({"token": "old", "pid": os.getpid(), "created_epoch": time.time() - 3600})
        )
        store = StateStore(state_store.state_path, lock_timeout=0.5, lock_stale_after=60)

        with store.locked():
            meta = json.loads(store.lock_path.read_text())
            assert meta["token"] != "old"

    def test_lock_records_holder(self, state_store: StateStore):
        with state_store.locked("build"):
            meta = json.loads(state_store.lock_path.read_text())

        assert meta["pid"] == os.getpid()
        assert meta["command"] == "build"
