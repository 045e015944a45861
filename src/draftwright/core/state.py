"""
Build state persistence.

Tracks, in one JSON document:
- the last built hash per draft path
- metadata for every generated file
- the pre-overwrite backup of the most recent build (for revert)

The document is a small key-value store shared by every build. All
read-modify-write sequences run inside ``StateStore.locked()``, an exclusive
lock file next to the state file, so concurrent builds serialize instead of
interleaving their writes. Writes go through a temp file and ``os.replace``.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from . import ir
from .errors import StateError, StateLockError
from .fs import atomic_write

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path(".draftwright") / "state.json"


def utc_now() -> str:
    return datetime.now(UTC).isoformat()


def _pid_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except OSError:
        # Exists but owned by someone else
        return True
    return True


class StateStore:
    """
    Durable JSON record of draft hashes, generated files and the last backup.

    Example:
        store = StateStore(project_root / ".draftwright" / "state.json")
        with store.locked():
            state = store.load()
            ...
            store.save(state)
    """

    def __init__(
        self,
        state_path: Path,
        lock_timeout: float = 10.0,
        lock_stale_after: float = 300.0,
    ):
        """
        Initialize the store.

        Args:
            state_path: Location of the JSON state file
            lock_timeout: Seconds to wait for the exclusive lock
            lock_stale_after: Age in seconds after which a held lock is considered abandoned
        """
        self.state_path = state_path
        self.lock_path = state_path.with_name(f"{state_path.name}.lock")
        self.lock_timeout = lock_timeout
        self.lock_stale_after = lock_stale_after
        self._mutex = threading.RLock()
        self._depth = 0
        self._token: str | None = None

    # ------------------------------------------------------------------
    # Exclusive access
    # ------------------------------------------------------------------

    @contextmanager
    def locked(self, command: str = "build") -> Iterator[None]:
        """
        Hold the exclusive state lock for the duration of the block.

        Re-entrant within one thread, so helpers called from inside a locked
        build may lock again.

        Raises:
            StateLockError: If another holder keeps the lock past ``lock_timeout``
        """
        acquired = self._mutex.acquire(timeout=self.lock_timeout)
        if not acquired:
            raise StateLockError(f"Timed out waiting for state lock {self.lock_path}")
        try:
            if self._depth == 0:
                self._acquire_file_lock(command)
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._release_file_lock()
        finally:
            self._mutex.release()

    def _acquire_file_lock(self, command: str) -> None:
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        token = f"{os.getpid()}-{threading.get_ident()}-{time.time_ns()}"
        deadline = time.monotonic() + self.lock_timeout

        while True:
            try:
                fd = os.open(self.lock_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
            except FileExistsError:
                stale_reason = self._lock_stale_reason()
                if stale_reason:
                    logger.warning(
                        "Breaking stale state lock %s (%s)", self.lock_path, stale_reason
                    )
                    self.lock_path.unlink(missing_ok=True)
                    continue
                if time.monotonic() >= deadline:
                    owner = self._read_lock_metadata()
                    raise StateLockError(
                        f"Another build holds the state lock {self.lock_path} "
                        f"(owner: {owner or 'unknown'})"
                    ) from None
                time.sleep(0.05)
                continue

            payload = {
                "token": token,
                "pid": os.getpid(),
                "created_epoch": time.time(),
                "created_at": utc_now(),
                "command": command,
            }
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            self._token = token
            logger.debug("Acquired state lock %s", self.lock_path)
            return

    def _release_file_lock(self) -> None:
        owner = self._read_lock_metadata()
        if owner.get("token") == self._token:
            self.lock_path.unlink(missing_ok=True)
            logger.debug("Released state lock %s", self.lock_path)
        self._token = None

    def _read_lock_metadata(self) -> dict[str, Any]:
        try:
            data = json.loads(self.lock_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _lock_stale_reason(self) -> str | None:
        meta = self._read_lock_metadata()
        if not meta:
            # Holder may still be writing its metadata; only age can tell
            try:
                age = time.time() - self.lock_path.stat().st_mtime
            except FileNotFoundError:
                return None
            return "invalid_metadata" if age > self.lock_stale_after else None
        created = meta.get("created_epoch")
        if isinstance(created, (int, float)) and time.time() - created > self.lock_stale_after:
            return "age_exceeded"
        pid = meta.get("pid")
        if isinstance(pid, int) and not _pid_alive(pid):
            return "owner_process_missing"
        return None

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self) -> ir.BuildState:
        """
        Load the state document.

        A missing, unparsable or schema-mismatched file yields the default
        state rather than an error.
        """
        if not self.state_path.exists():
            return ir.BuildState()

        try:
            data = json.loads(self.state_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.state_path, e)
            return ir.BuildState()

        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: top level is not an object", self.state_path)
            return ir.BuildState()

        try:
            return ir.BuildState.from_dict(data)
        except PydanticValidationError as e:
            logger.warning("Ignoring malformed state file %s: %s", self.state_path, e)
            return ir.BuildState()

    def save(self, state: ir.BuildState) -> None:
        """
        Atomically write the state document.

        Raises:
            StateError: If the file cannot be written
        """
        try:
            atomic_write(self.state_path, json.dumps(state.to_dict(), indent=2) + "\n")
        except OSError as e:
            raise StateError(f"Failed to save build state to {self.state_path}: {e}") from e

    def clear(self) -> None:
        """Delete the state file (the next build treats every draft as changed)."""
        self.state_path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_draft_hash(self, draft_path: str) -> str | None:
        record = self.load().drafts.get(draft_path)
        return record.hash if record else None

    def get_generated_path_for_table(self, table: str) -> str | None:
        """Path of a previously generated file that owns ``table``, if any."""
        return self.load().path_for_table(table)

    def get_last_build_backup(self) -> dict[str, str]:
        return dict(self.load().last_build_backup or {})

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(
        self,
        draft_path: str,
        draft_hash: str,
        generated: dict[str, ir.GeneratedFileRecord],
    ) -> ir.BuildState:
        """
        Record a successful build.

        New file records are merged over the existing ones; files recorded by
        earlier builds stay tracked.
        """
        with self.locked("update"):
            state = self.load()
            now = utc_now()
            state.version = ir.STATE_VERSION
            state.last_run = now
            state.drafts[draft_path] = ir.DraftRecord(hash=draft_hash, last_built=now)
            state.generated = {**state.generated, **generated}
            self.save(state)
            return state

    def save_last_build_backup(self, backup: dict[str, str]) -> None:
        """Replace the stored backup with ``backup`` (path -> prior content)."""
        with self.locked("backup"):
            state = self.load()
            state.last_build_backup = dict(backup)
            self.save(state)

    def clear_last_build_backup(self) -> None:
        with self.locked("backup"):
            state = self.load()
            state.last_build_backup = None
            self.save(state)


__all__ = [
    "DEFAULT_STATE_PATH",
    "StateStore",
    "utc_now",
]
