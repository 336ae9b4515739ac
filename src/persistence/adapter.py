"""Best-effort snapshot and restore of the session through a durable slot."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from contracts import SnapshotStoreLike
from focus_session.constants import ALL_MODES, TASK_MODES
from focus_session.state import PersistedSnapshot, SessionSnapshot

from .errors import PersistenceError, SnapshotDecodeError

DEFAULT_STATE_KEY = "focus_timer_state"


def encode_snapshot(persisted: PersistedSnapshot) -> dict[str, Any]:
    return {
        "remaining_or_elapsed_seconds": int(persisted.remaining_or_elapsed_seconds),
        "total_seconds": int(persisted.total_seconds),
        "mode": persisted.mode,
        "was_running": bool(persisted.was_running),
    }


def decode_snapshot(record: Mapping[str, Any]) -> PersistedSnapshot:
    """Validate a stored record; raises `SnapshotDecodeError` on any mismatch."""
    mode = record.get("mode")
    if mode not in ALL_MODES:
        raise SnapshotDecodeError(f"Unknown session mode: {mode!r}")

    values = {}
    for field in ("remaining_or_elapsed_seconds", "total_seconds"):
        value = record.get(field)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SnapshotDecodeError(f"{field} must be a non-negative integer, got: {value!r}")
        values[field] = value

    was_running = record.get("was_running", False)
    if not isinstance(was_running, bool):
        raise SnapshotDecodeError(f"was_running must be a boolean, got: {was_running!r}")

    return PersistedSnapshot(
        remaining_or_elapsed_seconds=values["remaining_or_elapsed_seconds"],
        total_seconds=values["total_seconds"],
        mode=mode,
        was_running=was_running,
    )


class SessionPersistence:
    """Writes the session into one fixed key and reads it back at startup.

    Every failure is logged and swallowed: losing a snapshot only costs
    resumability, never engine correctness.
    """

    def __init__(
        self,
        store: SnapshotStoreLike,
        *,
        key: str = DEFAULT_STATE_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._key = key
        self._logger = logger or logging.getLogger("persistence")

    @property
    def key(self) -> str:
        return self._key

    def snapshot(self, snapshot: SessionSnapshot) -> bool:
        if snapshot.mode in TASK_MODES:
            # Task bindings are never restored.
            self._logger.info("Task-bound session not persisted; clearing snapshot slot")
            return self.clear()

        persisted = PersistedSnapshot.from_snapshot(snapshot)
        try:
            self._store.write(self._key, encode_snapshot(persisted))
        except (PersistenceError, OSError) as error:
            self._logger.warning("Failed to persist session snapshot: %s", error)
            return False
        self._logger.info(
            "Persisted session snapshot: mode=%s value=%ss running=%s",
            persisted.mode,
            persisted.remaining_or_elapsed_seconds,
            persisted.was_running,
        )
        return True

    def restore(self) -> Optional[PersistedSnapshot]:
        try:
            record = self._store.read(self._key)
        except SnapshotDecodeError as error:
            self._logger.warning("Ignoring unreadable session snapshot: %s", error)
            return None
        except (PersistenceError, OSError) as error:
            self._logger.warning("Failed to read session snapshot: %s", error)
            return None

        if record is None:
            return None
        try:
            return decode_snapshot(record)
        except SnapshotDecodeError as error:
            self._logger.warning("Ignoring invalid session snapshot: %s", error)
            return None

    def clear(self) -> bool:
        try:
            self._store.delete(self._key)
        except (PersistenceError, OSError) as error:
            self._logger.warning("Failed to clear session snapshot: %s", error)
            return False
        return True
