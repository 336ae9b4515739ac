"""File-backed key-value slot for session snapshots."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import PersistenceError, SnapshotDecodeError


class JsonFileSnapshotStore:
    """Stores one JSON object per key inside a single JSON document.

    Writes go through a temporary file in the same directory followed by
    `os.replace`, so readers never observe a half-written document.
    """

    def __init__(self, path: str | Path, *, logger: Optional[logging.Logger] = None):
        self._path = Path(path).expanduser()
        self._logger = logger or logging.getLogger("persistence")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def read(self, key: str) -> Optional[Mapping[str, Any]]:
        with self._lock:
            document = self._load_locked()
        record = document.get(key)
        if record is None:
            return None
        if not isinstance(record, Mapping):
            raise SnapshotDecodeError(f"Stored record for '{key}' is not an object")
        return record

    def write(self, key: str, record: Mapping[str, Any]) -> None:
        with self._lock:
            try:
                document = self._load_locked()
            except SnapshotDecodeError as error:
                self._logger.warning("Replacing unreadable snapshot file %s: %s", self._path, error)
                document = {}
            document[key] = dict(record)
            self._dump_locked(document)

    def delete(self, key: str) -> None:
        with self._lock:
            try:
                document = self._load_locked()
            except SnapshotDecodeError:
                document = {}
            if key not in document:
                return
            del document[key]
            self._dump_locked(document)

    def _load_locked(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except json.JSONDecodeError as error:
            raise SnapshotDecodeError(f"Invalid JSON in {self._path}: {error}") from error
        except OSError as error:
            raise PersistenceError(f"Failed to read {self._path}: {error}") from error
        if not isinstance(raw, dict):
            raise SnapshotDecodeError(f"Root of {self._path} must be a JSON object")
        return raw

    def _dump_locked(self, document: Mapping[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                delete=False,
                dir=str(self._path.parent),
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                encoding="utf-8",
            ) as tmp:
                json.dump(document, tmp, indent=2, sort_keys=True)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_name = tmp.name
            os.replace(tmp_name, self._path)
        except OSError as error:
            raise PersistenceError(f"Failed to write {self._path}: {error}") from error
