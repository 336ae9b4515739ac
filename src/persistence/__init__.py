"""Durable snapshot slot for the focus session engine."""

from .adapter import DEFAULT_STATE_KEY, SessionPersistence, decode_snapshot, encode_snapshot
from .errors import PersistenceError, SnapshotDecodeError
from .store import JsonFileSnapshotStore

__all__ = [
    "DEFAULT_STATE_KEY",
    "JsonFileSnapshotStore",
    "PersistenceError",
    "SessionPersistence",
    "SnapshotDecodeError",
    "decode_snapshot",
    "encode_snapshot",
]
