class PersistenceError(Exception):
    """Base exception for durable session snapshot storage."""


class SnapshotDecodeError(PersistenceError):
    """Raised when a stored snapshot cannot be decoded."""
