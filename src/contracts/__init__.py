"""Collaborator contracts shared by the session engine and its hosts."""

from .collaborators import (
    FocusLogLike,
    NotifierLike,
    SnapshotStoreLike,
    TaskGatewayLike,
    TaskUpdateResult,
)

__all__ = [
    "FocusLogLike",
    "NotifierLike",
    "SnapshotStoreLike",
    "TaskGatewayLike",
    "TaskUpdateResult",
]
