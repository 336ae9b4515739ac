"""Protocols describing the external collaborators the session engine calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol


@dataclass(frozen=True)
class TaskUpdateResult:
    """Outcome reported by the task store for a single task mutation."""
    success: bool
    task: Optional[Mapping[str, Any]] = None
    error: Optional[str] = None


class TaskGatewayLike(Protocol):
    """Task store operations used when a bound session ends."""
    def complete_task(self, task_id: str, duration_minutes: int) -> TaskUpdateResult:
        ...

    def cancel_task(self, task_id: str) -> TaskUpdateResult:
        ...

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> TaskUpdateResult:
        ...


class FocusLogLike(Protocol):
    """Best-effort recorder of completed focus intervals."""
    def log_focus_session(self, minutes: int, kind: str) -> None:
        ...


class NotifierLike(Protocol):
    """Best-effort user-facing notification sink."""
    def notify_user(self, title: str, body: str, tag: str) -> None:
        ...


class SnapshotStoreLike(Protocol):
    """Durable key-value slot holding one JSON-compatible record per key."""
    def read(self, key: str) -> Optional[Mapping[str, Any]]:
        ...

    def write(self, key: str, record: Mapping[str, Any]) -> None:
        ...

    def delete(self, key: str) -> None:
        ...
