"""Session state record, immutable snapshots, and action result envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

from .constants import (
    COUNT_UP_MODES,
    COUNTDOWN_MODES,
    DEFAULT_FOCUS_SECONDS,
    MODE_FOCUS,
    MODE_TASK_COUNTDOWN,
    TASK_MODES,
)

SessionMode = Literal[
    "focus",
    "break",
    "custom",
    "count_up",
    "task_countdown",
    "task_count_up",
]


@dataclass(frozen=True)
class BoundTask:
    """Task currently driving a task-bound session."""
    id: str
    title: str


@dataclass
class SessionState:
    """Canonical mutable record of the one active timer.

    Owned by `SessionEngine`; every mutation happens under the engine lock.
    `last_completed_task_id` is the completion latch and is cleared whenever
    a new task is bound. `auto_break_fired` latches the focus zero-crossing.
    """
    mode: SessionMode = MODE_FOCUS
    remaining_seconds: int = DEFAULT_FOCUS_SECONDS
    elapsed_seconds: int = 0
    total_seconds: int = DEFAULT_FOCUS_SECONDS
    is_running: bool = False
    started_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    bound_task: Optional[BoundTask] = None
    last_completed_task_id: Optional[str] = None
    auto_break_fired: bool = False
    last_countdown_mode: SessionMode = MODE_FOCUS
    last_error: Optional[str] = field(default=None)

    @classmethod
    def idle(cls, focus_seconds: int = DEFAULT_FOCUS_SECONDS) -> "SessionState":
        return cls(remaining_seconds=focus_seconds, total_seconds=focus_seconds)

    @property
    def is_countdown(self) -> bool:
        return self.mode in COUNTDOWN_MODES or self.mode == MODE_TASK_COUNTDOWN

    @property
    def is_count_up(self) -> bool:
        return self.mode in COUNT_UP_MODES

    @property
    def is_task_bound(self) -> bool:
        return self.mode in TASK_MODES

    def reset_to_idle(self, focus_seconds: int) -> None:
        """Return to the unbound Focus default; latches are left untouched."""
        self.mode = MODE_FOCUS
        self.remaining_seconds = focus_seconds
        self.total_seconds = focus_seconds
        self.elapsed_seconds = 0
        self.is_running = False
        self.started_at = None
        self.ends_at = None
        self.bound_task = None
        self.auto_break_fired = False
        self.last_countdown_mode = MODE_FOCUS

    def snapshot(self) -> "SessionSnapshot":
        return SessionSnapshot(
            mode=self.mode,
            remaining_seconds=self.remaining_seconds,
            elapsed_seconds=self.elapsed_seconds,
            total_seconds=self.total_seconds if self.is_countdown else 0,
            is_running=self.is_running,
            started_at=self.started_at,
            ends_at=self.ends_at,
            bound_task=self.bound_task,
            last_error=self.last_error,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session exposed to callers and persistence."""
    mode: SessionMode
    remaining_seconds: int
    elapsed_seconds: int
    total_seconds: int
    is_running: bool
    started_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    bound_task: Optional[BoundTask] = None
    last_error: Optional[str] = None

    @property
    def is_countdown(self) -> bool:
        return self.mode not in COUNT_UP_MODES

    @property
    def is_task_bound(self) -> bool:
        return self.bound_task is not None

    @property
    def is_expired(self) -> bool:
        return self.is_countdown and self.remaining_seconds == 0

    @property
    def display_seconds(self) -> int:
        if self.is_countdown:
            return self.remaining_seconds
        return self.elapsed_seconds


@dataclass(frozen=True)
class SessionActionResult:
    """Result envelope returned after applying an engine operation."""
    action: str
    accepted: bool
    reason: str
    snapshot: SessionSnapshot


@dataclass(frozen=True)
class PersistedSnapshot:
    """Durable record written before the hosting process goes away."""
    remaining_or_elapsed_seconds: int
    total_seconds: int
    mode: SessionMode
    was_running: bool

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "PersistedSnapshot":
        return cls(
            remaining_or_elapsed_seconds=snapshot.display_seconds,
            total_seconds=snapshot.total_seconds,
            mode=snapshot.mode,
            was_running=snapshot.is_running,
        )
