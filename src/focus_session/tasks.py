"""Task binding rules layered on top of countdown and count-up sessions."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Optional

from .constants import (
    MAX_TASK_TITLE_LENGTH,
    MODE_TASK_COUNT_UP,
    MODE_TASK_COUNTDOWN,
    NOTIFY_TAG_TASK_COMPLETE,
    NOTIFY_TAG_TIMER_COMPLETE,
    REASON_AUTO_COMPLETED,
    REASON_BOUND,
    REASON_CANCELLED,
    REASON_COMPLETED,
    REASON_DISPATCHING,
    REASON_INVALID_DURATION,
    REASON_INVALID_TASK,
    REASON_NO_TASK,
    REASON_TASK_BOUND,
)
from .dispatch import (
    TASK_OP_CANCEL,
    TASK_OP_COMPLETE,
    TASK_OP_UPDATE,
    Notification,
    TerminalEvent,
)
from .state import BoundTask, SessionState

TASK_STATUS_COMPLETED = "completed"


def round_minutes(seconds: float) -> int:
    """Round seconds to whole minutes, halves rounding up."""
    return int(math.floor(max(0.0, seconds) / 60 + 0.5))


def sanitize_task_title(title: str) -> str:
    compact = " ".join(str(title).split())
    return compact[:MAX_TASK_TITLE_LENGTH]


def initial_duration_seconds(state: SessionState) -> int:
    """Scheduled length of a bound countdown, taken from its wall-clock anchors."""
    if state.started_at is not None and state.ends_at is not None:
        return max(0, round((state.ends_at - state.started_at).total_seconds()))
    return state.total_seconds


class TaskBindingController:
    """Binds tasks to the session and turns terminal conditions into events."""

    def __init__(self, *, default_task_seconds: int):
        if default_task_seconds <= 0:
            raise ValueError("default_task_seconds must be greater than zero")
        self._default_task_seconds = int(default_task_seconds)

    def bind(
        self,
        state: SessionState,
        *,
        task_id: str,
        title: str,
        now: datetime,
        duration_seconds: Optional[int] = None,
        count_up: bool = False,
    ) -> tuple[bool, str]:
        if state.bound_task is not None:
            return False, REASON_TASK_BOUND
        task_id = str(task_id).strip() if task_id is not None else ""
        if not task_id:
            return False, REASON_INVALID_TASK

        task = BoundTask(id=task_id, title=sanitize_task_title(title))
        if count_up:
            state.mode = MODE_TASK_COUNT_UP
            state.elapsed_seconds = 0
            state.total_seconds = 0
            state.remaining_seconds = 0
            state.started_at = now
            state.ends_at = None
        else:
            seconds = self._default_task_seconds if duration_seconds is None else int(duration_seconds)
            if seconds <= 0:
                return False, REASON_INVALID_DURATION
            state.mode = MODE_TASK_COUNTDOWN
            state.total_seconds = seconds
            state.remaining_seconds = seconds
            state.elapsed_seconds = 0
            state.started_at = now
            state.ends_at = now + timedelta(seconds=seconds)

        state.bound_task = task
        state.last_completed_task_id = None
        state.auto_break_fired = False
        state.last_error = None
        state.is_running = True
        return True, REASON_BOUND

    def should_auto_complete(self, state: SessionState) -> bool:
        task = state.bound_task
        return (
            state.mode == MODE_TASK_COUNTDOWN
            and task is not None
            and state.remaining_seconds == 0
            and state.last_completed_task_id != task.id
        )

    def auto_completion(self, state: SessionState) -> Optional[TerminalEvent]:
        """Latch and describe the expiry of a bound countdown, at most once per task."""
        if not self.should_auto_complete(state):
            return None
        task = state.bound_task
        assert task is not None
        state.last_completed_task_id = task.id

        minutes = round_minutes(initial_duration_seconds(state))
        return TerminalEvent(
            reason=REASON_AUTO_COMPLETED,
            task_id=task.id,
            task_operation=TASK_OP_COMPLETE,
            duration_minutes=minutes,
            notification=Notification(
                title="Timer Complete!",
                body=f"Great work! Task completed with {minutes} minutes of focus time.",
                tag=NOTIFY_TAG_TIMER_COMPLETE,
            ),
        )

    def manual_completion(self, state: SessionState) -> tuple[Optional[TerminalEvent], str]:
        task = state.bound_task
        if task is None:
            return None, REASON_NO_TASK
        if state.last_completed_task_id == task.id:
            return None, REASON_DISPATCHING
        state.last_completed_task_id = task.id

        if state.mode == MODE_TASK_COUNT_UP:
            minutes = round_minutes(state.elapsed_seconds)
            patch: dict[str, object] = {"status": TASK_STATUS_COMPLETED}
            if minutes > 0:
                patch["duration_minutes"] = minutes
            return (
                TerminalEvent(
                    reason=REASON_COMPLETED,
                    task_id=task.id,
                    task_operation=TASK_OP_UPDATE,
                    duration_minutes=minutes,
                    task_patch=patch,
                    log_minutes=minutes if minutes >= 1 else None,
                ),
                REASON_COMPLETED,
            )

        minutes = round_minutes(initial_duration_seconds(state) - state.remaining_seconds)
        return (
            TerminalEvent(
                reason=REASON_COMPLETED,
                task_id=task.id,
                task_operation=TASK_OP_COMPLETE,
                duration_minutes=minutes,
                notification=Notification(
                    title="Task Complete",
                    body=f"'{task.title}' completed with {minutes} minutes of focus time.",
                    tag=NOTIFY_TAG_TASK_COMPLETE,
                ),
            ),
            REASON_COMPLETED,
        )

    def cancellation(self, state: SessionState) -> tuple[Optional[TerminalEvent], str]:
        task = state.bound_task
        if task is None:
            return None, REASON_NO_TASK
        if state.last_completed_task_id == task.id:
            return None, REASON_DISPATCHING
        state.last_completed_task_id = task.id
        return (
            TerminalEvent(
                reason=REASON_CANCELLED,
                task_id=task.id,
                task_operation=TASK_OP_CANCEL,
            ),
            REASON_CANCELLED,
        )

