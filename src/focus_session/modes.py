"""Pure transition rules for countdown and count-up session modes.

Every function mutates the given `SessionState` only when the operation is
legal and returns `(accepted, reason)`. Scheduling, locking, and task side
effects live in `SessionEngine`; nothing here touches a clock or a callback.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from .config import PomodoroConfig
from .constants import (
    COUNTDOWN_MODES,
    MODE_BREAK,
    MODE_COUNT_UP,
    MODE_FOCUS,
    REASON_ALREADY_RUNNING,
    REASON_INVALID_DURATION,
    REASON_INVALID_MODE,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESTORED,
    REASON_RUNNING,
    REASON_STARTED,
    REASON_TASK_BOUND,
    REASON_TICK,
    REASON_UNSUPPORTED_MODE,
    REASON_UPDATED,
    TASK_MODES,
)
from .state import PersistedSnapshot, SessionState

Transition = tuple[bool, str]


def set_duration(
    state: SessionState,
    total_seconds: int,
    remaining_seconds: Optional[int] = None,
) -> Transition:
    if state.is_running:
        return False, REASON_RUNNING
    if state.is_task_bound:
        return False, REASON_TASK_BOUND
    if state.mode not in COUNTDOWN_MODES:
        return False, REASON_UNSUPPORTED_MODE

    total = int(total_seconds)
    remaining = total if remaining_seconds is None else int(remaining_seconds)
    if total <= 0 or not 0 <= remaining <= total:
        return False, REASON_INVALID_DURATION

    state.total_seconds = total
    state.remaining_seconds = remaining
    state.started_at = None
    state.ends_at = None
    state.auto_break_fired = False
    return True, REASON_UPDATED


def set_mode(
    state: SessionState,
    mode: str,
    *,
    pomodoro: PomodoroConfig,
    custom_seconds: Optional[int] = None,
) -> Transition:
    if state.is_running:
        return False, REASON_RUNNING
    if state.is_task_bound:
        return False, REASON_TASK_BOUND
    if mode not in COUNTDOWN_MODES:
        return False, REASON_INVALID_MODE

    if mode == MODE_FOCUS:
        seconds = pomodoro.focus_seconds
    elif mode == MODE_BREAK:
        seconds = pomodoro.break_seconds
    else:
        if custom_seconds is None or custom_seconds <= 0:
            return False, REASON_INVALID_DURATION
        seconds = int(custom_seconds)

    state.mode = mode  # type: ignore[assignment]
    state.last_countdown_mode = mode  # type: ignore[assignment]
    state.total_seconds = seconds
    state.remaining_seconds = seconds
    state.elapsed_seconds = 0
    state.started_at = None
    state.ends_at = None
    state.auto_break_fired = False
    return True, REASON_UPDATED


def start(state: SessionState, now: datetime) -> Transition:
    """Start or resume the session.

    A plain countdown sitting at zero is refilled from `total_seconds`.
    Task-bound anchors are fixed at bind time and never moved here.
    """
    expired = state.mode in COUNTDOWN_MODES and state.remaining_seconds == 0
    if state.is_running and not expired:
        return False, REASON_ALREADY_RUNNING

    if state.mode in COUNTDOWN_MODES:
        if state.remaining_seconds == 0:
            state.remaining_seconds = state.total_seconds
            state.auto_break_fired = False
        state.started_at = now
        state.ends_at = now + timedelta(seconds=state.remaining_seconds)
    elif state.mode == MODE_COUNT_UP:
        state.started_at = now - timedelta(seconds=state.elapsed_seconds)
        state.ends_at = None

    state.is_running = True
    return True, REASON_STARTED


def pause(state: SessionState) -> Transition:
    if not state.is_running:
        return False, REASON_NOT_RUNNING
    state.is_running = False
    return True, REASON_PAUSED


def reset(state: SessionState) -> Transition:
    """Reset an unbound session; task-bound sessions are cancelled instead."""
    if state.is_task_bound:
        return False, REASON_TASK_BOUND

    if state.mode == MODE_COUNT_UP:
        state.elapsed_seconds = 0
    else:
        state.remaining_seconds = state.total_seconds
        state.auto_break_fired = False
    state.is_running = False
    state.started_at = None
    state.ends_at = None
    return True, REASON_RESET


def add_time(state: SessionState, delta_seconds: int, now: datetime) -> Transition:
    if state.is_task_bound:
        return False, REASON_TASK_BOUND
    if state.mode not in COUNTDOWN_MODES:
        return False, REASON_UNSUPPORTED_MODE

    delta = int(delta_seconds)
    if delta <= 0:
        return False, REASON_INVALID_DURATION

    state.remaining_seconds += delta
    state.total_seconds += delta
    state.auto_break_fired = False
    if state.is_running:
        state.ends_at = now + timedelta(seconds=state.remaining_seconds)
    elif state.ends_at is not None:
        state.ends_at = state.ends_at + timedelta(seconds=delta)
    return True, REASON_UPDATED


def toggle_count_up(state: SessionState) -> Transition:
    """Switch the unbound timer between countdown and stopwatch; always stops it."""
    if state.is_task_bound:
        return False, REASON_TASK_BOUND

    if state.mode == MODE_COUNT_UP:
        state.mode = state.last_countdown_mode
        state.remaining_seconds = state.total_seconds
    else:
        state.last_countdown_mode = state.mode
        state.mode = MODE_COUNT_UP  # type: ignore[assignment]
    state.elapsed_seconds = 0
    state.is_running = False
    state.started_at = None
    state.ends_at = None
    state.auto_break_fired = False
    return True, REASON_UPDATED


def tick(state: SessionState) -> Transition:
    if not state.is_running:
        return False, REASON_NOT_RUNNING

    if state.is_count_up:
        state.elapsed_seconds += 1
    else:
        state.remaining_seconds = max(0, state.remaining_seconds - 1)
    return True, REASON_TICK


def restore(state: SessionState, persisted: PersistedSnapshot, now: datetime) -> Transition:
    """Apply a persisted snapshot as a paused, unbound session.

    `started_at` is anchored at `now` so the session reads as paused and
    `resume` picks it up from the restored values.
    """
    if state.is_running:
        return False, REASON_RUNNING
    if state.is_task_bound:
        return False, REASON_TASK_BOUND
    if persisted.mode in TASK_MODES:
        return False, REASON_UNSUPPORTED_MODE

    value = max(0, int(persisted.remaining_or_elapsed_seconds))
    if persisted.mode == MODE_COUNT_UP:
        state.mode = MODE_COUNT_UP  # type: ignore[assignment]
        state.elapsed_seconds = value
        state.started_at = now - timedelta(seconds=value)
    elif persisted.mode in COUNTDOWN_MODES:
        total = int(persisted.total_seconds)
        if total <= 0:
            return False, REASON_INVALID_DURATION
        state.mode = persisted.mode
        state.last_countdown_mode = persisted.mode
        state.total_seconds = total
        state.remaining_seconds = min(value, total)
        state.elapsed_seconds = 0
        state.started_at = now
    else:
        return False, REASON_INVALID_MODE

    state.is_running = False
    state.ends_at = None
    state.auto_break_fired = False
    return True, REASON_RESTORED

