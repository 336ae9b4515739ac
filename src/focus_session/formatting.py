"""Display formatting for timer values and session status lines."""

from __future__ import annotations

from .constants import MODE_BREAK, MODE_COUNT_UP, MODE_CUSTOM, MODE_FOCUS, MODE_TASK_COUNT_UP
from .state import SessionSnapshot

_MODE_LABELS = {
    MODE_FOCUS: "Focus",
    MODE_BREAK: "Break",
    MODE_CUSTOM: "Custom",
    MODE_COUNT_UP: "Stopwatch",
}


def format_time(seconds: int, *, hide_seconds: bool = False) -> str:
    """Format seconds as `MM:SS`, or as whole minutes rounded up."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    if hide_seconds:
        if remainder > 0:
            minutes += 1
        return f"{minutes} min"
    return f"{minutes:02d}:{remainder:02d}"


def format_time_with_hours(seconds: int) -> str:
    """Format seconds as `H:MM:SS` once an hour is reached, else `MM:SS`."""
    hours, rest = divmod(max(0, int(seconds)), 3600)
    minutes, remainder = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{remainder:02d}"
    return f"{minutes:02d}:{remainder:02d}"


def status_message(snapshot: SessionSnapshot, *, hide_seconds: bool = False) -> str:
    if snapshot.bound_task is not None:
        label = snapshot.bound_task.title or snapshot.bound_task.id
        if snapshot.mode == MODE_TASK_COUNT_UP:
            value = format_time_with_hours(snapshot.elapsed_seconds)
        else:
            value = format_time(snapshot.remaining_seconds, hide_seconds=hide_seconds)
    else:
        label = _MODE_LABELS.get(snapshot.mode, snapshot.mode)
        if snapshot.is_expired:
            return f"{label}: time's up"
        if snapshot.mode == MODE_COUNT_UP:
            value = format_time_with_hours(snapshot.elapsed_seconds)
        else:
            value = format_time(snapshot.remaining_seconds, hide_seconds=hide_seconds)

    if snapshot.is_running:
        state = "running"
    elif snapshot.started_at is None:
        state = "ready"
    else:
        state = "paused"
    return f"{label} {state} ({value})"
