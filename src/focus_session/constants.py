"""Mode, action, reason, and default constants used by the session engine."""

from __future__ import annotations

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_TASK_MINUTES = 30
DEFAULT_CUSTOM_MAX_MINUTES = 500
DEFAULT_TICK_INTERVAL_SECONDS = 1.0

DEFAULT_FOCUS_SECONDS = DEFAULT_FOCUS_MINUTES * 60

PRESET_DURATIONS_SECONDS: tuple[int, ...] = (15 * 60, 25 * 60, 45 * 60, 60 * 60)

MAX_TASK_TITLE_LENGTH = 120

MODE_FOCUS = "focus"
MODE_BREAK = "break"
MODE_CUSTOM = "custom"
MODE_COUNT_UP = "count_up"
MODE_TASK_COUNTDOWN = "task_countdown"
MODE_TASK_COUNT_UP = "task_count_up"

COUNTDOWN_MODES: frozenset[str] = frozenset({MODE_FOCUS, MODE_BREAK, MODE_CUSTOM})
COUNT_UP_MODES: frozenset[str] = frozenset({MODE_COUNT_UP, MODE_TASK_COUNT_UP})
TASK_MODES: frozenset[str] = frozenset({MODE_TASK_COUNTDOWN, MODE_TASK_COUNT_UP})
ALL_MODES: frozenset[str] = COUNTDOWN_MODES | COUNT_UP_MODES | TASK_MODES

ACTION_SET_DURATION = "set_duration"
ACTION_SET_MODE = "set_mode"
ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_RESET = "reset"
ACTION_ADD_TIME = "add_time"
ACTION_TOGGLE_COUNT_UP = "toggle_count_up"
ACTION_TICK = "tick"
ACTION_BIND_TASK = "bind_task"
ACTION_COMPLETE_TASK = "complete_task"
ACTION_CANCEL_TASK = "cancel_task"
ACTION_RESTORE = "restore"

REASON_STARTED = "started"
REASON_RESUMED = "resumed"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_UPDATED = "updated"
REASON_TICK = "tick"
REASON_BOUND = "bound"
REASON_COMPLETED = "completed"
REASON_AUTO_COMPLETED = "auto_completed"
REASON_CANCELLED = "cancelled"
REASON_AUTO_BREAK = "auto_break"
REASON_RESTORED = "restored"

REASON_RUNNING = "running"
REASON_NOT_RUNNING = "not_running"
REASON_NOT_PAUSED = "not_paused"
REASON_ALREADY_RUNNING = "already_running"
REASON_TASK_BOUND = "task_bound"
REASON_NO_TASK = "no_task"
REASON_INVALID_DURATION = "invalid_duration"
REASON_INVALID_MODE = "invalid_mode"
REASON_INVALID_TASK = "invalid_task"
REASON_UNSUPPORTED_MODE = "unsupported_mode"
REASON_DISPATCHING = "dispatching"

LOG_KIND_FOCUS = "focus"

NOTIFY_TAG_TIMER_COMPLETE = "timer-complete"
NOTIFY_TAG_TASK_COMPLETE = "task-complete"
NOTIFY_TAG_BREAK_STARTED = "break-started"
