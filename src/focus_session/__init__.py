"""Focus timer session engine: modes, task binding, auto-break, and dispatch."""

from .clock import ThreadedTickScheduler, TickScheduler
from .config import PomodoroConfig, TimerConfig
from .constants import PRESET_DURATIONS_SECONDS
from .dispatch import CompletionDispatcher, DispatchReport, Notification, TerminalEvent
from .errors import SessionConfigurationError, SessionError
from .formatting import format_time, format_time_with_hours, status_message
from .service import SessionEngine
from .state import (
    BoundTask,
    PersistedSnapshot,
    SessionActionResult,
    SessionMode,
    SessionSnapshot,
)

__all__ = [
    "BoundTask",
    "CompletionDispatcher",
    "DispatchReport",
    "Notification",
    "PRESET_DURATIONS_SECONDS",
    "PersistedSnapshot",
    "PomodoroConfig",
    "SessionActionResult",
    "SessionConfigurationError",
    "SessionEngine",
    "SessionError",
    "SessionMode",
    "SessionSnapshot",
    "TerminalEvent",
    "ThreadedTickScheduler",
    "TickScheduler",
    "TimerConfig",
    "format_time",
    "format_time_with_hours",
    "status_message",
]
