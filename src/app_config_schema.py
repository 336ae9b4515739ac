"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_STATE_FILE = "~/.local/state/focus-session/timer_state.json"
DEFAULT_STATE_KEY = "focus_timer_state"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class PomodoroSettings:
    """Focus/break preferences from `[pomodoro]`."""
    focus_minutes: int = 25
    break_minutes: int = 5
    auto_start_break: bool = False
    hide_seconds: bool = False


@dataclass(frozen=True)
class TimerSettings:
    """Engine limits from `[timer]`."""
    default_task_minutes: int = 30
    custom_max_minutes: int = 500
    tick_interval_seconds: float = 1.0


@dataclass(frozen=True)
class PersistenceSettings:
    """Snapshot slot location from `[persistence]`."""
    enabled: bool = True
    state_file: str = DEFAULT_STATE_FILE
    key: str = DEFAULT_STATE_KEY


@dataclass(frozen=True)
class NotificationSettings:
    """User notification backend from `[notifications]`."""
    desktop_enabled: bool = False
    app_name: str = "Focus Session"
    timeout_seconds: int = 5


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    pomodoro: PomodoroSettings = field(default_factory=PomodoroSettings)
    timer: TimerSettings = field(default_factory=TimerSettings)
    persistence: PersistenceSettings = field(default_factory=PersistenceSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source_file: str = ""
