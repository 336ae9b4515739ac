"""Validated pomodoro and timer preferences consumed by the session engine."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_CUSTOM_MAX_MINUTES,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_TASK_MINUTES,
    DEFAULT_TICK_INTERVAL_SECONDS,
)
from .errors import SessionConfigurationError

FOCUS_MINUTES_RANGE = (1, 120)
BREAK_MINUTES_RANGE = (1, 60)


@dataclass(frozen=True)
class PomodoroConfig:
    """Long-lived user preference for focus/break lengths and auto-break."""
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    auto_start_break: bool = False
    hide_seconds: bool = False

    def __post_init__(self) -> None:
        low, high = FOCUS_MINUTES_RANGE
        if not low <= self.focus_minutes <= high:
            raise SessionConfigurationError(
                f"focus_minutes must be in [{low}, {high}], got: {self.focus_minutes}"
            )
        low, high = BREAK_MINUTES_RANGE
        if not low <= self.break_minutes <= high:
            raise SessionConfigurationError(
                f"break_minutes must be in [{low}, {high}], got: {self.break_minutes}"
            )

    @property
    def focus_seconds(self) -> int:
        return self.focus_minutes * 60

    @property
    def break_seconds(self) -> int:
        return self.break_minutes * 60

    @classmethod
    def from_settings(cls, settings) -> "PomodoroConfig":
        return cls(
            focus_minutes=int(settings.focus_minutes),
            break_minutes=int(settings.break_minutes),
            auto_start_break=bool(settings.auto_start_break),
            hide_seconds=bool(settings.hide_seconds),
        )


@dataclass(frozen=True)
class TimerConfig:
    """Engine limits that are not user-facing pomodoro preferences."""
    default_task_minutes: int = DEFAULT_TASK_MINUTES
    custom_max_minutes: int = DEFAULT_CUSTOM_MAX_MINUTES
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.default_task_minutes <= 0:
            raise SessionConfigurationError(
                f"default_task_minutes must be greater than zero, got: {self.default_task_minutes}"
            )
        if self.custom_max_minutes <= 0:
            raise SessionConfigurationError(
                f"custom_max_minutes must be greater than zero, got: {self.custom_max_minutes}"
            )
        if self.tick_interval_seconds <= 0:
            raise SessionConfigurationError(
                "tick_interval_seconds must be greater than zero, "
                f"got: {self.tick_interval_seconds}"
            )

    @property
    def default_task_seconds(self) -> int:
        return self.default_task_minutes * 60

    @classmethod
    def from_settings(cls, settings) -> "TimerConfig":
        return cls(
            default_task_minutes=int(settings.default_task_minutes),
            custom_max_minutes=int(settings.custom_max_minutes),
            tick_interval_seconds=float(settings.tick_interval_seconds),
        )
