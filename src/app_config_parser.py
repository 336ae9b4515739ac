"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_STATE_FILE,
    DEFAULT_STATE_KEY,
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    PersistenceSettings,
    PomodoroSettings,
    TimerSettings,
)

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        pomodoro=_parse_pomodoro_settings(_section(raw, "pomodoro")),
        timer=_parse_timer_settings(_section(raw, "timer")),
        persistence=_parse_persistence_settings(
            _section(raw, "persistence"),
            base_dir=base_dir,
        ),
        notifications=_parse_notification_settings(_section(raw, "notifications")),
        logging=_parse_logging_settings(_section(raw, "logging")),
        source_file=source_file,
    )


def _parse_pomodoro_settings(section: Mapping[str, Any]) -> PomodoroSettings:
    return PomodoroSettings(
        focus_minutes=_as_bounded_int(
            section.get("focus_minutes", 25),
            "pomodoro.focus_minutes",
            low=1,
            high=120,
        ),
        break_minutes=_as_bounded_int(
            section.get("break_minutes", 5),
            "pomodoro.break_minutes",
            low=1,
            high=60,
        ),
        auto_start_break=_as_bool(
            section.get("auto_start_break", False),
            "pomodoro.auto_start_break",
        ),
        hide_seconds=_as_bool(
            section.get("hide_seconds", False),
            "pomodoro.hide_seconds",
        ),
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    tick_interval = _as_float(
        section.get("tick_interval_seconds", 1.0),
        "timer.tick_interval_seconds",
    )
    if tick_interval <= 0:
        raise AppConfigurationError("timer.tick_interval_seconds must be greater than zero.")
    return TimerSettings(
        default_task_minutes=_as_bounded_int(
            section.get("default_task_minutes", 30),
            "timer.default_task_minutes",
            low=1,
        ),
        custom_max_minutes=_as_bounded_int(
            section.get("custom_max_minutes", 500),
            "timer.custom_max_minutes",
            low=1,
        ),
        tick_interval_seconds=tick_interval,
    )


def _parse_persistence_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> PersistenceSettings:
    state_file = _as_str(section.get("state_file", DEFAULT_STATE_FILE), "persistence.state_file")
    key = _as_str(section.get("key", DEFAULT_STATE_KEY), "persistence.key")
    if not key:
        raise AppConfigurationError("persistence.key must not be empty.")
    return PersistenceSettings(
        enabled=_as_bool(section.get("enabled", True), "persistence.enabled"),
        state_file=_resolve_path(base_dir, state_file or DEFAULT_STATE_FILE),
        key=key,
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    app_name = _as_str(section.get("app_name", "Focus Session"), "notifications.app_name")
    return NotificationSettings(
        desktop_enabled=_as_bool(
            section.get("desktop_enabled", False),
            "notifications.desktop_enabled",
        ),
        app_name=app_name or "Focus Session",
        timeout_seconds=_as_bounded_int(
            section.get("timeout_seconds", 5),
            "notifications.timeout_seconds",
            low=1,
        ),
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    return LoggingSettings(level=_as_log_level(section.get("level", "INFO"), "logging.level"))


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_bounded_int(
    value: Any,
    field: str,
    *,
    low: int,
    high: int | None = None,
) -> int:
    number = _as_int(value, field)
    if number < low or (high is not None and number > high):
        bounds = f"in [{low}, {high}]" if high is not None else f">= {low}"
        raise AppConfigurationError(f"{field} must be {bounds}, got: {number}.")
    return number


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _as_log_level(value: Any, field: str) -> str:
    level = _as_str(value, field).upper()
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"{field} must be one of: {allowed}.")
    return level


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
