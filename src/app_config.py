"""Config file discovery and loading for the focus session runtime."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    PersistenceSettings,
    PomodoroSettings,
    TimerSettings,
)

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "DEFAULT_CONFIG_FILE",
    "LoggingSettings",
    "NotificationSettings",
    "PersistenceSettings",
    "PomodoroSettings",
    "TimerSettings",
    "load_app_config",
    "load_app_config_or_default",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv("APP_CONFIG_FILE")
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.exists():
        raise AppConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


def load_app_config_or_default(
    config_path: str | None = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> AppConfig:
    """Load config.toml, falling back to built-in defaults when it is absent.

    Parse and validation errors still raise `AppConfigurationError`.
    """
    path = resolve_config_path(config_path)
    if not path.exists():
        (logger or logging.getLogger("app_config")).info(
            "No config file at %s; using defaults",
            path,
        )
        return AppConfig()
    return load_app_config(str(path))
