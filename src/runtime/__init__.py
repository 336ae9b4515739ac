"""Runtime owner exports."""

from .notifications import DesktopNotifier, LoggingNotifier
from .session_runtime import (
    SessionRuntime,
    bootstrap_runtime,
    build_notifier,
    build_persistence,
    setup_logging,
)

__all__ = [
    "DesktopNotifier",
    "LoggingNotifier",
    "SessionRuntime",
    "bootstrap_runtime",
    "build_notifier",
    "build_persistence",
    "setup_logging",
]
