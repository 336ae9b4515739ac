"""User notification sinks for terminal session events."""

from __future__ import annotations

import logging
from typing import Optional

from plyer import notification


class LoggingNotifier:
    """Writes notifications to the application log."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("runtime.notify")

    def notify_user(self, title: str, body: str, tag: str) -> None:
        self._logger.info("[%s] %s: %s", tag, title, body)


class DesktopNotifier:
    """Desktop notifications through plyer, degrading to the log.

    Platforms without a plyer backend are reported once; later messages go
    to the fallback sink only. Backend errors propagate to the dispatcher.
    """

    def __init__(
        self,
        *,
        app_name: str = "Focus Session",
        timeout_seconds: int = 5,
        fallback: Optional[LoggingNotifier] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._app_name = app_name
        self._timeout_seconds = int(timeout_seconds)
        self._logger = logger or logging.getLogger("runtime.notify")
        self._fallback = fallback or LoggingNotifier(self._logger)
        self._backend_available = True

    @property
    def backend_available(self) -> bool:
        return self._backend_available

    def notify_user(self, title: str, body: str, tag: str) -> None:
        self._fallback.notify_user(title, body, tag)
        if not self._backend_available:
            return
        try:
            notification.notify(
                title=title,
                message=body,
                app_name=self._app_name,
                timeout=self._timeout_seconds,
            )
        except NotImplementedError:
            self._backend_available = False
            self._logger.warning("No desktop notification backend available; using log only")
