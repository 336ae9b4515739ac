"""Process owner for the focus session engine and its collaborators."""

from __future__ import annotations

import atexit
import concurrent.futures
import logging
import signal
import sys
import threading
from typing import Callable, Optional, Union

from app_config import load_app_config_or_default
from app_config_schema import AppConfig, NotificationSettings, PersistenceSettings
from contracts import FocusLogLike, NotifierLike, SnapshotStoreLike, TaskGatewayLike
from focus_session import (
    CompletionDispatcher,
    PomodoroConfig,
    SessionActionResult,
    SessionEngine,
    ThreadedTickScheduler,
    TickScheduler,
    TimerConfig,
)
from persistence import JsonFileSnapshotStore, SessionPersistence

from .notifications import DesktopNotifier, LoggingNotifier


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("runtime")


def build_notifier(settings: NotificationSettings) -> NotifierLike:
    if settings.desktop_enabled:
        return DesktopNotifier(
            app_name=settings.app_name,
            timeout_seconds=settings.timeout_seconds,
            logger=logging.getLogger("runtime.notify"),
        )
    return LoggingNotifier(logging.getLogger("runtime.notify"))


def build_persistence(
    settings: PersistenceSettings,
    *,
    store: Optional[SnapshotStoreLike] = None,
) -> Optional[SessionPersistence]:
    if not settings.enabled:
        return None
    logger = logging.getLogger("persistence")
    return SessionPersistence(
        store or JsonFileSnapshotStore(settings.state_file, logger=logger),
        key=settings.key,
        logger=logger,
    )


class SessionRuntime:
    """Builds the engine from config, restores it at startup, flushes it on exit.

    The flush is best-effort: `close()`, leaving the `with` block, the
    interpreter's atexit hook, and SIGTERM/SIGINT (once installed) all write
    the current snapshot, and the engine stays correct if none of them runs.
    """

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        *,
        tasks: Optional[TaskGatewayLike] = None,
        focus_log: Optional[FocusLogLike] = None,
        notifier: Optional[NotifierLike] = None,
        scheduler: Optional[TickScheduler] = None,
        store: Optional[SnapshotStoreLike] = None,
        async_dispatch: bool = True,
        register_atexit: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = app_config or AppConfig()
        self._logger = logger or logging.getLogger("runtime")
        pomodoro = PomodoroConfig.from_settings(self._config.pomodoro)
        timer = TimerConfig.from_settings(self._config.timer)

        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
        if async_dispatch:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix="session-dispatch",
            )
        self._scheduler = scheduler or ThreadedTickScheduler(
            interval_seconds=timer.tick_interval_seconds,
            logger=logging.getLogger("focus_session.clock"),
        )
        dispatcher = CompletionDispatcher(
            tasks=tasks,
            focus_log=focus_log,
            notifier=notifier or build_notifier(self._config.notifications),
            executor=self._executor,
            logger=logging.getLogger("focus_session.dispatch"),
        )
        self._engine = SessionEngine(
            pomodoro=pomodoro,
            timer=timer,
            scheduler=self._scheduler,
            dispatcher=dispatcher,
            logger=logging.getLogger("focus_session"),
        )
        self._persistence = build_persistence(self._config.persistence, store=store)

        self._lock = threading.Lock()
        self._started = False
        self._closed = False
        self._atexit_registered = False
        if register_atexit:
            atexit.register(self.close)
            self._atexit_registered = True

    @property
    def engine(self) -> SessionEngine:
        return self._engine

    @property
    def persistence(self) -> Optional[SessionPersistence]:
        return self._persistence

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> Optional[SessionActionResult]:
        """Restore the persisted session once; returns the restore result, if any."""
        with self._lock:
            if self._started or self._closed:
                return None
            self._started = True

        if self._persistence is None:
            return None
        persisted = self._persistence.restore()
        if persisted is None:
            self._logger.info("No persisted session; starting idle")
            return None

        result = self._engine.restore(persisted)
        if result.accepted:
            self._logger.info(
                "Restored %s session paused at %ss (was_running=%s)",
                persisted.mode,
                persisted.remaining_or_elapsed_seconds,
                persisted.was_running,
            )
        else:
            self._logger.warning("Persisted session not restored: reason=%s", result.reason)
        return result

    def flush(self) -> bool:
        if self._persistence is None:
            return False
        return self._persistence.snapshot(self._engine.snapshot())

    def close(self, timeout_seconds: float = 5.0, *, wait: bool = True) -> None:
        """Flush, stop the clock, and shut down the dispatch worker.

        With `wait=False` the clock thread and pending dispatch are left to
        finish on their own; their callbacks may need the engine lock, which
        a signal handler on the main thread can be holding.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._logger.info("Closing session runtime...")
        self.flush()
        self._engine.shutdown()

        join = getattr(self._scheduler, "join", None)
        if wait and callable(join):
            join(timeout_seconds)

        if self._executor is not None:
            if wait:
                self._logger.info("Waiting for pending completion dispatch...")
            self._executor.shutdown(wait=wait)

        if self._atexit_registered:
            atexit.unregister(self.close)
            self._atexit_registered = False

    def install_signal_handlers(
        self,
        *,
        exit_fn: Callable[[int], None] = sys.exit,
    ) -> None:
        """Flush and close on SIGTERM and SIGINT."""

        def signal_handler(signum: int, frame) -> None:
            signal_name = signal.Signals(signum).name
            self._logger.info("%s received, flushing session...", signal_name)
            self.close(wait=False)
            exit_fn(0)

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    def __enter__(self) -> "SessionRuntime":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def bootstrap_runtime(config_path: Optional[str] = None, **kwargs) -> SessionRuntime:
    """Load config, configure logging, and return a started runtime."""
    app_config = load_app_config_or_default(config_path)
    logger = setup_logging(app_config.logging.level)
    logger.info("Using config: %s", app_config.source_file or "<defaults>")
    runtime = SessionRuntime(app_config, logger=logger, **kwargs)
    runtime.start()
    return runtime
