"""Single repeating tick source shared by every session mode."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

from .constants import DEFAULT_TICK_INTERVAL_SECONDS

TickCallback = Callable[[], None]


class TickScheduler(Protocol):
    """Clock source that drives at most one callback at a time."""
    @property
    def is_armed(self) -> bool:
        ...

    def arm(self, callback: TickCallback) -> None:
        ...

    def disarm(self) -> None:
        ...


class ThreadedTickScheduler:
    """Daemon-thread clock firing once per interval against a monotonic deadline."""

    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._interval_seconds = float(interval_seconds)
        self._logger = logger or logging.getLogger("focus_session.clock")
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop: Optional[threading.Event] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_armed(self) -> bool:
        with self._lock:
            return self._stop is not None and not self._stop.is_set()

    def arm(self, callback: TickCallback) -> None:
        """Replace any armed callback with `callback`."""
        self.disarm()
        stop = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(callback, stop),
            daemon=True,
            name="session-clock",
        )
        with self._lock:
            self._stop = stop
            self._thread = thread
        thread.start()

    def disarm(self) -> None:
        # Never joins: the caller may hold a lock the worker is waiting on.
        with self._lock:
            stop = self._stop
            self._stop = None
        if stop is not None:
            stop.set()

    def join(self, timeout_seconds: float = 2.0) -> None:
        """Disarm and wait for the worker thread to exit."""
        self.disarm()
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error(
                "Clock thread did not stop within %.1fs",
                timeout_seconds,
            )

    def _run(self, callback: TickCallback, stop: threading.Event) -> None:
        next_deadline = time.monotonic() + self._interval_seconds
        while True:
            delay = next_deadline - time.monotonic()
            if stop.wait(max(0.0, delay)):
                return
            try:
                callback()
            except Exception as error:
                self._logger.error("Tick callback failed: %s", error, exc_info=True)
            next_deadline += self._interval_seconds
