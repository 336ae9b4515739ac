"""Process-wide session engine: state owner, clock arbiter, and dispatch hub."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import Callable, Optional

from . import modes
from .auto_break import AutoBreakTransition
from .clock import ThreadedTickScheduler, TickScheduler
from .config import PomodoroConfig, TimerConfig
from .constants import (
    ACTION_ADD_TIME,
    ACTION_BIND_TASK,
    ACTION_CANCEL_TASK,
    ACTION_COMPLETE_TASK,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_RESTORE,
    ACTION_RESUME,
    ACTION_SET_DURATION,
    ACTION_SET_MODE,
    ACTION_START,
    ACTION_TICK,
    ACTION_TOGGLE_COUNT_UP,
    MODE_BREAK,
    MODE_CUSTOM,
    MODE_FOCUS,
    REASON_ALREADY_RUNNING,
    REASON_AUTO_BREAK,
    REASON_AUTO_COMPLETED,
    REASON_DISPATCHING,
    REASON_INVALID_DURATION,
    REASON_NOT_PAUSED,
    REASON_RESUMED,
)
from .dispatch import CompletionDispatcher, DispatchReport, TerminalEvent
from .state import PersistedSnapshot, SessionActionResult, SessionSnapshot, SessionState
from .tasks import TaskBindingController


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionEngine:
    """Single owner of the focus timer session.

    All operations are serialized by one re-entrant lock, so clock ticks and
    caller actions never interleave. Exactly one tick callback is armed while
    the session runs; every arming carries a generation number and callbacks
    from an older generation are dropped, so a disarmed session cannot see a
    late tick.
    """

    def __init__(
        self,
        *,
        pomodoro: Optional[PomodoroConfig] = None,
        timer: Optional[TimerConfig] = None,
        scheduler: Optional[TickScheduler] = None,
        dispatcher: Optional[CompletionDispatcher] = None,
        now_fn: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._pomodoro = pomodoro or PomodoroConfig()
        self._timer = timer or TimerConfig()
        self._logger = logger or logging.getLogger("focus_session")
        self._scheduler: TickScheduler = scheduler or ThreadedTickScheduler(
            interval_seconds=self._timer.tick_interval_seconds,
            logger=self._logger.getChild("clock"),
        )
        self._dispatcher = dispatcher or CompletionDispatcher(
            logger=self._logger.getChild("dispatch"),
        )
        self._now_fn = now_fn or _utc_now
        self._lock = threading.RLock()

        self._state = SessionState.idle(self._pomodoro.focus_seconds)
        self._tasks = TaskBindingController(
            default_task_seconds=self._timer.default_task_seconds,
        )
        self._auto_break = AutoBreakTransition(self._pomodoro)
        self._generation = 0
        self._dispatching = False
        self._last_dispatch: Optional[Future[DispatchReport]] = None

    @property
    def pomodoro(self) -> PomodoroConfig:
        return self._pomodoro

    @property
    def last_dispatch(self) -> Optional[Future[DispatchReport]]:
        return self._last_dispatch

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._state.snapshot()

    def update_pomodoro_config(self, pomodoro: PomodoroConfig) -> SessionSnapshot:
        """Swap preferences; an untouched idle focus/break timer picks up the new length."""
        with self._lock:
            self._pomodoro = pomodoro
            self._auto_break.update(pomodoro)
            state = self._state
            if (
                state.mode in (MODE_FOCUS, MODE_BREAK)
                and not state.is_running
                and state.started_at is None
                and state.remaining_seconds == state.total_seconds
            ):
                modes.set_mode(state, state.mode, pomodoro=pomodoro)
            self._logger.info(
                "Pomodoro preferences updated: focus=%smin break=%smin auto_break=%s",
                pomodoro.focus_minutes,
                pomodoro.break_minutes,
                pomodoro.auto_start_break,
            )
            return state.snapshot()

    def set_duration(
        self,
        total_seconds: int,
        remaining_seconds: Optional[int] = None,
    ) -> SessionActionResult:
        with self._lock:
            accepted, reason = modes.set_duration(self._state, total_seconds, remaining_seconds)
            return self._result_locked(ACTION_SET_DURATION, accepted, reason)

    def set_mode(self, mode: str, *, custom_minutes: Optional[int] = None) -> SessionActionResult:
        with self._lock:
            custom_seconds: Optional[int] = None
            if mode == MODE_CUSTOM:
                if custom_minutes is None or not 1 <= int(custom_minutes) <= self._timer.custom_max_minutes:
                    return self._result_locked(ACTION_SET_MODE, False, REASON_INVALID_DURATION)
                custom_seconds = int(custom_minutes) * 60
            accepted, reason = modes.set_mode(
                self._state,
                mode,
                pomodoro=self._pomodoro,
                custom_seconds=custom_seconds,
            )
            return self._result_locked(ACTION_SET_MODE, accepted, reason)

    def start(self) -> SessionActionResult:
        with self._lock:
            accepted, reason = modes.start(self._state, self._now_fn())
            if accepted:
                self._arm_locked()
            return self._result_locked(ACTION_START, accepted, reason)

    def resume(self) -> SessionActionResult:
        with self._lock:
            state = self._state
            if state.is_running:
                return self._result_locked(ACTION_RESUME, False, REASON_ALREADY_RUNNING)
            if state.started_at is None:
                return self._result_locked(ACTION_RESUME, False, REASON_NOT_PAUSED)
            accepted, _ = modes.start(state, self._now_fn())
            if accepted:
                self._arm_locked()
            return self._result_locked(ACTION_RESUME, accepted, REASON_RESUMED)

    def pause(self) -> SessionActionResult:
        with self._lock:
            accepted, reason = modes.pause(self._state)
            if accepted:
                self._disarm_locked()
            return self._result_locked(ACTION_PAUSE, accepted, reason)

    def reset(self) -> SessionActionResult:
        with self._lock:
            if self._state.is_task_bound:
                return self._cancel_locked(ACTION_RESET)
            accepted, reason = modes.reset(self._state)
            if accepted:
                self._disarm_locked()
            return self._result_locked(ACTION_RESET, accepted, reason)

    def add_time(self, delta_seconds: int) -> SessionActionResult:
        with self._lock:
            accepted, reason = modes.add_time(self._state, delta_seconds, self._now_fn())
            return self._result_locked(ACTION_ADD_TIME, accepted, reason)

    def toggle_count_up(self) -> SessionActionResult:
        with self._lock:
            accepted, reason = modes.toggle_count_up(self._state)
            if accepted:
                self._disarm_locked()
            return self._result_locked(ACTION_TOGGLE_COUNT_UP, accepted, reason)

    def tick(self) -> SessionActionResult:
        """Advance the running session by one second."""
        with self._lock:
            return self._tick_locked()

    def bind_task(
        self,
        task_id: str,
        title: str = "",
        *,
        duration_seconds: Optional[int] = None,
        count_up: bool = False,
    ) -> SessionActionResult:
        with self._lock:
            if self._dispatching:
                return self._result_locked(ACTION_BIND_TASK, False, REASON_DISPATCHING)
            accepted, reason = self._tasks.bind(
                self._state,
                task_id=task_id,
                title=title,
                now=self._now_fn(),
                duration_seconds=duration_seconds,
                count_up=count_up,
            )
            if accepted:
                self._arm_locked()
            return self._result_locked(ACTION_BIND_TASK, accepted, reason)

    def complete_task(self) -> SessionActionResult:
        with self._lock:
            if self._dispatching:
                return self._result_locked(ACTION_COMPLETE_TASK, False, REASON_DISPATCHING)
            event, reason = self._tasks.manual_completion(self._state)
            if event is None:
                return self._result_locked(ACTION_COMPLETE_TASK, False, reason)
            self._dispatch_locked(event, reset_engine=True)
            return self._result_locked(ACTION_COMPLETE_TASK, True, reason)

    def cancel_task(self) -> SessionActionResult:
        with self._lock:
            return self._cancel_locked(ACTION_CANCEL_TASK)

    def restore(self, persisted: PersistedSnapshot) -> SessionActionResult:
        with self._lock:
            accepted, reason = modes.restore(self._state, persisted, self._now_fn())
            return self._result_locked(ACTION_RESTORE, accepted, reason)

    def shutdown(self) -> None:
        with self._lock:
            self._disarm_locked()

    def _cancel_locked(self, action: str) -> SessionActionResult:
        if self._dispatching:
            return self._result_locked(action, False, REASON_DISPATCHING)
        event, reason = self._tasks.cancellation(self._state)
        if event is None:
            return self._result_locked(action, False, reason)
        self._dispatch_locked(event, reset_engine=True)
        return self._result_locked(action, True, reason)

    def _tick_locked(self) -> SessionActionResult:
        state = self._state
        accepted, reason = modes.tick(state)
        if not accepted:
            return self._result_locked(ACTION_TICK, False, reason, quiet=True)

        if self._tasks.should_auto_complete(state):
            event = self._tasks.auto_completion(state)
            if event is not None:
                self._dispatch_locked(event, reset_engine=True)
                return self._result_locked(ACTION_TICK, True, REASON_AUTO_COMPLETED)

        if self._auto_break.should_fire(state):
            event = self._auto_break.apply(state)
            if event is not None:
                modes.start(state, self._now_fn())
                self._arm_locked()
                self._dispatch_locked(event, reset_engine=False)
                return self._result_locked(ACTION_TICK, True, REASON_AUTO_BREAK)

        return self._result_locked(ACTION_TICK, True, reason, quiet=True)

    def _dispatch_locked(self, event: TerminalEvent, *, reset_engine: bool) -> None:
        if self._dispatching:
            self._logger.warning(
                "Ignoring re-entrant terminal event: reason=%s task=%s",
                event.reason,
                event.task_id,
            )
            return

        self._dispatching = True
        try:
            self._last_dispatch = self._dispatcher.dispatch(
                event,
                reset=self._reset_to_idle_locked if reset_engine else None,
                on_report=self._record_report,
            )
        finally:
            self._dispatching = False

    def _record_report(self, report: DispatchReport) -> None:
        with self._lock:
            task = self._state.bound_task
            if task is not None and task.id != report.event.task_id:
                return
            self._state.last_error = report.error_message

    def _reset_to_idle_locked(self) -> None:
        self._disarm_locked()
        self._state.reset_to_idle(self._pomodoro.focus_seconds)
        self._logger.info("Session returned to idle focus timer")

    def _arm_locked(self) -> None:
        self._generation += 1
        generation = self._generation
        self._scheduler.arm(lambda: self._on_clock_tick(generation))

    def _disarm_locked(self) -> None:
        self._generation += 1
        self._scheduler.disarm()

    def _on_clock_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._tick_locked()

    def _result_locked(
        self,
        action: str,
        accepted: bool,
        reason: str,
        *,
        quiet: bool = False,
    ) -> SessionActionResult:
        snapshot = self._state.snapshot()
        if not accepted:
            self._logger.debug("Session %s rejected: reason=%s", action, reason)
        elif not quiet:
            self._logger.info(
                "Session %s: reason=%s mode=%s remaining=%ss elapsed=%ss running=%s",
                action,
                reason,
                snapshot.mode,
                snapshot.remaining_seconds,
                snapshot.elapsed_seconds,
                snapshot.is_running,
            )
        return SessionActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=snapshot,
        )
