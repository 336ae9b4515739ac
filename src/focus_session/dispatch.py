"""Exactly-once fan-out of terminal session events to external collaborators."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from contracts import FocusLogLike, NotifierLike, TaskGatewayLike, TaskUpdateResult

from .constants import LOG_KIND_FOCUS

TASK_OP_COMPLETE = "complete"
TASK_OP_UPDATE = "update"
TASK_OP_CANCEL = "cancel"


@dataclass(frozen=True)
class Notification:
    title: str
    body: str
    tag: str


@dataclass(frozen=True)
class TerminalEvent:
    """Side effects requested when a session reaches a terminal state."""
    reason: str
    task_id: Optional[str] = None
    task_operation: Optional[str] = None
    duration_minutes: Optional[int] = None
    task_patch: Optional[Mapping[str, Any]] = None
    log_minutes: Optional[int] = None
    notification: Optional[Notification] = None


@dataclass(frozen=True)
class DispatchReport:
    """Per-step outcome of one dispatched terminal event."""
    event: TerminalEvent
    task_result: Optional[TaskUpdateResult] = None
    task_error: Optional[str] = None
    log_error: Optional[str] = None
    notify_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not (self.task_error or self.log_error or self.notify_error)

    @property
    def error_message(self) -> Optional[str]:
        # Log and notification failures are warnings only; task errors surface.
        return self.task_error


ReportCallback = Callable[[DispatchReport], None]


class CompletionDispatcher:
    """Sequences task update, focus log, and notification, then resets the engine.

    With an executor the collaborator calls run off the caller's thread and
    the reset is applied immediately; without one everything runs inline in
    the fixed order. The reset always runs, whatever the collaborators do.
    """

    def __init__(
        self,
        *,
        tasks: Optional[TaskGatewayLike] = None,
        focus_log: Optional[FocusLogLike] = None,
        notifier: Optional[NotifierLike] = None,
        executor: Optional[Executor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._tasks = tasks
        self._focus_log = focus_log
        self._notifier = notifier
        self._executor = executor
        self._logger = logger or logging.getLogger("focus_session.dispatch")

    def dispatch(
        self,
        event: TerminalEvent,
        *,
        reset: Optional[Callable[[], None]] = None,
        on_report: Optional[ReportCallback] = None,
    ) -> Future[DispatchReport]:
        self._logger.info(
            "Dispatching terminal event: reason=%s task=%s",
            event.reason,
            event.task_id,
        )
        if self._executor is None:
            future: Future[DispatchReport] = Future()
            try:
                future.set_result(self._run(event))
            finally:
                if reset is not None:
                    reset()
        else:
            future = self._executor.submit(self._run, event)
            if reset is not None:
                reset()

        if on_report is not None:
            future.add_done_callback(
                lambda done: self._deliver_report(done, on_report)
            )
        return future

    def _deliver_report(
        self,
        future: Future[DispatchReport],
        on_report: ReportCallback,
    ) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.error("Terminal event dispatch failed: %s", error)
            return
        try:
            on_report(future.result())
        except Exception as error:
            self._logger.error("Dispatch report callback failed: %s", error, exc_info=True)

    def _run(self, event: TerminalEvent) -> DispatchReport:
        task_result, task_error = self._update_task(event)
        log_error = self._log_focus(event)
        notify_error: Optional[str] = None
        if task_error is None:
            notify_error = self._notify(event)

        report = DispatchReport(
            event=event,
            task_result=task_result,
            task_error=task_error,
            log_error=log_error,
            notify_error=notify_error,
        )
        if not report.ok:
            self._logger.warning(
                "Terminal event finished with errors: reason=%s task=%s error=%s",
                event.reason,
                event.task_id,
                report.task_error or report.log_error or report.notify_error,
            )
        return report

    def _update_task(
        self,
        event: TerminalEvent,
    ) -> tuple[Optional[TaskUpdateResult], Optional[str]]:
        if event.task_id is None or event.task_operation is None:
            return None, None
        if self._tasks is None:
            return None, "No task gateway configured"

        try:
            if event.task_operation == TASK_OP_COMPLETE:
                result = self._tasks.complete_task(
                    event.task_id,
                    int(event.duration_minutes or 0),
                )
            elif event.task_operation == TASK_OP_UPDATE:
                result = self._tasks.update_task(event.task_id, dict(event.task_patch or {}))
            elif event.task_operation == TASK_OP_CANCEL:
                result = self._tasks.cancel_task(event.task_id)
            else:
                return None, f"Unsupported task operation: {event.task_operation}"
        except Exception as error:
            self._logger.error(
                "Task %s failed for %s: %s",
                event.task_operation,
                event.task_id,
                error,
                exc_info=True,
            )
            return None, f"Task {event.task_operation} failed: {error}"

        if not result.success:
            message = result.error or f"Task {event.task_operation} was rejected"
            self._logger.warning("Task %s rejected for %s: %s", event.task_operation, event.task_id, message)
            return result, message
        return result, None

    def _log_focus(self, event: TerminalEvent) -> Optional[str]:
        if event.log_minutes is None or event.log_minutes < 1 or self._focus_log is None:
            return None
        try:
            self._focus_log.log_focus_session(event.log_minutes, LOG_KIND_FOCUS)
        except Exception as error:
            self._logger.warning("Failed to log focus session: %s", error)
            return f"Focus log failed: {error}"
        return None

    def _notify(self, event: TerminalEvent) -> Optional[str]:
        notification = event.notification
        if notification is None or self._notifier is None:
            return None
        try:
            self._notifier.notify_user(notification.title, notification.body, notification.tag)
        except Exception as error:
            self._logger.warning("User notification failed: %s", error)
            return f"Notification failed: {error}"
        return None
