import concurrent.futures
import threading
import unittest
from typing import Any, Mapping

from contracts import TaskUpdateResult
from focus_session.dispatch import (
    TASK_OP_COMPLETE,
    TASK_OP_UPDATE,
    CompletionDispatcher,
    DispatchReport,
    Notification,
    TerminalEvent,
)


class _RecordingCollaborators:
    def __init__(self, *, task_result=None, log_error=None, notify_error=None):
        self.events: list[tuple[Any, ...]] = []
        self._task_result = task_result or TaskUpdateResult(success=True)
        self._log_error = log_error
        self._notify_error = notify_error

    def complete_task(self, task_id: str, duration_minutes: int) -> TaskUpdateResult:
        self.events.append(("complete", task_id, duration_minutes))
        return self._task_result

    def cancel_task(self, task_id: str) -> TaskUpdateResult:
        self.events.append(("cancel", task_id))
        return self._task_result

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> TaskUpdateResult:
        self.events.append(("update", task_id, dict(patch)))
        return self._task_result

    def log_focus_session(self, minutes: int, kind: str) -> None:
        self.events.append(("log", minutes, kind))
        if self._log_error is not None:
            raise self._log_error

    def notify_user(self, title: str, body: str, tag: str) -> None:
        self.events.append(("notify", tag))
        if self._notify_error is not None:
            raise self._notify_error


def _dispatcher(collaborators: _RecordingCollaborators, **kwargs) -> CompletionDispatcher:
    return CompletionDispatcher(
        tasks=collaborators,
        focus_log=collaborators,
        notifier=collaborators,
        **kwargs,
    )


_UPDATE_EVENT = TerminalEvent(
    reason="completed",
    task_id="T",
    task_operation=TASK_OP_UPDATE,
    duration_minutes=3,
    task_patch={"status": "completed", "duration_minutes": 3},
    log_minutes=3,
    notification=Notification("Done", "3 minutes", "task-complete"),
)


class CompletionDispatcherTests(unittest.TestCase):
    def test_steps_run_in_fixed_order_then_reset(self) -> None:
        collaborators = _RecordingCollaborators()
        resets: list[str] = []

        def _reset() -> None:
            resets.append("reset")
            collaborators.events.append(("reset",))

        future = _dispatcher(collaborators).dispatch(_UPDATE_EVENT, reset=_reset)
        report = future.result()

        self.assertEqual(
            [
                ("update", "T", {"status": "completed", "duration_minutes": 3}),
                ("log", 3, "focus"),
                ("notify", "task-complete"),
                ("reset",),
            ],
            collaborators.events,
        )
        self.assertTrue(report.ok)
        self.assertIsNone(report.error_message)
        self.assertEqual(["reset"], resets)

    def test_task_rejection_skips_notification(self) -> None:
        collaborators = _RecordingCollaborators(
            task_result=TaskUpdateResult(success=False, error="stale task"),
        )
        report = _dispatcher(collaborators).dispatch(_UPDATE_EVENT).result()

        self.assertEqual("stale task", report.task_error)
        self.assertEqual("stale task", report.error_message)
        self.assertNotIn(("notify", "task-complete"), collaborators.events)
        self.assertIn(("log", 3, "focus"), collaborators.events)

    def test_log_and_notify_failures_are_warnings_only(self) -> None:
        collaborators = _RecordingCollaborators(
            log_error=RuntimeError("disk full"),
            notify_error=RuntimeError("no display"),
        )
        report = _dispatcher(collaborators).dispatch(_UPDATE_EVENT).result()

        self.assertFalse(report.ok)
        self.assertIn("disk full", report.log_error)
        self.assertIn("no display", report.notify_error)
        self.assertIsNone(report.error_message)

    def test_missing_gateway_is_reported_and_reset_still_runs(self) -> None:
        resets: list[str] = []
        dispatcher = CompletionDispatcher()
        event = TerminalEvent(reason="completed", task_id="T", task_operation=TASK_OP_COMPLETE)

        report = dispatcher.dispatch(event, reset=lambda: resets.append("reset")).result()

        self.assertEqual(["reset"], resets)
        self.assertEqual("No task gateway configured", report.task_error)

    def test_log_skipped_below_one_minute(self) -> None:
        collaborators = _RecordingCollaborators()
        event = TerminalEvent(
            reason="completed",
            task_id="T",
            task_operation=TASK_OP_UPDATE,
            task_patch={"status": "completed"},
            log_minutes=0,
        )
        _dispatcher(collaborators).dispatch(event).result()
        self.assertEqual([("update", "T", {"status": "completed"})], collaborators.events)

    def test_report_callback_receives_outcome(self) -> None:
        collaborators = _RecordingCollaborators()
        reports: list[DispatchReport] = []

        _dispatcher(collaborators).dispatch(_UPDATE_EVENT, on_report=reports.append)

        self.assertEqual(1, len(reports))
        self.assertIs(_UPDATE_EVENT, reports[0].event)

    def test_failing_report_callback_is_contained(self) -> None:
        collaborators = _RecordingCollaborators()

        def _explode(report: DispatchReport) -> None:
            raise ValueError("observer bug")

        with self.assertLogs("focus_session.dispatch", level="ERROR"):
            future = _dispatcher(collaborators).dispatch(_UPDATE_EVENT, on_report=_explode)

        self.assertTrue(future.result().ok)

    def test_executor_mode_applies_reset_on_calling_thread(self) -> None:
        collaborators = _RecordingCollaborators()
        threads: list[str] = []

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="dispatch-test",
        ) as executor:
            dispatcher = _dispatcher(collaborators, executor=executor)
            future = dispatcher.dispatch(
                TerminalEvent(reason="cancelled", task_id="T", task_operation="cancel"),
                reset=lambda: threads.append(threading.current_thread().name),
            )
            report = future.result(timeout=5)

        self.assertEqual([threading.current_thread().name], threads)
        self.assertTrue(report.ok)
        self.assertEqual([("cancel", "T")], collaborators.events)

    def test_unknown_task_operation_is_reported(self) -> None:
        collaborators = _RecordingCollaborators()
        event = TerminalEvent(reason="completed", task_id="T", task_operation="archive")
        report = _dispatcher(collaborators).dispatch(event).result()
        self.assertIn("archive", report.task_error)


if __name__ == "__main__":
    unittest.main()
