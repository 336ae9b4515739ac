import unittest
from datetime import datetime, timedelta, timezone

from focus_session import (
    PRESET_DURATIONS_SECONDS,
    SessionSnapshot,
    format_time,
    format_time_with_hours,
    status_message,
)
from focus_session.state import BoundTask, SessionState
from focus_session.tasks import initial_duration_seconds, round_minutes, sanitize_task_title


class FormatTimeTests(unittest.TestCase):
    def test_format_time_pads_minutes_and_seconds(self) -> None:
        self.assertEqual("25:00", format_time(1500))
        self.assertEqual("00:05", format_time(5))
        self.assertEqual("00:00", format_time(-3))

    def test_hide_seconds_rounds_minutes_up(self) -> None:
        self.assertEqual("25 min", format_time(1500, hide_seconds=True))
        self.assertEqual("25 min", format_time(1441, hide_seconds=True))
        self.assertEqual("1 min", format_time(1, hide_seconds=True))
        self.assertEqual("0 min", format_time(0, hide_seconds=True))

    def test_format_time_with_hours(self) -> None:
        self.assertEqual("59:59", format_time_with_hours(3599))
        self.assertEqual("1:00:00", format_time_with_hours(3600))
        self.assertEqual("2:05:09", format_time_with_hours(7509))

    def test_presets(self) -> None:
        self.assertEqual((900, 1500, 2700, 3600), PRESET_DURATIONS_SECONDS)


class StatusMessageTests(unittest.TestCase):
    def test_ready_focus(self) -> None:
        snapshot = SessionState.idle(1500).snapshot()
        self.assertEqual("Focus ready (25:00)", status_message(snapshot))

    def test_expired_countdown(self) -> None:
        snapshot = SessionSnapshot(
            mode="break",
            remaining_seconds=0,
            elapsed_seconds=0,
            total_seconds=300,
            is_running=True,
        )
        self.assertEqual("Break: time's up", status_message(snapshot))

    def test_bound_count_up_uses_task_title(self) -> None:
        snapshot = SessionSnapshot(
            mode="task_count_up",
            remaining_seconds=0,
            elapsed_seconds=3725,
            total_seconds=0,
            is_running=True,
            started_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
            bound_task=BoundTask(id="T", title="Write"),
        )
        self.assertEqual("Write running (1:02:05)", status_message(snapshot))

    def test_paused_countdown_with_hidden_seconds(self) -> None:
        snapshot = SessionSnapshot(
            mode="custom",
            remaining_seconds=61,
            elapsed_seconds=0,
            total_seconds=600,
            is_running=False,
            started_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
        )
        self.assertEqual("Custom paused (2 min)", status_message(snapshot, hide_seconds=True))


class TaskHelperTests(unittest.TestCase):
    def test_round_minutes_rounds_halves_up(self) -> None:
        self.assertEqual(0, round_minutes(29))
        self.assertEqual(1, round_minutes(30))
        self.assertEqual(2, round_minutes(125))
        self.assertEqual(3, round_minutes(150))
        self.assertEqual(0, round_minutes(-10))

    def test_sanitize_task_title(self) -> None:
        self.assertEqual("Write the report", sanitize_task_title("  Write\tthe \n report "))
        self.assertEqual(120, len(sanitize_task_title("y" * 300)))

    def test_initial_duration_prefers_anchors(self) -> None:
        started = datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc)
        state = SessionState(
            mode="task_countdown",
            remaining_seconds=10,
            total_seconds=600,
            started_at=started,
            ends_at=started + timedelta(seconds=420),
        )
        self.assertEqual(420, initial_duration_seconds(state))

        state.started_at = None
        self.assertEqual(600, initial_duration_seconds(state))


if __name__ == "__main__":
    unittest.main()
