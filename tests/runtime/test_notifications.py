import unittest
from unittest.mock import patch

from app_config import NotificationSettings
from runtime import DesktopNotifier, LoggingNotifier, build_notifier


class NotifierTests(unittest.TestCase):
    def test_logging_notifier_writes_info_record(self) -> None:
        with self.assertLogs("runtime.notify", level="INFO") as logs:
            LoggingNotifier().notify_user("Timer Complete!", "Great work!", "timer-complete")

        self.assertIn("[timer-complete] Timer Complete!: Great work!", logs.output[0])

    def test_desktop_notifier_forwards_to_plyer(self) -> None:
        notifier = DesktopNotifier(app_name="Desk Timer", timeout_seconds=8)
        with patch("runtime.notifications.notification") as plyer_notification:
            notifier.notify_user("Focus session complete", "Time for a 5-minute break.", "break-started")

        plyer_notification.notify.assert_called_once_with(
            title="Focus session complete",
            message="Time for a 5-minute break.",
            app_name="Desk Timer",
            timeout=8,
        )

    def test_missing_backend_is_reported_once(self) -> None:
        notifier = DesktopNotifier()
        with patch("runtime.notifications.notification") as plyer_notification:
            plyer_notification.notify.side_effect = NotImplementedError()
            with self.assertLogs("runtime.notify", level="WARNING") as logs:
                notifier.notify_user("A", "B", "tag")
                notifier.notify_user("C", "D", "tag")

        self.assertFalse(notifier.backend_available)
        self.assertEqual(1, plyer_notification.notify.call_count)
        self.assertEqual(1, sum(1 for record in logs.records if record.levelname == "WARNING"))

    def test_backend_errors_propagate(self) -> None:
        notifier = DesktopNotifier()
        with patch("runtime.notifications.notification") as plyer_notification:
            plyer_notification.notify.side_effect = OSError("dbus down")
            with self.assertRaises(OSError):
                notifier.notify_user("A", "B", "tag")

        self.assertTrue(notifier.backend_available)

    def test_build_notifier_follows_settings(self) -> None:
        self.assertIsInstance(build_notifier(NotificationSettings()), LoggingNotifier)
        self.assertIsInstance(
            build_notifier(NotificationSettings(desktop_enabled=True)),
            DesktopNotifier,
        )


if __name__ == "__main__":
    unittest.main()
