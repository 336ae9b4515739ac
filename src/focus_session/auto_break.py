"""Focus-to-break auto-transition for unbound pomodoro sessions."""

from __future__ import annotations

from typing import Optional

from .config import PomodoroConfig
from .constants import MODE_BREAK, MODE_FOCUS, NOTIFY_TAG_BREAK_STARTED, REASON_AUTO_BREAK
from .dispatch import Notification, TerminalEvent
from .state import SessionState


class AutoBreakTransition:
    """Switches a finished Focus countdown into a Break, once per zero-crossing."""

    def __init__(self, pomodoro: PomodoroConfig):
        self._pomodoro = pomodoro

    @property
    def pomodoro(self) -> PomodoroConfig:
        return self._pomodoro

    def update(self, pomodoro: PomodoroConfig) -> None:
        self._pomodoro = pomodoro

    def should_fire(self, state: SessionState) -> bool:
        return (
            self._pomodoro.auto_start_break
            and state.mode == MODE_FOCUS
            and state.bound_task is None
            and state.remaining_seconds == 0
            and not state.auto_break_fired
        )

    def apply(self, state: SessionState) -> Optional[TerminalEvent]:
        """Move `state` into a stopped Break; the caller starts it."""
        if not self.should_fire(state):
            return None

        break_seconds = self._pomodoro.break_seconds
        state.auto_break_fired = True
        state.mode = MODE_BREAK
        state.last_countdown_mode = MODE_BREAK
        state.total_seconds = break_seconds
        state.remaining_seconds = break_seconds
        state.is_running = False
        state.started_at = None
        state.ends_at = None
        return TerminalEvent(
            reason=REASON_AUTO_BREAK,
            notification=Notification(
                title="Focus session complete",
                body=f"Time for a {self._pomodoro.break_minutes}-minute break.",
                tag=NOTIFY_TAG_BREAK_STARTED,
            ),
        )
