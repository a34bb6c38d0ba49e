"""Pomodoro countdown with a post-expiry alert window.

Polled once per UI tick; there is no background thread.

    IDLE --start--> RUNNING --end_time reached--> ALERT --expiry reached--> IDLE
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from core.models import PomodoroPhase, PomodoroState
from core.workspace import now_local

logger = logging.getLogger(__name__)

DEFAULT_MINUTES = 25
ALERT_SECONDS = 5


def parse_minutes(text: str) -> int:
    """'40' -> 40; '', 'abc', '0' -> DEFAULT_MINUTES"""
    try:
        minutes = int(text.strip())
    except ValueError:
        return DEFAULT_MINUTES
    return minutes if minutes > 0 else DEFAULT_MINUTES


class PomodoroTimer:
    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now or now_local
        self.state = PomodoroState()

    @property
    def phase(self) -> PomodoroPhase:
        return self.state.phase

    @property
    def is_running(self) -> bool:
        return self.phase is PomodoroPhase.RUNNING

    @property
    def is_alert_active(self) -> bool:
        return self.phase is PomodoroPhase.ALERT

    def start(self, minutes: int) -> None:
        """Start a countdown of *minutes*; ignored while the alert is showing."""
        if self.is_alert_active:
            return
        self.state.end_time = self._now() + timedelta(minutes=minutes)
        logger.info("Pomodoro started for %d min", minutes)

    def cancel(self) -> None:
        """Stop a running countdown. The alert window cannot be cancelled."""
        if self.is_running:
            self.state.end_time = None
            logger.info("Pomodoro cancelled")

    def remaining(self) -> timedelta | None:
        if self.state.end_time is None:
            return None
        return max(self.state.end_time - self._now(), timedelta(0))

    def tick(self) -> PomodoroPhase:
        """Advance on wall-clock time and return the resulting phase."""
        now = self._now()
        if self.state.end_time is not None and now >= self.state.end_time:
            self.state.end_time = None
            self.state.alert_expiry = now + timedelta(seconds=ALERT_SECONDS)
            logger.info("Pomodoro finished, alert until %s", self.state.alert_expiry.strftime("%H:%M:%S"))
        if self.state.alert_expiry is not None and now >= self.state.alert_expiry:
            self.state.alert_expiry = None
            logger.debug("Pomodoro alert expired")
        return self.phase
