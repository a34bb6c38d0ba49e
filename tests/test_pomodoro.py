"""Tests for core/pomodoro.py."""

from datetime import timedelta

from core.models import PomodoroPhase
from core.pomodoro import ALERT_SECONDS, DEFAULT_MINUTES, PomodoroTimer, parse_minutes


def test_parse_minutes():
    assert parse_minutes("40") == 40
    assert parse_minutes(" 5 ") == 5
    assert parse_minutes("") == DEFAULT_MINUTES
    assert parse_minutes("abc") == DEFAULT_MINUTES
    assert parse_minutes("0") == DEFAULT_MINUTES
    assert parse_minutes("-3") == DEFAULT_MINUTES


def test_full_cycle(clock):
    timer = PomodoroTimer(now=clock)
    assert timer.phase is PomodoroPhase.IDLE
    assert timer.remaining() is None

    timer.start(1)
    assert timer.is_running
    assert timer.remaining() == timedelta(minutes=1)

    clock.advance(seconds=59)
    assert timer.tick() is PomodoroPhase.RUNNING

    clock.advance(seconds=1)
    assert timer.tick() is PomodoroPhase.ALERT
    assert timer.is_alert_active
    assert timer.state.end_time is None
    assert timer.state.alert_expiry == clock() + timedelta(seconds=ALERT_SECONDS)

    clock.advance(seconds=ALERT_SECONDS - 1)
    assert timer.tick() is PomodoroPhase.ALERT

    clock.advance(seconds=1)
    assert timer.tick() is PomodoroPhase.IDLE


def test_late_tick_still_shows_alert(clock):
    timer = PomodoroTimer(now=clock)
    timer.start(1)
    clock.advance(minutes=1, seconds=30)
    assert timer.tick() is PomodoroPhase.ALERT


def test_cancel_running(clock):
    timer = PomodoroTimer(now=clock)
    timer.start(25)
    timer.cancel()
    assert timer.phase is PomodoroPhase.IDLE
    clock.advance(minutes=30)
    assert timer.tick() is PomodoroPhase.IDLE


def test_alert_cannot_be_cancelled_or_restarted(clock):
    timer = PomodoroTimer(now=clock)
    timer.start(1)
    clock.advance(minutes=1)
    timer.tick()

    timer.cancel()
    timer.start(10)
    assert timer.is_alert_active
    assert timer.state.end_time is None


def test_remaining_never_negative(clock):
    timer = PomodoroTimer(now=clock)
    timer.start(1)
    clock.advance(minutes=2)
    assert timer.remaining() == timedelta(0)
