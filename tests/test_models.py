"""Tests for core/models.py."""

from datetime import datetime

from core.models import (
    InputMode,
    KeyEvent,
    LogEntry,
    Mood,
    Popup,
    PomodoroPhase,
    PomodoroState,
    State,
)


def test_state_of():
    assert State.of(InputMode.EDITING, None, False) is State.EDITING
    assert State.of(InputMode.NAVIGATE, Popup.TAG, False) is State.POPUP_TAG
    assert State.of(InputMode.SEARCH, Popup.MOOD, True) is State.ALERT_BLOCKING


def test_key_event_parts():
    ev = KeyEvent("ctrl+shift+a")
    assert ev.code == "a"
    assert ev.modifiers == frozenset({"ctrl", "shift"})
    assert KeyEvent("enter").modifiers == frozenset()


def test_key_event_is_printable():
    assert KeyEvent("a", "a").is_printable
    assert KeyEvent("space", " ").is_printable
    assert KeyEvent("ㅎ", "ㅎ").is_printable
    assert not KeyEvent("enter", "\r").is_printable
    assert not KeyEvent("ctrl+a", "\x01").is_printable
    assert not KeyEvent("up").is_printable


def test_mood_entry_content():
    assert Mood.HAPPY.entry_content() == "Mood: 😊 Happy"
    assert [m.label for m in Mood.all()][-1] == "😴 Tired"
    assert len(Mood.all()) == 5


def test_pomodoro_state_phase():
    t = datetime(2026, 2, 11, 9, 30)
    assert PomodoroState().phase is PomodoroPhase.IDLE
    assert PomodoroState(end_time=t).phase is PomodoroPhase.RUNNING
    assert PomodoroState(alert_expiry=t).phase is PomodoroPhase.ALERT
    assert PomodoroState(end_time=t).to_dict() == {"endTime": "2026-02-11T09:30:00", "alertExpiry": None}


def test_log_entry_to_dict():
    e = LogEntry("[09:00:00] hi", "/x/2026-02-11.md", 3, "[09:00:00] hi")
    assert e.to_dict() == {"content": "[09:00:00] hi", "filePath": "/x/2026-02-11.md", "lineNumber": 3}
