"""Typed dataclasses and enums for the daylog data model.

Entries are materialized from plain-text day files; nothing here is a
stable identity. Popup/mode state is modelled as one base mode plus at
most one open popup.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any


CARRYOVER_MARKER = "System: Carryover Checked"
MOOD_PREFIX = "Mood:"


# ── Log entries ───────────────────────────────────────────────


@dataclass
class LogEntry:
    """One primary line of a day file plus any folded continuation lines.

    ``line_number`` is the 0-based physical line index at read time and
    ``raw_line`` the text of that line; together they address the line for
    mutation and let the store detect a stale address.
    """

    content: str
    file_path: str
    line_number: int
    raw_line: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "filePath": self.file_path,
            "lineNumber": self.line_number,
        }


# ── Mood ──────────────────────────────────────────────────────


class Mood(enum.Enum):
    HAPPY = "happy"
    NEUTRAL = "neutral"
    STRESSED = "stressed"
    FOCUSED = "focused"
    TIRED = "tired"

    @property
    def label(self) -> str:
        return _MOOD_LABELS[self]

    def entry_content(self) -> str:
        """Content of the log entry that records this mood."""
        return f"{MOOD_PREFIX} {self.label}"

    @classmethod
    def all(cls) -> list[Mood]:
        return list(cls)


_MOOD_LABELS = {
    Mood.HAPPY: "😊 Happy",
    Mood.NEUTRAL: "😐 Neutral",
    Mood.STRESSED: "😫 Stressed",
    Mood.FOCUSED: "🧐 Focused",
    Mood.TIRED: "😴 Tired",
}


# ── Tokens ────────────────────────────────────────────────────


class TokenKind(enum.Enum):
    TIMESTAMP = "timestamp"
    TODO = "todo"
    MOOD = "mood"
    TAG = "tag"
    URL = "url"
    TEXT = "text"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ""
    checked: bool = False  # only meaningful for TODO

    @classmethod
    def timestamp(cls, text: str) -> Token:
        return cls(TokenKind.TIMESTAMP, text)

    @classmethod
    def todo(cls, checked: bool) -> Token:
        return cls(TokenKind.TODO, checked=checked)

    @classmethod
    def mood(cls) -> Token:
        return cls(TokenKind.MOOD, MOOD_PREFIX)

    @classmethod
    def tag(cls, text: str) -> Token:
        return cls(TokenKind.TAG, text)

    @classmethod
    def url(cls, text: str) -> Token:
        return cls(TokenKind.URL, text)

    @classmethod
    def plain(cls, text: str) -> Token:
        return cls(TokenKind.TEXT, text)

    @classmethod
    def whitespace(cls, text: str) -> Token:
        return cls(TokenKind.WHITESPACE, text)


# ── Interaction state ─────────────────────────────────────────


class InputMode(enum.Enum):
    NAVIGATE = "navigate"
    EDITING = "editing"
    SEARCH = "search"


class Popup(enum.Enum):
    MOOD = "mood"
    TODO = "todo"
    TAG = "tag"
    ACTIVITY = "activity"
    POMODORO = "pomodoro"
    PATH = "path"


# Highest priority first.
POPUP_PRIORITY = [
    Popup.MOOD,
    Popup.TODO,
    Popup.TAG,
    Popup.ACTIVITY,
    Popup.POMODORO,
    Popup.PATH,
]


class State(enum.Enum):
    """Combined view of mode + popup + alert, as seen by the presentation layer."""

    NAVIGATE = "navigate"
    EDITING = "editing"
    SEARCH = "search"
    POPUP_MOOD = "popup_mood"
    POPUP_TODO = "popup_todo"
    POPUP_TAG = "popup_tag"
    POPUP_ACTIVITY = "popup_activity"
    POPUP_POMODORO = "popup_pomodoro"
    POPUP_PATH = "popup_path"
    ALERT_BLOCKING = "alert_blocking"

    @classmethod
    def of(cls, mode: InputMode, popup: Popup | None, alert: bool) -> State:
        if alert:
            return cls.ALERT_BLOCKING
        if popup is not None:
            return cls(f"popup_{popup.value}")
        return cls(mode.value)


@dataclass(frozen=True)
class KeyEvent:
    """A key press as delivered by the host loop.

    ``key`` uses lower-case ``+``-joined names ("enter", "shift+enter",
    "ctrl+c", "a"); ``character`` is the printable character, if any.
    """

    key: str
    character: str | None = None

    @property
    def modifiers(self) -> frozenset[str]:
        parts = self.key.lower().split("+")
        return frozenset(parts[:-1]) if len(parts) > 1 else frozenset()

    @property
    def code(self) -> str:
        return self.key.lower().rsplit("+", 1)[-1]

    @property
    def is_printable(self) -> bool:
        return (
            self.character is not None
            and len(self.character) == 1
            and self.character.isprintable()
            and not ({"ctrl", "alt"} & self.modifiers)
        )


@dataclass
class Notification:
    message: str
    expires_at: datetime
    severity: str = "information"


# ── Pomodoro ──────────────────────────────────────────────────


class PomodoroPhase(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    ALERT = "alert"


@dataclass
class PomodoroState:
    """At most one of ``end_time`` / ``alert_expiry`` is set."""

    end_time: datetime | None = None
    alert_expiry: datetime | None = None

    @property
    def phase(self) -> PomodoroPhase:
        if self.alert_expiry is not None:
            return PomodoroPhase.ALERT
        if self.end_time is not None:
            return PomodoroPhase.RUNNING
        return PomodoroPhase.IDLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "endTime": self.end_time.isoformat(timespec="seconds") if self.end_time else None,
            "alertExpiry": self.alert_expiry.isoformat(timespec="seconds") if self.alert_expiry else None,
        }


@dataclass
class ActivityDay:
    """Entry count for one calendar day, as shown in the activity graph."""

    date: str
    count: int = 0
