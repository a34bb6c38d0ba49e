"""Shared test fixtures for daylog tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from core.config import Config
from core.controller import InteractionController
from core.models import KeyEvent
from core.storage import LogStore


class Clock:
    """Controllable stand-in for now_local()."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def key(name: str, character: str | None = None) -> KeyEvent:
    """KeyEvent for a named key, or for a single printable character."""
    if character is None and len(name) == 1:
        character = name
    return KeyEvent(name, character)


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2026, 2, 11, 9, 30, 0))


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def store(log_dir: Path, clock: Clock) -> LogStore:
    return LogStore(log_dir, now=clock)


@pytest.fixture
def write_day(log_dir: Path):
    """Write a day file: write_day('2026-02-10', '[09:00:00] hello', ...)."""

    def _write(day: str, *lines: str) -> Path:
        log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / f"{day}.md"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_controller(store: LogStore, clock: Clock, tmp_path: Path):
    """Build a controller over the temp store; extra kwargs go to the constructor."""

    def _make(**kwargs) -> InteractionController:
        kwargs.setdefault("config_dir", tmp_path)
        return InteractionController(Config(), store, now=clock, **kwargs)

    return _make
