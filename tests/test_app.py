"""Tests for the Textual app in cli/daylog.py, driven through Pilot."""

import asyncio

from textual import events
from textual.command import CommandPalette

from cli.daylog import DaylogApp, NoteInput
from core.models import CARRYOVER_MARKER, State

MOOD = "[09:00:00] Mood: 😊 Happy"
SETTLED = f"[09:00:01] {CARRYOVER_MARKER}"


def today_lines(log_dir):
    return (log_dir / "2026-02-11.md").read_text(encoding="utf-8").splitlines()


def test_editor_takes_paste_and_cursor_keys(make_controller, write_day, log_dir):
    write_day("2026-02-11", MOOD, SETTLED)
    app = DaylogApp(make_controller())

    async def run():
        async with app.run_test() as pilot:
            await pilot.pause()
            c = app.controller
            editor = app.query_one(NoteInput)
            assert c.state is State.EDITING
            assert editor.has_focus

            app.post_message(events.Paste("pasted text"))
            await pilot.pause()
            assert c.buffer == "pasted text"

            await pilot.press("left", "a", "b", "left", "c")
            await pilot.pause()
            assert editor.text == "pasted texacbt"
            assert c.buffer == "pasted texacbt"

            await pilot.press("enter")
            await pilot.pause()
            assert today_lines(log_dir)[-1] == "[09:30:00] pasted texacbt"
            assert c.buffer == ""
            assert editor.text == ""

    asyncio.run(run())


def test_newline_key_inserts_line_break(make_controller, write_day, log_dir):
    write_day("2026-02-11", MOOD, SETTLED)
    app = DaylogApp(make_controller())

    async def run():
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("a", "shift+enter", "b")
            await pilot.pause()
            assert app.controller.buffer == "a\nb"
            await pilot.press("enter")
            await pilot.pause()
            assert today_lines(log_dir)[-2:] == ["[09:30:00] a", "           b"]

    asyncio.run(run())


def test_alert_blocks_builtin_bindings(make_controller, write_day, clock):
    write_day("2026-02-11", MOOD, SETTLED)
    app = DaylogApp(make_controller())

    async def run():
        async with app.run_test() as pilot:
            await pilot.pause()
            c = app.controller
            await pilot.press("d", "r")
            await pilot.pause()
            assert c.buffer == "dr"

            c.pomodoro.start(1)
            clock.advance(minutes=2)
            c.tick()
            app.refresh_view()
            await pilot.pause()
            assert c.state is State.ALERT_BLOCKING
            assert not app.query_one(NoteInput).has_focus

            await pilot.press("ctrl+p", "ctrl+q", "ctrl+c", "a", "enter")
            await pilot.pause()
            assert app.is_running
            assert app.return_code is None
            assert not any(isinstance(screen, CommandPalette) for screen in app.screen_stack)
            assert len(app.screen_stack) == 1
            assert c.state is State.ALERT_BLOCKING
            assert c.buffer == "dr"
            assert app.check_action("quit", ()) is False

            clock.advance(seconds=5)
            c.tick()
            app.refresh_view()
            await pilot.pause()
            assert c.state is State.EDITING
            assert app.query_one(NoteInput).has_focus
            assert app.check_action("quit", ()) is True

    asyncio.run(run())
