"""Tests for the rendering helpers in cli/daylog.py."""

from rich.console import Console

from cli.daylog import border_color, parse_color, render_entry, render_line, visible_window

from core.config import Theme


def test_parse_color():
    assert parse_color("Red") == "red"
    assert parse_color("Reset") == "default"
    assert parse_color("LightBlue") == "bright_blue"
    assert parse_color("50, 50, 50") == "rgb(50,50,50)"
    assert parse_color("300,0,0") == "default"
    assert parse_color("nonsense") == "default"


def test_border_color():
    assert border_color("Reset") is None
    assert border_color("Green") is not None


def test_render_line_plain_text():
    text = render_line("[12:00] - [ ] Study #coding http://x.org", Theme())
    assert text.plain == "[12:00] ⬜ Study #coding http://x.org"


def test_render_line_checked_and_mood():
    assert render_line("[12:00] - [x] done", Theme()).plain == "[12:00] ✅ done"
    assert render_line("[12:00] Mood: 😊 Happy", Theme()).plain == "[12:00] 🎭 Mood: 😊 Happy"


def test_render_entry_multiline():
    text = render_entry("[12:00] a\n           b", Theme())
    assert text.plain == "[12:00] a\n           b"


def test_visible_window_fits_from_selection_back():
    assert visible_window([1, 1, 1, 1], selected=2, rows=2) == (1, 3)
    assert visible_window([1, 1, 1, 1], selected=None, rows=10) == (0, 4)
    assert visible_window([], selected=None, rows=5) == (0, 0)


def test_visible_window_keeps_tall_selection():
    assert visible_window([1, 1, 7], selected=2, rows=4) == (2, 3)


def test_visible_window_counts_wrapped_rows():
    entries = [render_entry("[09:00:00] " + "word " * 20, Theme()), render_entry("[09:01:00] short", Theme())]
    heights = [len(text.wrap(Console(), 20)) for text in entries]
    assert heights[0] > 1
    assert heights[1] == 1
    # Two physical lines, but the long one wraps past a four-row pane.
    assert visible_window(heights, selected=1, rows=4) == (1, 2)
