"""Tests for core/checkbox.py."""

from core.checkbox import find_checkbox, format_todo, is_checked, toggle_checkbox


def test_find_checkbox_variants():
    for text, checked in [
        ("- [ ] wide", False),
        ("- [x] done", True),
        ("- [X] DONE", True),
        ("-[] tight", False),
        ("-[x] tight done", True),
        ("- [   ] spacious", False),
    ]:
        m = find_checkbox(text)
        assert m is not None, text
        assert is_checked(m) is checked, text


def test_find_checkbox_none():
    assert find_checkbox("plain text") is None
    assert find_checkbox("- [y] not a checkbox") is None
    assert find_checkbox("[12:00] [x] no hyphen") is None


def test_toggle_checkbox_full_line():
    assert toggle_checkbox("[00:53:21] - [ ] Call the bank") == "[00:53:21] - [x] Call the bank"
    assert toggle_checkbox("[00:53:21] - [x] Done") == "[00:53:21] - [ ] Done"
    assert toggle_checkbox("[00:53:21] - [X] Done") == "[00:53:21] - [ ] Done"


def test_toggle_checkbox_normalizes_tight():
    assert toggle_checkbox("[12:34] -[] Tight") == "[12:34] - [x] Tight"
    assert toggle_checkbox("[12:34] -  [    ] Loose") == "[12:34] - [x] Loose"


def test_toggle_checkbox_round_trip():
    for line in ["- [ ] a", "- [x] b", "[09:00:00] - [ ] with   gaps  "]:
        assert toggle_checkbox(toggle_checkbox(line)) == line


def test_toggle_checkbox_preserves_surrounding_whitespace():
    line = "[09:00:00]   - [ ]   spaced\tout  "
    assert toggle_checkbox(line) == "[09:00:00]   - [x]   spaced\tout  "


def test_toggle_checkbox_only_first():
    assert toggle_checkbox("- [ ] one - [ ] two") == "- [x] one - [ ] two"


def test_toggle_checkbox_no_checkbox():
    assert toggle_checkbox("[09:00:00] just a note") == "[09:00:00] just a note"


def test_format_todo():
    assert format_todo("Write report") == "- [ ] Write report"
    assert format_todo("Write report", checked=True) == "- [x] Write report"
