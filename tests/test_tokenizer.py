"""Tests for core/tokenizer.py: token precedence and pending-todo harvesting."""

from core.models import Token, TokenKind
from core.tokenizer import extract_pending_content, is_todo, tokenize


def test_tokenize_complex():
    tokens = tokenize("[12:00] - [ ] Study #coding http://x.org")
    assert tokens == [
        Token.timestamp("[12:00]"),
        Token.whitespace(" "),
        Token.todo(False),
        Token.whitespace(" "),
        Token.plain("Study"),
        Token.whitespace(" "),
        Token.tag("#coding"),
        Token.whitespace(" "),
        Token.url("http://x.org"),
    ]


def test_tokenize_simple():
    assert tokenize("Just plain text") == [
        Token.plain("Just"),
        Token.whitespace(" "),
        Token.plain("plain"),
        Token.whitespace(" "),
        Token.plain("text"),
    ]


def test_tokenize_mood():
    tokens = tokenize("Mood: Happy")
    assert tokens[0].kind is TokenKind.MOOD
    assert tokens[1] == Token.whitespace(" ")
    assert tokens[2] == Token.plain("Happy")


def test_tokenize_flexible_todo():
    tokens = tokenize("-[] Tight")
    assert tokens[:3] == [Token.todo(False), Token.whitespace(" "), Token.plain("Tight")]

    tokens = tokenize("- [   ] Wide")
    assert tokens[:3] == [Token.todo(False), Token.whitespace(" "), Token.plain("Wide")]

    tokens = tokenize("[12:00] -[x] Done")
    assert tokens == [
        Token.timestamp("[12:00]"),
        Token.whitespace(" "),
        Token.todo(True),
        Token.whitespace(" "),
        Token.plain("Done"),
    ]


def test_tokenize_malformed_timestamp_is_text():
    tokens = tokenize("[12:00 no close")
    assert tokens[0] == Token.plain("[12:00")
    assert all(t.kind is not TokenKind.TIMESTAMP for t in tokens)


def test_tokenize_no_timestamp_still_detects_semantics():
    tokens = tokenize("- [ ] buy milk #errands")
    assert tokens[0] == Token.todo(False)
    assert Token.tag("#errands") in tokens


def test_tokenize_lone_hash_is_text():
    assert tokenize("#") == [Token.plain("#")]


def test_tokenize_url_inside_word():
    tokens = tokenize("(https://example.com/a?b=1).")
    assert tokens == [
        Token.plain("("),
        Token.url("https://example.com/a?b=1"),
        Token.plain(")."),
    ]


def test_tokenize_double_space_keeps_separators():
    assert tokenize("a  b") == [
        Token.plain("a"),
        Token.whitespace(" "),
        Token.whitespace(" "),
        Token.plain("b"),
    ]


def test_tokenize_empty_line():
    assert tokenize("") == []


def test_extract_pending_content_unchecked():
    assert extract_pending_content("[09:00:00] - [ ]  Write report #work ") == "Write report #work"


def test_extract_pending_content_keeps_mood_literal():
    assert extract_pending_content("- [ ] log Mood: later") == "log Mood: later"


def test_extract_pending_content_checked_and_plain():
    assert extract_pending_content("[09:00:00] - [x] Write report") is None
    assert extract_pending_content("[09:00:00] Just a note") is None


def test_is_todo():
    assert is_todo("[09:00:00] -[] x") is True
    assert is_todo("[09:00:00] note") is False
