"""Line tokenizer: recover semantic tokens from a raw log line.

Precedence, in order: timestamp, leading whitespace, todo checkbox,
whitespace, then space-separated words (tag, mood marker, URL, text).
The tokenizer is pure and total; it never raises.
"""

from __future__ import annotations

import re

from core.checkbox import find_checkbox, is_checked
from core.models import MOOD_PREFIX, Token, TokenKind

URL_RE = re.compile(r"https?://[-a-zA-Z0-9+&@#/%?=~_|!:,.;]*[-a-zA-Z0-9+&@#/%=~_|]")


def _split_leading_ws(text: str) -> tuple[str, str]:
    rest = text.lstrip()
    return text[: len(text) - len(rest)], rest


def _word_tokens(word: str) -> list[Token]:
    if word.startswith("#") and len(word) > 1:
        return [Token.tag(word)]
    if word == MOOD_PREFIX:
        return [Token.mood()]
    m = URL_RE.search(word)
    if m:
        out = []
        if m.start() > 0:
            out.append(Token.plain(word[: m.start()]))
        out.append(Token.url(m.group(0)))
        if m.end() < len(word):
            out.append(Token.plain(word[m.end():]))
        return out
    return [Token.plain(word)]


def tokenize(line: str) -> list[Token]:
    """Split *line* into an ordered list of tokens.

    '[12:00] - [ ] Study #coding' ->
        Timestamp('[12:00]'), Whitespace(' '), Todo(False), Whitespace(' '),
        Text('Study'), Whitespace(' '), Tag('#coding')
    """
    tokens: list[Token] = []
    rest = line

    # A "[" without a closing "]" is ordinary text.
    if rest.startswith("["):
        end = rest.find("]")
        if end != -1:
            tokens.append(Token.timestamp(rest[: end + 1]))
            rest = rest[end + 1:]

    ws, rest = _split_leading_ws(rest)
    if ws:
        tokens.append(Token.whitespace(ws))

    m = find_checkbox(rest)
    if m:
        tokens.append(Token.todo(is_checked(m)))
        rest = rest[m.end():]

    ws, rest = _split_leading_ws(rest)
    if ws:
        tokens.append(Token.whitespace(ws))

    for i, word in enumerate(rest.split(" ")):
        if i > 0:
            tokens.append(Token.whitespace(" "))
        if not word:
            continue
        tokens.extend(_word_tokens(word))

    return tokens


def extract_pending_content(line: str) -> str | None:
    """Return the trimmed text after an unchecked todo, else None.

    Used to harvest unfinished todos for carryover and the today's-tasks
    sidebar. Checked todos and non-todo lines yield None.
    """
    seen_todo = False
    checked = False
    parts: list[str] = []
    for tok in tokenize(line):
        if tok.kind is TokenKind.TODO:
            seen_todo = True
            checked = tok.checked
        elif seen_todo:
            parts.append(tok.text)
    if not seen_todo or checked:
        return None
    return "".join(parts).strip()


def is_todo(line: str) -> bool:
    return any(t.kind is TokenKind.TODO for t in tokenize(line))
