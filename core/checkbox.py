"""Todo checkbox detection, toggling and formatting for daylog."""

from __future__ import annotations

import re

# Hyphen, optional whitespace, then "[ ]"-like (whitespace only) or "[x]"/"[X]".
CHECKBOX_RE = re.compile(r"-\s*\[(\s*|[xX])\]")

UNCHECKED = "- [ ]"
CHECKED = "- [x]"


def find_checkbox(text: str) -> re.Match[str] | None:
    """Return the leftmost checkbox match in *text*, or None.

    Recognizes:
        - [ ] wide, unchecked
        - [x] / - [X] wide, checked
        -[] / -[x] tight variants
        - [   ] variable inner whitespace
    """
    return CHECKBOX_RE.search(text)


def is_checked(match: re.Match[str]) -> bool:
    return match.group(1).lower() == "x"


def toggle_checkbox(text: str) -> str:
    """Flip the first checkbox in *text*, normalizing it to the wide form.

    Everything outside the matched checkbox is left byte-identical. A line
    without a checkbox is returned unchanged.
    """
    m = find_checkbox(text)
    if not m:
        return text
    replacement = UNCHECKED if is_checked(m) else CHECKED
    return text[: m.start()] + replacement + text[m.end():]


def format_todo(content: str, checked: bool = False) -> str:
    """'Write report', False -> '- [ ] Write report'"""
    return f"{CHECKED if checked else UNCHECKED} {content}"
