"""Day-file log store for daylog.

One UTF-8 file per calendar day, ``<YYYY-MM-DD>.md``, inside a log
directory. Each primary line is ``[HH:MM:SS] <content>``; lines starting
with two spaces or a tab continue the previous entry.

Every filesystem failure surfaces as StorageError; the store itself never
swallows I/O errors.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from core.checkbox import toggle_checkbox
from core.fileio import append_text, read_lines, write_text_atomic
from core.models import CARRYOVER_MARKER, LogEntry
from core.tokenizer import extract_pending_content
from core.workspace import day_files, day_path, now_local, today_str

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A log directory or day file could not be read or written."""


def is_continuation(line: str) -> bool:
    return line.startswith("  ") or line.startswith("\t")


def parse_log_content(lines: list[str], file_path: str) -> list[LogEntry]:
    """Fold physical lines into entries.

    Continuation lines join the previous entry's content with a newline; a
    continuation with nothing before it stands as its own entry. Lines that
    hold the carryover marker are skipped.
    """
    entries: list[LogEntry] = []
    for i, line in enumerate(lines):
        if CARRYOVER_MARKER in line:
            continue
        if is_continuation(line) and entries:
            entries[-1].content += "\n" + line
            continue
        entries.append(LogEntry(content=line, file_path=file_path, line_number=i, raw_line=line))
    return entries


class LogStore:
    """Append-only, semi-structured log over a directory of day files."""

    def __init__(self, log_dir: Path, now: Callable[[], datetime] | None = None) -> None:
        self.log_dir = Path(log_dir)
        self._now = now or now_local

    # ── Paths ──────────────────────────────────────────────────

    def today(self) -> str:
        return today_str(self._now())

    def today_path(self) -> Path:
        return day_path(self.log_dir, self.today())

    def ensure_dir(self) -> None:
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create log directory {self.log_dir}: {e}") from e

    def _day_files(self) -> list[Path]:
        self.ensure_dir()
        try:
            return day_files(self.log_dir)
        except OSError as e:
            raise StorageError(f"Cannot list {self.log_dir}: {e}") from e

    def _read(self, path: Path) -> list[str]:
        try:
            return read_lines(path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    # ── Writing ────────────────────────────────────────────────

    def append(self, content: str) -> None:
        """Append ``[HH:MM:SS] content`` to today's file."""
        self.ensure_dir()
        now = self._now()
        path = day_path(self.log_dir, today_str(now))
        line = f"[{now.strftime('%H:%M:%S')}] {content}\n"
        try:
            append_text(path, line)
        except OSError as e:
            raise StorageError(f"Cannot append to {path}: {e}") from e

    def toggle_todo(self, entry: LogEntry) -> bool:
        """Flip the checkbox on the physical line *entry* was read from.

        Returns False without writing when the address is stale: the line
        number is out of range, or the line no longer holds the text it had
        when the entry was read.
        """
        path = Path(entry.file_path)
        lines = self._read(path)
        if not 0 <= entry.line_number < len(lines):
            logger.debug("Stale todo address %s:%d", path, entry.line_number)
            return False
        current = lines[entry.line_number]
        if entry.raw_line and current != entry.raw_line:
            logger.debug("Line %s:%d changed since read", path, entry.line_number)
            return False
        toggled = toggle_checkbox(current)
        if toggled == current:
            return False
        lines[entry.line_number] = toggled
        try:
            write_text_atomic(path, "\n".join(lines) + "\n")
        except OSError as e:
            raise StorageError(f"Cannot rewrite {path}: {e}") from e
        return True

    def mark_carryover_done(self) -> None:
        self.append(CARRYOVER_MARKER)

    # ── Reading ────────────────────────────────────────────────

    def read_today(self) -> list[LogEntry]:
        self.ensure_dir()
        path = self.today_path()
        return parse_log_content(self._read(path), str(path))

    def search(self, query: str) -> list[LogEntry]:
        """Entries in any day file whose content contains *query* (case-sensitive).

        Each result's content is prefixed with ``[<date>] ``; results are in
        file-name (date) order, then file order.
        """
        results = []
        for path in self._day_files():
            for entry in parse_log_content(self._read(path), str(path)):
                if query in entry.content:
                    entry.content = f"[{path.stem}] {entry.content}"
                    results.append(entry)
        return results

    def get_all_tags(self) -> list[tuple[str, int]]:
        """(tag, count) over all day files, most used first."""
        counts: Counter[str] = Counter()
        for path in self._day_files():
            for line in self._read(path):
                counts.update(w for w in line.split() if w.startswith("#") and len(w) > 1)
        return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)

    def get_activity_stats(self) -> dict[str, int]:
        """Non-empty, non-marker line count per day, keyed by YYYY-MM-DD."""
        stats = {}
        for path in self._day_files():
            stats[path.stem] = sum(
                1 for line in self._read(path)
                if line.strip() and CARRYOVER_MARKER not in line
            )
        return stats

    def is_carryover_done(self) -> bool:
        path = self.today_path()
        if not path.exists():
            return False
        return any(CARRYOVER_MARKER in line for line in self._read(path))

    def get_last_pending_todos(self) -> list[str]:
        """Unfinished todos from the latest day file before today."""
        today = self.today()
        previous = [p for p in self._day_files() if p.stem != today]
        if not previous:
            return []
        todos = []
        for line in self._read(previous[-1]):
            content = extract_pending_content(line)
            if content is not None:
                todos.append(content)
        return todos
