"""File I/O utilities for daylog."""

from __future__ import annotations

import fcntl
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

import yaml


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_lines(path: Path) -> list[str]:
    """Read a text file as physical lines, empty list if missing.

    Only a line feed ends a line (a trailing carriage return is dropped), so
    indexes match physical line numbers for later rewrites.
    """
    if not path.exists():
        return []
    with path.open(encoding="utf-8", newline="") as f:
        text = f.read()
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file, returning empty dict if missing or empty."""
    text = read_text(path)
    if not text.strip():
        return {}
    result = yaml.safe_load(text)
    return result if isinstance(result, dict) else {}


def append_text(path: Path, content: str) -> None:
    """Append to a text file, creating it (and its directory) if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(content)


def write_text_atomic(path: Path, content: str) -> None:
    """Atomic write with file locking: temp file + flock + rename.

    The temp file ends in ``.tmp`` so a directory scan for day files never
    picks it up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            if path.exists():
                # mkstemp creates 0600; keep the permissions of the file being replaced.
                os.fchmod(f.fileno(), stat.S_IMODE(path.stat().st_mode))
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.rename(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
