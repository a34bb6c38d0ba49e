"""Log directory, config path, timezone and date helpers for daylog."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DAY_SUFFIX = ".md"
DEFAULT_LOG_PATH = "logs"


def config_path() -> Path:
    """Path of config.yaml: $DAYLOG_CONFIG, else ./config.yaml."""
    return Path(
        os.environ.get("DAYLOG_CONFIG", str(Path.cwd() / "config.yaml"))
    ).expanduser().resolve()


def resolve_log_dir(configured: str | None = None) -> Path:
    """Directory holding the day files.

    $DAYLOG_DIR wins over the configured ``data.log_path``; relative paths
    resolve against the current directory.
    """
    raw = os.environ.get("DAYLOG_DIR") or configured or DEFAULT_LOG_PATH
    return Path(raw).expanduser().resolve()


def get_timezone(name: str | None) -> ZoneInfo | None:
    """ZoneInfo for *name*, or None (system local time) if unset or unknown."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using local time", name)
        return None


def now_local(tz: ZoneInfo | None = None) -> datetime:
    """Current datetime in *tz*, or naive local time when tz is None."""
    return datetime.now(tz) if tz is not None else datetime.now()


def today_str(now: datetime | None = None) -> str:
    """YYYY-MM-DD for *now* (default: current local time)."""
    return (now or now_local()).date().isoformat()


# ── Path helpers ──────────────────────────────────────────────

def day_path(log_dir: Path, day: str) -> Path:
    return log_dir / f"{day}{DAY_SUFFIX}"


def day_files(log_dir: Path) -> list[Path]:
    """All day files in *log_dir*, sorted by name (i.e. by date)."""
    return sorted(p for p in log_dir.iterdir() if p.suffix == DAY_SUFFIX and p.is_file())
