"""daylog core library: log store, tokenizer and interaction state machine.

Public API re-exports for convenient imports:
    from core import LogStore, tokenize, InteractionController, ...
"""

# Workspace & paths
from core.workspace import (
    config_path,
    resolve_log_dir,
    get_timezone,
    now_local,
    today_str,
    day_path,
    day_files,
)

# File I/O
from core.fileio import (
    read_text,
    read_lines,
    read_yaml,
    append_text,
    write_text_atomic,
)

# Checkbox parsing
from core.checkbox import (
    find_checkbox,
    toggle_checkbox,
    format_todo,
)

# Tokenizer
from core.tokenizer import (
    tokenize,
    extract_pending_content,
    is_todo,
)

# Configuration
from core.config import (
    Config,
    load_config,
    key_matches,
)

# Storage
from core.storage import (
    LogStore,
    StorageError,
    parse_log_content,
)

# Engines
from core.carryover import CarryoverPolicy
from core.pomodoro import PomodoroTimer, parse_minutes
from core.controller import InteractionController

# Models
from core.models import (
    CARRYOVER_MARKER,
    LogEntry,
    Mood,
    Token,
    TokenKind,
    InputMode,
    Popup,
    State,
    KeyEvent,
    Notification,
    PomodoroPhase,
    PomodoroState,
    ActivityDay,
)
