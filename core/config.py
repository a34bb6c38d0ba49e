"""YAML configuration for daylog: key bindings, theme, labels, data path.

All sections use from_dict/to_dict. Unknown keys are ignored; missing keys
use defaults. A missing or unreadable config.yaml yields the defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from core.fileio import read_yaml
from core.models import KeyEvent
from core.workspace import DEFAULT_LOG_PATH

logger = logging.getLogger(__name__)


# ── Key matching ──────────────────────────────────────────────

_MODIFIER_ALIASES = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "alt": "alt",
    "opt": "alt",
    "option": "alt",
    "shift": "shift",
}

_KEY_ALIASES = {
    "esc": "escape",
    "return": "enter",
}


def _parse_binding(binding: str) -> tuple[frozenset[str], str]:
    """'Shift+Enter' -> ({'shift'}, 'enter'); '?' -> (set(), '?')"""
    binding = binding.strip().lower()
    if binding == "+":
        return frozenset(), "+"
    modifiers = set()
    code = ""
    for part in binding.split("+"):
        if part in _MODIFIER_ALIASES:
            modifiers.add(_MODIFIER_ALIASES[part])
        elif part:
            code = _KEY_ALIASES.get(part, part)
    return frozenset(modifiers), code


def _matches(event: KeyEvent, binding: str) -> bool:
    required, code = _parse_binding(binding)
    if not code:
        return False
    event_code = _KEY_ALIASES.get(event.code, event.code)
    if event_code != code:
        # Single characters compare against the typed character, ignoring case.
        if len(code) != 1 or not event.character or event.character.lower() != code:
            return False
    return required <= event.modifiers


def key_matches(event: KeyEvent, bindings: list[str]) -> bool:
    """True if *event* matches any of *bindings*.

    The key must match and every modifier the binding names must be held;
    extra modifiers are allowed, so check more specific bindings first.
    """
    return any(_matches(event, b) for b in bindings)


# ── Sections ──────────────────────────────────────────────────


def _section_from_dict(cls, d: Any):
    """Build a flat dataclass section, keeping defaults for missing keys."""
    if not isinstance(d, dict):
        return cls()
    defaults = cls()
    kwargs = {}
    for f in fields(cls):
        value = d.get(f.name)
        if value is None:
            continue
        if isinstance(getattr(defaults, f.name), list):
            # A single binding may be written as a bare string.
            value = value if isinstance(value, list) else [value]
            kwargs[f.name] = [str(v) for v in value]
        else:
            kwargs[f.name] = str(value)
    return cls(**kwargs)


def _section_to_dict(section) -> dict[str, Any]:
    return {f.name: getattr(section, f.name) for f in fields(section)}


@dataclass
class DataConfig:
    log_path: str = DEFAULT_LOG_PATH


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = ""  # empty: <log_dir>/.daylog.log


@dataclass
class Placeholders:
    navigate: str = "Press a key to use a command..."
    editing: str = "Type a note here..."
    search: str = "Type a word to search for..."


@dataclass
class HelpMessages:
    navigate: str = " [i] Edit  [t] Tag  [?] Search  [Enter] Toggle  [p] Pomodoro  [g] Graph  [l] Path  [q] Quit "
    editing: str = " [Esc] Navigate Mode  [Enter] Save Memo  [Shift+Enter] New Line "
    search: str = " [Esc] Reset Search  [Enter] Filter "


@dataclass
class NavigateBindings:
    quit: list[str] = field(default_factory=lambda: ["q"])
    tags: list[str] = field(default_factory=lambda: ["t"])
    insert: list[str] = field(default_factory=lambda: ["i"])
    search: list[str] = field(default_factory=lambda: ["?"])
    pomodoro: list[str] = field(default_factory=lambda: ["p"])
    graph: list[str] = field(default_factory=lambda: ["g"])
    toggle_todo: list[str] = field(default_factory=lambda: ["enter"])
    path: list[str] = field(default_factory=lambda: ["l"])
    next_todo: list[str] = field(default_factory=lambda: ["]"])
    prev_todo: list[str] = field(default_factory=lambda: ["["])
    copy: list[str] = field(default_factory=lambda: ["y"])


@dataclass
class EditingBindings:
    save: list[str] = field(default_factory=lambda: ["enter"])
    newline: list[str] = field(default_factory=lambda: ["shift+enter"])
    cancel: list[str] = field(default_factory=lambda: ["esc"])


@dataclass
class SearchBindings:
    submit: list[str] = field(default_factory=lambda: ["enter"])
    cancel: list[str] = field(default_factory=lambda: ["esc"])


@dataclass
class PopupBindings:
    confirm: list[str] = field(default_factory=lambda: ["enter", "y"])
    cancel: list[str] = field(default_factory=lambda: ["esc", "n"])
    up: list[str] = field(default_factory=lambda: ["up"])
    down: list[str] = field(default_factory=lambda: ["down"])


@dataclass
class KeyBindings:
    navigate: NavigateBindings = field(default_factory=NavigateBindings)
    editing: EditingBindings = field(default_factory=EditingBindings)
    search: SearchBindings = field(default_factory=SearchBindings)
    popup: PopupBindings = field(default_factory=PopupBindings)

    @classmethod
    def from_dict(cls, d: Any) -> KeyBindings:
        if not isinstance(d, dict):
            return cls()
        return cls(
            navigate=_section_from_dict(NavigateBindings, d.get("navigate")),
            editing=_section_from_dict(EditingBindings, d.get("editing")),
            search=_section_from_dict(SearchBindings, d.get("search")),
            popup=_section_from_dict(PopupBindings, d.get("popup")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "navigate": _section_to_dict(self.navigate),
            "editing": _section_to_dict(self.editing),
            "search": _section_to_dict(self.search),
            "popup": _section_to_dict(self.popup),
        }


@dataclass
class Theme:
    border_default: str = "Reset"
    border_editing: str = "Green"
    border_search: str = "Cyan"
    border_todo_header: str = "Yellow"
    text_highlight: str = "50,50,50"  # RGB background
    todo_done: str = "Green"
    todo_wip: str = "Red"
    tag: str = "Yellow"
    mood: str = "Magenta"
    timestamp: str = "Blue"


@dataclass
class Config:
    data: DataConfig = field(default_factory=DataConfig)
    placeholders: Placeholders = field(default_factory=Placeholders)
    help: HelpMessages = field(default_factory=HelpMessages)
    keybindings: KeyBindings = field(default_factory=KeyBindings)
    theme: Theme = field(default_factory=Theme)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    timezone: str | None = None
    source: Path | None = None  # where it was loaded from, if anywhere

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        if not d or not isinstance(d, dict):
            return cls()
        tz = d.get("timezone")
        return cls(
            data=_section_from_dict(DataConfig, d.get("data")),
            placeholders=_section_from_dict(Placeholders, d.get("placeholders")),
            help=_section_from_dict(HelpMessages, d.get("help")),
            keybindings=KeyBindings.from_dict(d.get("keybindings")),
            theme=_section_from_dict(Theme, d.get("theme")),
            logging=_section_from_dict(LoggingConfig, d.get("logging")),
            timezone=str(tz) if tz else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "data": _section_to_dict(self.data),
            "placeholders": _section_to_dict(self.placeholders),
            "help": _section_to_dict(self.help),
            "keybindings": self.keybindings.to_dict(),
            "theme": _section_to_dict(self.theme),
            "logging": _section_to_dict(self.logging),
        }
        if self.timezone:
            d["timezone"] = self.timezone
        return d


def load_config(path: Path) -> Config:
    """Load config.yaml at *path*; defaults when missing or unparseable."""
    if not path.exists():
        return Config()
    try:
        data = read_yaml(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Failed to read %s, using defaults: %s", path, e)
        return Config()
    config = Config.from_dict(data)
    config.source = path
    return config
