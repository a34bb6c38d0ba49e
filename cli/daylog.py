#!/usr/bin/env python3
"""daylog TUI: timestamped daily journal in the terminal, powered by Textual."""

from __future__ import annotations

import functools
import logging
import os
import subprocess
import sys
from pathlib import Path

from rich.color import Color as RichColor
from rich.color import ColorParseError
from rich.text import Text
from textual import events, on
from textual.app import App, ComposeResult
from textual.color import Color
from textual.containers import Horizontal
from textual.widgets import Header, Static, TextArea

from core import (
    Config,
    InteractionController,
    KeyEvent,
    LogStore,
    Mood,
    Popup,
    State,
    StorageError,
    TokenKind,
    config_path,
    get_timezone,
    load_config,
    now_local,
    resolve_log_dir,
    tokenize,
)
from core.config import Theme
from core.models import InputMode

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.25
ACTIVITY_BAR_MAX = 20


# ── Theme helpers ──────────────────────────────────────────────

_NAMED_COLORS = {
    "reset": "default",
    "default": "default",
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "magenta": "magenta",
    "cyan": "cyan",
    "gray": "grey70",
    "grey": "grey70",
    "darkgray": "grey42",
    "darkgrey": "grey42",
    "lightred": "bright_red",
    "lightgreen": "bright_green",
    "lightyellow": "bright_yellow",
    "lightblue": "bright_blue",
    "lightmagenta": "bright_magenta",
    "lightcyan": "bright_cyan",
    "white": "bright_white",
}


def parse_color(spec: str) -> str:
    """Theme color -> rich color name. 'Red' -> 'red', '50,50,50' -> 'rgb(50,50,50)'."""
    s = spec.strip().lower()
    if s in _NAMED_COLORS:
        return _NAMED_COLORS[s]
    parts = [p.strip() for p in s.split(",")]
    if len(parts) == 3 and all(p.isdigit() and int(p) <= 255 for p in parts):
        return f"rgb({parts[0]},{parts[1]},{parts[2]})"
    return "default"


def border_color(spec: str) -> Color | None:
    name = parse_color(spec)
    if name == "default":
        return None
    try:
        return Color.from_rich_color(RichColor.parse(name))
    except ColorParseError:
        return None


def render_line(line: str, theme: Theme) -> Text:
    """Styled rich Text for one physical log line."""
    out = Text()
    for tok in tokenize(line):
        if tok.kind is TokenKind.TIMESTAMP:
            out.append(tok.text, style=parse_color(theme.timestamp))
        elif tok.kind is TokenKind.TODO:
            if tok.checked:
                out.append("✅", style=parse_color(theme.todo_done))
            else:
                out.append("⬜", style=parse_color(theme.todo_wip))
        elif tok.kind is TokenKind.MOOD:
            out.append("🎭 Mood:", style=f"italic {parse_color(theme.mood)}")
        elif tok.kind is TokenKind.TAG:
            out.append(tok.text, style=f"bold {parse_color(theme.tag)}")
        elif tok.kind is TokenKind.URL:
            out.append(tok.text, style="underline blue")
        else:
            out.append(tok.text)
    return out


def render_entry(content: str, theme: Theme) -> Text:
    """An entry may span several physical lines (continuations)."""
    return Text("\n").join(render_line(line, theme) for line in content.split("\n"))


def visible_window(heights: list[int], selected: int | None, rows: int) -> tuple[int, int]:
    """[start, end) of the blocks to draw so the selected one stays in view.

    *heights* are rendered row counts after wrapping. The window ends at the
    selection and grows backwards while it fits; the selected block is always
    included even when it alone is taller than *rows*.
    """
    end = selected + 1 if selected is not None else len(heights)
    start = end
    used = 0
    while start > 0 and (start == end or used + heights[start - 1] <= rows):
        start -= 1
        used += heights[start]
    return start, end


def open_in_file_manager(path: Path) -> None:
    """Open *path* with the platform's file manager. Raises OSError on failure."""
    if sys.platform == "darwin":
        cmd = ["open", str(path)]
    elif sys.platform.startswith("win"):
        os.startfile(str(path))  # type: ignore[attr-defined]
        return
    else:
        cmd = ["xdg-open", str(path)]
    subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)


SIREN_ART = """\
         _______  TIME'S UP!  _______
        /       \\            /       \\
       |  (o)  |   🚨🚨🚨   |  (o)  |
        \\_______/            \\_______/

      Take a break! Stretch! Drink water!
      (Input blocked for 5 seconds)"""


# ── Editor ─────────────────────────────────────────────────────


class NoteInput(TextArea):
    """Text box for notes and search queries.

    Typing, cursor movement, undo and paste are TextArea's own. Keys bound
    to controller commands (save, submit, cancel) are handed to the app.
    """

    async def _on_key(self, event: events.Key) -> None:
        controller = self.app.controller
        key = KeyEvent(event.key, event.character)
        if controller.is_newline_key(key):
            event.stop()
            event.prevent_default()
            self.insert("\n", maintain_selection_offset=False)
        elif controller.claims_key(key):
            event.stop()
            event.prevent_default()
            controller.set_buffer(self.text)
            self.app.route_key(key)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
    layers: base overlay;
    align: center middle;
}

#main-layout {
    height: 1fr;
}

#log-pane {
    width: 3fr;
    height: 1fr;
    border: round $primary-background-darken-2;
    padding: 0 1;
}

#tasks-pane {
    width: 1fr;
    min-width: 24;
    height: 1fr;
    border: round $warning;
    padding: 0 1;
}

#input-box {
    height: auto;
    min-height: 3;
    max-height: 10;
    border: round $primary;
    padding: 0 1;
}

#help-bar {
    dock: bottom;
    height: 1;
    background: $primary-background;
    color: $text-muted;
    padding: 0 2;
}

#popup {
    layer: overlay;
    display: none;
    width: 60%;
    height: auto;
    max-height: 80%;
    border: round $accent;
    background: $panel;
    padding: 1 2;
}

#popup.alert {
    width: 80%;
    border: heavy red;
    background: black;
    color: red;
    text-style: bold;
}
"""


# ── Main app ───────────────────────────────────────────────────


class DaylogApp(App):
    """daylog: journal, todos, moods and a pomodoro timer."""

    TITLE = "daylog"
    CSS = CSS
    AUTO_FOCUS = None
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, controller: InteractionController) -> None:
        super().__init__()
        self.controller = controller
        self._shown_notification = None
        self._buffer_revision = controller.buffer_revision

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Static(id="log-pane"),
            Static(id="tasks-pane"),
            id="main-layout",
        )
        yield NoteInput(id="input-box", soft_wrap=True, show_line_numbers=False, highlight_cursor_line=False)
        yield Static(id="help-bar")
        yield Static(id="popup")

    def on_mount(self) -> None:
        self.query_one("#log-pane", Static).border_title = " Today "
        self.query_one("#tasks-pane", Static).border_title = " Today's Tasks "
        self.controller.start()
        self.set_interval(TICK_SECONDS, self._on_tick)
        self.refresh_view()

    # ── Input ──────────────────────────────────────────────────

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        # Built-in bindings (ctrl+q, ctrl+c) are dead while the alert is up.
        return self.controller.accepts_input

    def route_key(self, key: KeyEvent) -> None:
        # Dropped (not dispatched) while the pomodoro alert is up.
        if not self.controller.handle_key(key):
            return
        if self.controller.should_quit:
            self.exit()
            return
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        if self.query_one(NoteInput).has_focus:
            # Text keys bubbling up from the editor; its bindings move the cursor.
            return
        event.stop()
        event.prevent_default()
        self.route_key(KeyEvent(event.key, event.character))

    @on(TextArea.Changed, "#input-box")
    def _on_input_change(self, event: TextArea.Changed) -> None:
        self.controller.set_buffer(event.text_area.text)

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        if self.controller.handle_scroll(up=True):
            self.refresh_view()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        if self.controller.handle_scroll(up=False):
            self.refresh_view()

    def _on_tick(self) -> None:
        self.controller.tick()
        self.refresh_view()

    # ── Rendering ──────────────────────────────────────────────

    def refresh_view(self) -> None:
        c = self.controller
        self._render_log()
        self._render_tasks()
        self._render_input()
        self._render_help()
        self._render_popup()
        if c.notification is not None and c.notification is not self._shown_notification:
            self._shown_notification = c.notification
            self.notify(c.notification.message, severity=c.notification.severity)

    def _render_log(self) -> None:
        c = self.controller
        pane = self.query_one("#log-pane", Static)
        pane.border_title = " Search Results " if c.is_search_result else " Today "
        theme = c.config.theme
        height = max(pane.content_size.height, 1)

        blocks = []
        for i, entry in enumerate(c.entries):
            text = render_entry(entry.content, theme)
            if i == c.selected:
                text = Text("▶ ") + text
                text.stylize(f"bold on {parse_color(theme.text_highlight)}")
            else:
                text = Text("  ") + text
            blocks.append(text)

        # Rows each entry takes once soft-wrapped to the pane's content width.
        width = max(pane.content_size.width, 1)
        heights = [len(block.wrap(self.console, width)) for block in blocks]
        start, end = visible_window(heights, c.selected, height)
        pane.update(Text("\n").join(blocks[start:end]) if blocks else Text("(nothing logged yet)", style="dim"))

    def _render_tasks(self) -> None:
        c = self.controller
        pane = self.query_one("#tasks-pane", Static)
        color = border_color(c.config.theme.border_todo_header)
        if color is not None:
            pane.styles.border = ("round", color)
        tasks = c.today_tasks()
        pane.update(Text("\n".join(f"- [ ] {t}" for t in tasks)) if tasks else Text("All clear.", style="dim"))

    def _render_input(self) -> None:
        c = self.controller
        editor = self.query_one(NoteInput)
        theme = c.config.theme
        title, spec = {
            InputMode.SEARCH: (" Search ", theme.border_search),
            InputMode.EDITING: (" Input ", theme.border_editing),
            InputMode.NAVIGATE: (" Navigate ", theme.border_default),
        }[c.mode]
        editor.border_title = title
        color = border_color(spec)
        editor.styles.border = ("round", color if color is not None else "gray")
        editor.placeholder = c.placeholder
        if c.buffer_revision != self._buffer_revision:
            self._buffer_revision = c.buffer_revision
            editor.load_text(c.buffer)
        # Navigate mode, popups and the alert own the keyboard.
        editor.disabled = not c.is_typing
        if c.is_typing and not editor.has_focus:
            editor.focus()

    def _render_help(self) -> None:
        c = self.controller
        help_text = getattr(c.config.help, c.mode.value)
        remaining = c.pomodoro.remaining()
        if remaining is not None:
            mins, secs = divmod(int(remaining.total_seconds()), 60)
            help_text = f"🍅 {mins:02d}:{secs:02d}  {help_text}"
        self.query_one("#help-bar", Static).update(Text(help_text))

    def _render_popup(self) -> None:
        c = self.controller
        popup = self.query_one("#popup", Static)
        state = c.state
        popup.set_class(state is State.ALERT_BLOCKING, "alert")

        if state is State.ALERT_BLOCKING:
            popup.border_title = None
            popup.update(Text(SIREN_ART))
        elif c.popup is Popup.MOOD:
            popup.border_title = " How are you feeling today? "
            popup.update(self._list_text([m.label for m in Mood.all()], c.mood_index))
        elif c.popup is Popup.TODO:
            popup.border_title = (
                f" {len(c.pending_todos)} unfinished todo(s) from last time. Bring them over? (Y/n) "
            )
            popup.update(Text("\n".join(f"- [ ] {t}" for t in c.pending_todos)))
        elif c.popup is Popup.TAG:
            popup.border_title = " Tags "
            popup.update(self._list_text([f"{tag} ({n})" for tag, n in c.tags], c.tag_index))
        elif c.popup is Popup.ACTIVITY:
            popup.border_title = " 🌱 Activity Graph (Last 2 Weeks) "
            popup.update(self._activity_text())
        elif c.popup is Popup.POMODORO:
            popup.border_title = " 🍅 Set Timer (Minutes) "
            popup.update(Text(f"{c.pomodoro_input} _", style="yellow"))
        elif c.popup is Popup.PATH:
            popup.border_title = " Open Folder "
            log_dir, cfg_dir = c.path_choices()
            labels = [f"Log folder: {log_dir}", f"Config folder: {cfg_dir}"]
            popup.update(self._list_text(labels, c.path_index))

        popup.display = state is State.ALERT_BLOCKING or c.popup is not None

    @staticmethod
    def _list_text(items: list[str], selected: int) -> Text:
        out = Text()
        for i, item in enumerate(items):
            if i:
                out.append("\n")
            if i == selected:
                out.append(f">> {item}", style="yellow")
            else:
                out.append(f"   {item}")
        return out

    def _activity_text(self) -> Text:
        out = Text()
        for i, day in enumerate(self.controller.activity_days()):
            if i:
                out.append("\n")
            if day.count == 0:
                color = "grey42"
            elif day.count < 5:
                color = "green"
            else:
                color = "bright_green"
            out.append(f"{day.date} : {day.count:3} logs ")
            out.append("■" * min(day.count, ACTIVITY_BAR_MAX), style=color)
        return out


# ── Entry point ────────────────────────────────────────────────


def setup_logging(config: Config, log_dir: Path) -> None:
    """Log to a file; the terminal belongs to the UI."""
    log_file = Path(config.logging.file).expanduser() if config.logging.file else log_dir / ".daylog.log"
    level = getattr(logging, config.logging.level.upper(), logging.WARNING)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    cfg_path = config_path()
    config = load_config(cfg_path)
    log_dir = resolve_log_dir(config.data.log_path)
    now = functools.partial(now_local, get_timezone(config.timezone))

    store = LogStore(log_dir, now=now)
    try:
        store.ensure_dir()
    except StorageError as e:
        print(e)
        print("Set DAYLOG_DIR or data.log_path in config.yaml to a writable folder.")
        sys.exit(1)
    setup_logging(config, log_dir)
    logger.info("Starting with log directory %s", log_dir)

    controller = InteractionController(
        config,
        store,
        now=now,
        opener=open_in_file_manager,
        config_dir=cfg_path.parent,
    )
    app = DaylogApp(controller)
    controller.clipboard = app.copy_to_clipboard
    app.run()


if __name__ == "__main__":
    main()
