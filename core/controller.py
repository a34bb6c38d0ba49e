"""Mode/popup state machine that routes key events for daylog.

The controller holds one base mode (navigate, editing, search) and at most
one open popup. A popup owns all input until it is dismissed, and while
the pomodoro alert is active every event is dropped. The presentation
layer only reads state from here; it never mutates it directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

from core.carryover import CarryoverPolicy
from core.config import Config, key_matches
from core.models import (
    MOOD_PREFIX,
    POPUP_PRIORITY,
    ActivityDay,
    InputMode,
    KeyEvent,
    LogEntry,
    Mood,
    Notification,
    Popup,
    PomodoroPhase,
    State,
)
from core.pomodoro import DEFAULT_MINUTES, PomodoroTimer, parse_minutes
from core.storage import LogStore, StorageError
from core.tokenizer import extract_pending_content
from core.workspace import now_local

logger = logging.getLogger(__name__)

# Continuation lines line up under the text after "[HH:MM:SS] ".
CONTINUATION_INDENT = " " * 11
NOTIFICATION_SECONDS = 5


class InteractionController:
    def __init__(
        self,
        config: Config,
        store: LogStore,
        now: Callable[[], datetime] | None = None,
        opener: Callable[[Path], None] | None = None,
        clipboard: Callable[[str], None] | None = None,
        config_dir: Path | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.carryover = CarryoverPolicy(store)
        self._now = now or now_local
        self.pomodoro = PomodoroTimer(now=self._now)
        self.opener = opener
        self.clipboard = clipboard
        self.config_dir = config_dir or (config.source.parent if config.source else Path.cwd())

        self.mode = InputMode.EDITING
        self.popup: Popup | None = None
        self.buffer = ""
        self.buffer_revision = 0  # bumped whenever the controller rewrites the buffer
        self.placeholder = config.placeholders.editing

        self.entries: list[LogEntry] = []
        self.selected: int | None = None
        self.is_search_result = False

        self.mood_index = 0
        self.pending_todos: list[str] = []
        self.tags: list[tuple[str, int]] = []
        self.tag_index = 0
        self.activity: dict[str, int] = {}
        self.pomodoro_input = ""
        self.path_index = 0

        self.notification: Notification | None = None
        self.should_quit = False

    # ── Read-only views ────────────────────────────────────────

    @property
    def state(self) -> State:
        return State.of(self.mode, self.popup, self.pomodoro.is_alert_active)

    @property
    def accepts_input(self) -> bool:
        return not self.pomodoro.is_alert_active

    @property
    def is_typing(self) -> bool:
        """True while a text editor should own the keyboard."""
        return self.state in (State.EDITING, State.SEARCH)

    def path_choices(self) -> list[Path]:
        return [self.store.log_dir, self.config_dir]

    def activity_days(self, days: int = 14) -> list[ActivityDay]:
        """Counts for the last *days* days, today first."""
        today = self._now().date()
        out = []
        for i in range(days):
            day = (today - timedelta(days=i)).isoformat()
            out.append(ActivityDay(day, self.activity.get(day, 0)))
        return out

    def today_tasks(self) -> list[str]:
        """Pending content of every unfinished todo among the loaded entries."""
        tasks = []
        for entry in self.entries:
            content = extract_pending_content(entry.content)
            if content is not None:
                tasks.append(content)
        return tasks

    # ── Startup ────────────────────────────────────────────────

    def start(self) -> None:
        """Load today and ask for mood, or else settle the daily carryover."""
        self.reload_today()
        if any(f"{MOOD_PREFIX} " in e.content for e in self.entries):
            self._check_carryover()
        else:
            self.mood_index = 0
            self._open_popup(Popup.MOOD)

    def _check_carryover(self) -> None:
        try:
            todos = self.carryover.pending()
        except StorageError as e:
            self._report(e)
            todos = []
        if todos:
            self.pending_todos = todos
            self._open_popup(Popup.TODO)
        else:
            self.transition_to(InputMode.EDITING)

    # ── Ticks and notifications ────────────────────────────────

    def tick(self) -> PomodoroPhase:
        was_running = self.pomodoro.is_running
        phase = self.pomodoro.tick()
        if was_running and phase is not PomodoroPhase.RUNNING:
            self.notify("Time's up! Take a break.", severity="warning")
        if self.notification is not None and self._now() >= self.notification.expires_at:
            self.notification = None
        return phase

    def notify(self, message: str, severity: str = "information") -> None:
        expires = self._now() + timedelta(seconds=NOTIFICATION_SECONDS)
        self.notification = Notification(message, expires, severity)

    def _report(self, error: Exception) -> None:
        logger.warning("%s", error)
        self.notify(str(error), severity="error")

    # ── Entries and selection ──────────────────────────────────

    def reload_today(self) -> None:
        try:
            entries = self.store.read_today()
        except StorageError as e:
            self._report(e)
            return
        self.entries = entries
        self.is_search_result = False
        self.selected = len(entries) - 1 if entries else None

    def show_results(self, results: list[LogEntry]) -> None:
        self.entries = results
        self.is_search_result = True
        self.selected = 0 if results else None

    def scroll_up(self) -> None:
        if not self.entries:
            return
        self.selected = max((self.selected or 0) - 1, 0)

    def scroll_down(self) -> None:
        if not self.entries:
            return
        if self.selected is None:
            self.selected = 0
        else:
            self.selected = min(self.selected + 1, len(self.entries) - 1)

    def handle_scroll(self, up: bool) -> bool:
        """Mouse wheel. Returns False when input is blocked."""
        if not self.accepts_input:
            return False
        if up:
            self.scroll_up()
        else:
            self.scroll_down()
        return True

    def _selected_entry(self) -> LogEntry | None:
        if self.selected is None or not 0 <= self.selected < len(self.entries):
            return None
        return self.entries[self.selected]

    def _jump_todo(self, step: int) -> None:
        if self.selected is None:
            return
        i = self.selected + step
        while 0 <= i < len(self.entries):
            if extract_pending_content(self.entries[i].content) is not None:
                self.selected = i
                return
            i += step

    # ── Modes and popups ───────────────────────────────────────

    def transition_to(self, mode: InputMode) -> None:
        placeholders = self.config.placeholders
        if mode is InputMode.NAVIGATE:
            if self.mode is InputMode.SEARCH:
                self._reset_buffer()
            self.placeholder = placeholders.navigate
        elif mode is InputMode.EDITING:
            self._reset_buffer()
            self.placeholder = placeholders.editing
            if self.is_search_result:
                self.reload_today()
        else:
            self._reset_buffer()
            self.placeholder = placeholders.search
        self.mode = mode

    def _reset_buffer(self) -> None:
        self.buffer = ""
        self.buffer_revision += 1

    # ── Text buffer ────────────────────────────────────────────

    def set_buffer(self, text: str) -> None:
        """Mirror the host editor's text. Cursor movement and paste stay in the editor."""
        if self.is_typing:
            self.buffer = text

    def is_newline_key(self, event: KeyEvent) -> bool:
        return self.mode is InputMode.EDITING and key_matches(event, self.config.keybindings.editing.newline)

    def claims_key(self, event: KeyEvent) -> bool:
        """True if *event* is a command for the controller rather than text for the editor."""
        if not self.is_typing or self.is_newline_key(event):
            return False
        if self.mode is InputMode.EDITING:
            keys = self.config.keybindings.editing
            return key_matches(event, keys.save) or key_matches(event, keys.cancel)
        keys = self.config.keybindings.search
        return key_matches(event, keys.submit) or key_matches(event, keys.cancel)

    def _open_popup(self, popup: Popup) -> None:
        if self.popup is not None and POPUP_PRIORITY.index(self.popup) < POPUP_PRIORITY.index(popup):
            logger.debug("Ignoring %s popup while %s is open", popup.value, self.popup.value)
            return
        self.popup = popup

    def _close_popup(self) -> None:
        self.popup = None

    # ── Dispatch ───────────────────────────────────────────────

    def handle_key(self, event: KeyEvent) -> bool:
        """Route one key press. Returns False if it was dropped (alert active)."""
        if not self.accepts_input:
            return False
        if self.popup is not None:
            self._popup_handlers[self.popup](self, event)
        elif self.mode is InputMode.NAVIGATE:
            self._handle_navigate(event)
        elif self.mode is InputMode.EDITING:
            self._handle_editing(event)
        else:
            self._handle_search(event)
        return True

    # ── Popup handlers ─────────────────────────────────────────

    def _handle_mood(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.popup
        moods = Mood.all()
        if key_matches(event, keys.up):
            self.mood_index = (self.mood_index - 1) % len(moods)
        elif key_matches(event, keys.down):
            self.mood_index = (self.mood_index + 1) % len(moods)
        elif key_matches(event, keys.confirm):
            try:
                self.store.append(moods[self.mood_index].entry_content())
            except StorageError as e:
                self._report(e)
            self.reload_today()
            self._close_popup()
            self._check_carryover()
        elif key_matches(event, keys.cancel):
            self._close_popup()
            self._check_carryover()

    def _handle_todo(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.popup
        if key_matches(event, keys.confirm):
            try:
                self.carryover.accept(self.pending_todos)
            except StorageError as e:
                self._report(e)
            self.reload_today()
        elif key_matches(event, keys.cancel):
            try:
                self.carryover.decline()
            except StorageError as e:
                self._report(e)
        else:
            return
        self.pending_todos = []
        self._close_popup()
        self.transition_to(InputMode.EDITING)

    def _handle_tag(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.popup
        if key_matches(event, keys.up):
            self.tag_index = len(self.tags) - 1 if self.tag_index == 0 else self.tag_index - 1
            self.tag_index = max(self.tag_index, 0)
        elif key_matches(event, keys.down):
            self.tag_index = min(self.tag_index + 1, max(len(self.tags) - 1, 0))
        elif key_matches(event, keys.confirm):
            if self.tag_index < len(self.tags):
                self._run_search(self.tags[self.tag_index][0])
            self._close_popup()
            self.transition_to(InputMode.NAVIGATE)
        elif key_matches(event, keys.cancel):
            self._close_popup()
            self.transition_to(InputMode.NAVIGATE)

    def _handle_activity(self, event: KeyEvent) -> None:
        self._close_popup()

    def _handle_pomodoro(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.popup
        if key_matches(event, keys.confirm):
            minutes = parse_minutes(self.pomodoro_input)
            self.pomodoro.start(minutes)
            self.notify(f"Pomodoro started: {minutes} min")
            self._close_popup()
            self.pomodoro_input = ""
        elif key_matches(event, keys.cancel):
            self._close_popup()
            self.pomodoro_input = ""
        elif event.code == "backspace":
            self.pomodoro_input = self.pomodoro_input[:-1]
        elif event.is_printable and event.character.isascii() and event.character.isdigit():
            self.pomodoro_input += event.character

    def _handle_path(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.popup
        choices = self.path_choices()
        if key_matches(event, keys.confirm):
            path = choices[self.path_index]
            if self.opener is not None:
                try:
                    self.opener(path)
                except OSError as e:
                    self._report(e)
            self._close_popup()
            self.transition_to(InputMode.NAVIGATE)
        elif key_matches(event, keys.cancel):
            self._close_popup()
            self.transition_to(InputMode.NAVIGATE)
        elif key_matches(event, keys.up):
            self.path_index = (self.path_index - 1) % len(choices)
        elif key_matches(event, keys.down):
            self.path_index = (self.path_index + 1) % len(choices)

    _popup_handlers = {
        Popup.MOOD: _handle_mood,
        Popup.TODO: _handle_todo,
        Popup.TAG: _handle_tag,
        Popup.ACTIVITY: _handle_activity,
        Popup.POMODORO: _handle_pomodoro,
        Popup.PATH: _handle_path,
    }

    # ── Mode handlers ──────────────────────────────────────────

    def _handle_navigate(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.navigate
        if key_matches(event, keys.tags):
            self._open_tags()
        elif key_matches(event, keys.quit):
            self.should_quit = True
        elif key_matches(event, keys.insert):
            self.transition_to(InputMode.EDITING)
        elif key_matches(event, keys.search):
            self.transition_to(InputMode.SEARCH)
        elif event.code == "up":
            self.scroll_up()
        elif event.code == "down":
            self.scroll_down()
        elif event.code == "escape":
            if self.is_search_result:
                self.reload_today()
        elif key_matches(event, keys.toggle_todo):
            self._toggle_selected()
        elif key_matches(event, keys.pomodoro):
            if self.pomodoro.is_running:
                self.pomodoro.cancel()
                self.notify("Pomodoro stopped")
            else:
                self.pomodoro_input = str(DEFAULT_MINUTES)
                self._open_popup(Popup.POMODORO)
        elif key_matches(event, keys.graph):
            try:
                self.activity = self.store.get_activity_stats()
            except StorageError as e:
                self._report(e)
                return
            self._open_popup(Popup.ACTIVITY)
        elif key_matches(event, keys.path):
            self.path_index = 0
            self._open_popup(Popup.PATH)
        elif key_matches(event, keys.next_todo):
            self._jump_todo(1)
        elif key_matches(event, keys.prev_todo):
            self._jump_todo(-1)
        elif key_matches(event, keys.copy):
            self._copy_selected()

    def _open_tags(self) -> None:
        try:
            tags = self.store.get_all_tags()
        except StorageError as e:
            self._report(e)
            return
        self.tags = tags
        if not tags:
            self.notify("No tags yet")
            return
        self.tag_index = 0
        self._open_popup(Popup.TAG)

    def _toggle_selected(self) -> None:
        entry = self._selected_entry()
        if entry is None:
            return
        index = self.selected
        try:
            if not self.store.toggle_todo(entry):
                logger.debug("Nothing toggled at %s:%d", entry.file_path, entry.line_number)
        except StorageError as e:
            self._report(e)
        self.reload_today()
        if self.entries:
            self.selected = min(index, len(self.entries) - 1)

    def _copy_selected(self) -> None:
        entry = self._selected_entry()
        if entry is None or self.clipboard is None:
            return
        self.clipboard(entry.content)
        self.notify("Copied to clipboard")

    def _run_search(self, query: str) -> None:
        try:
            results = self.store.search(query)
        except StorageError as e:
            self._report(e)
            return
        self.show_results(results)

    def _handle_editing(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.editing
        if key_matches(event, keys.cancel):
            self.transition_to(InputMode.NAVIGATE)
        elif self.is_newline_key(event):
            self.buffer += "\n"
        elif key_matches(event, keys.save):
            text = ("\n" + CONTINUATION_INDENT).join(self.buffer.split("\n"))
            if text.strip():
                try:
                    self.store.append(text)
                except StorageError as e:
                    self._report(e)
                self.reload_today()
            self.transition_to(InputMode.EDITING)

    def _handle_search(self, event: KeyEvent) -> None:
        keys = self.config.keybindings.search
        if key_matches(event, keys.cancel):
            self.transition_to(InputMode.NAVIGATE)
        elif key_matches(event, keys.submit):
            query = " ".join(self.buffer.split("\n"))
            if query.strip():
                self._run_search(query)
            self.transition_to(InputMode.NAVIGATE)
