"""Once-a-day migration of unfinished todos into today's file."""

from __future__ import annotations

import logging

from core.checkbox import format_todo
from core.storage import LogStore

logger = logging.getLogger(__name__)


class CarryoverPolicy:
    """Decides whether to offer yesterday's unfinished todos, and applies the answer.

    The carryover marker in today's file is the only record that the
    question was settled for the day.
    """

    def __init__(self, store: LogStore) -> None:
        self.store = store

    def pending(self) -> list[str]:
        """Todos to offer now; empty when already settled today.

        With nothing to offer, today is marked settled right away so the
        check does not run again.
        """
        if self.store.is_carryover_done():
            return []
        todos = self.store.get_last_pending_todos()
        if not todos:
            logger.debug("No pending todos to carry over")
            self.store.mark_carryover_done()
        return todos

    def accept(self, todos: list[str]) -> None:
        """Copy *todos* into today's file as unchecked todos, then mark settled."""
        for todo in todos:
            self.store.append(format_todo(todo, checked=False))
        self.store.mark_carryover_done()
        logger.info("Carried over %d todo(s)", len(todos))

    def decline(self) -> None:
        self.store.mark_carryover_done()
        logger.info("Carryover declined")
