"""TodoStore: owner of the canonical todo list."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator

from tidytodo.models import Action, TodoItem
from tidytodo.todos import IdGenerator, find_todo, reduce, validate_text

logger = logging.getLogger(__name__)

Subscriber = Callable[[list[TodoItem]], None]


class TodoStore:
    """Single owner of the canonical order.

    All changes go through ``add``/``delete``/``check``/``edit``/``load``.
    Each committed change notifies subscribers with the new list; commands
    that change nothing (unknown id, blank text) notify no one.
    """

    def __init__(self, ids: IdGenerator | None = None) -> None:
        self._todos: list[TodoItem] = []
        self._ids = ids or IdGenerator()
        self._subscribers: list[Subscriber] = []

    # ── Read access ────────────────────────────────────────────

    @property
    def todos(self) -> tuple[TodoItem, ...]:
        return tuple(self._todos)

    def find(self, todo_id: int) -> TodoItem | None:
        return find_todo(self._todos, todo_id)

    def __len__(self) -> int:
        return len(self._todos)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(tuple(self._todos))

    # ── Subscriptions ──────────────────────────────────────────

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* for change notifications. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = list(self._todos)
        for callback in list(self._subscribers):
            try:
                callback(list(snapshot))
            except Exception:
                logger.exception("Store subscriber %r failed", callback)

    # ── Commands ───────────────────────────────────────────────

    def dispatch(self, action: Action) -> list[TodoItem]:
        """Run *action* through the reducer and commit if anything changed."""
        new_todos = reduce(self._todos, action)
        if new_todos == self._todos:
            logger.debug("No-op %s action", action.type)
            return list(self._todos)
        self._todos = new_todos
        logger.debug("Committed %s action (%d items)", action.type, len(new_todos))
        self._notify()
        return list(self._todos)

    def add(self, text: str) -> TodoItem | None:
        """Append a new incomplete item. Blank text is rejected and returns None."""
        errors = validate_text(text)
        if errors:
            logger.debug("Rejected add: %s", "; ".join(errors))
            return None
        item = TodoItem(id=self._ids.next_id(), text=text, completed=False)
        self.dispatch(Action("add", item))
        return item

    def delete(self, todo_id: int) -> list[TodoItem]:
        return self.dispatch(Action("delete", todo_id))

    def check(self, todo_id: int) -> list[TodoItem]:
        return self.dispatch(Action("check", todo_id))

    def edit(self, todo_id: int, text: str) -> list[TodoItem]:
        # Blank text is gated by callers, not here.
        return self.dispatch(Action("edit", {"id": todo_id, "text": text}))

    def load(self, items: Iterable[TodoItem]) -> list[TodoItem]:
        """Replace the whole canonical order in one commit."""
        items = list(items)
        self._ids.observe(t.id for t in items)
        return self.dispatch(Action("load", items))
