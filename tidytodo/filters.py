"""Filter and search derivation over the canonical list."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from tidytodo.models import FilterMode, TodoItem, UIState
from tidytodo.store import TodoStore

logger = logging.getLogger(__name__)


def matches(item: TodoItem, mode: FilterMode) -> bool:
    """Whether *item* belongs in the view for *mode*."""
    if mode.kind == "completed_only":
        return item.completed
    if mode.kind == "incomplete_only":
        return not item.completed
    if mode.kind == "search":
        # Case-sensitive containment; "" matches everything.
        return mode.term in item.text
    return True


def apply_filter(todos: Sequence[TodoItem], mode: FilterMode) -> list[TodoItem]:
    """Derive the display list. Always a subsequence of *todos*, order preserved."""
    if mode.kind == "all":
        return list(todos)
    return [t for t in todos if matches(t, mode)]


def counts(todos: Sequence[TodoItem]) -> dict[str, int]:
    done = sum(1 for t in todos if t.completed)
    return {"total": len(todos), "completed": done, "incomplete": len(todos) - done}


class FilterEngine:
    """Keeps the derived view in step with the store and the active filter.

    The active mode lives on the shared ``UIState`` so views and the engine
    never disagree about it.
    """

    def __init__(self, store: TodoStore, state: UIState | None = None) -> None:
        self._store = store
        self.state = state if state is not None else UIState()
        self._view: list[TodoItem] = apply_filter(store.todos, self.state.filter_mode)
        self._listeners: list[Callable[[list[TodoItem]], None]] = []
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def mode(self) -> FilterMode:
        return self.state.filter_mode

    @property
    def view(self) -> list[TodoItem]:
        return list(self._view)

    def set_mode(self, mode: FilterMode) -> list[TodoItem]:
        """Switch filter (replacing any previous one) and recompute immediately."""
        self.state.filter_mode = mode
        logger.debug("Filter mode set to %s %r", mode.kind, mode.term)
        return self.refresh()

    def refresh(self) -> list[TodoItem]:
        self._view = apply_filter(self._store.todos, self.state.filter_mode)
        for listener in list(self._listeners):
            listener(list(self._view))
        return list(self._view)

    def on_change(self, listener: Callable[[list[TodoItem]], None]) -> None:
        """Register a view callback fired after every recompute."""
        self._listeners.append(listener)

    def close(self) -> None:
        self._unsubscribe()

    def _on_store_change(self, todos: list[TodoItem]) -> None:
        self.refresh()
