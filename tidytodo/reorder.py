"""Drag-gesture reordering.

A gesture is ``drag_start(index)``, any number of ``drag_over(index)`` and
one ``drop()``. Indices refer to the currently displayed (filtered) list.
The move is committed on every hover, not once at drop, so the list
follows the pointer.
"""

from __future__ import annotations

import logging

from tidytodo.filters import FilterEngine
from tidytodo.store import TodoStore
from tidytodo.todos import index_of, move_todo

logger = logging.getLogger(__name__)


class ReorderController:
    def __init__(self, store: TodoStore, engine: FilterEngine) -> None:
        self._store = store
        self._engine = engine
        self.state = engine.state

    @property
    def dragging_index(self) -> int | None:
        return self.state.dragging_index

    def drag_start(self, index: int) -> None:
        if not (0 <= index < len(self._engine.view)):
            logger.debug("Ignoring drag_start at %d: out of range", index)
            return
        self.state.dragging_index = index

    def drag_over(self, index: int) -> bool:
        """Move the dragged item to *index*. Returns True if a commit happened."""
        current = self.state.dragging_index
        if current is None or index == current:
            return False

        view = self._engine.view
        if not (0 <= index < len(view)) or not (0 <= current < len(view)):
            logger.debug("Ignoring drag_over %d -> %d: out of range", current, index)
            return False

        # View positions map to canonical positions by id, so a filtered
        # view splices the canonical list at the hovered item's slot.
        canonical = self._store.todos
        src = index_of(canonical, view[current].id)
        dst = index_of(canonical, view[index].id)
        if src is None or dst is None:
            return False

        self._store.load(move_todo(canonical, src, dst))
        self.state.dragging_index = index
        return True

    def drop(self) -> None:
        self.state.dragging_index = None
