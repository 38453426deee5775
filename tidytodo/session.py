"""TodoSession: the command surface views talk to.

Wires store, filter engine, reorder controller, persistence and the search
debouncer around one shared ``UIState``.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from tidytodo.config import Config, load_config
from tidytodo.filters import FilterEngine, counts
from tidytodo.models import EditTarget, FilterMode, TodoItem, UIState
from tidytodo.persistence import LocalStorage, MemoryStorage, PersistenceSync, TodoPersistence
from tidytodo.ratelimit import Debouncer
from tidytodo.reorder import ReorderController
from tidytodo.store import TodoStore
from tidytodo.todos import IdGenerator, validate_edit_text
from tidytodo.workspace import storage_path, workspace_root

logger = logging.getLogger(__name__)


class TodoSession:
    def __init__(
        self,
        storage: LocalStorage | MemoryStorage | None = None,
        config: Config | None = None,
        ids: IdGenerator | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or Config()
        self.state = UIState()
        self.store = TodoStore(ids=ids)
        self.engine = FilterEngine(self.store, self.state)
        self.reorder = ReorderController(self.store, self.engine)
        self.persistence = TodoPersistence(
            storage if storage is not None else MemoryStorage(),
            key=self.config.storage_key,
        )
        self.sync = PersistenceSync(self.store, self.persistence)
        self.debouncer = Debouncer(
            self.search_now, window=self.config.search_debounce_seconds, clock=clock
        )
        self.sync.hydrate()

    @classmethod
    def open(cls, root: Path | None = None) -> TodoSession:
        """Open the session backed by the workspace's local storage file."""
        if root is None:
            root = workspace_root()
        config = load_config(root)
        return cls(storage=LocalStorage(storage_path(root)), config=config)

    # ── Read access ────────────────────────────────────────────

    @property
    def todos(self) -> tuple[TodoItem, ...]:
        return self.store.todos

    @property
    def view(self) -> list[TodoItem]:
        return self.engine.view

    def counts(self) -> dict[str, int]:
        return counts(self.store.todos)

    # ── Store commands ─────────────────────────────────────────

    def add(self, text: str) -> TodoItem | None:
        return self.store.add(text)

    def delete(self, todo_id: int) -> None:
        self.store.delete(todo_id)
        if self.state.edit_target is not None and self.state.edit_target.id == todo_id:
            self.state.edit_target = None

    def check(self, todo_id: int) -> None:
        self.store.check(todo_id)

    def edit(self, todo_id: int, text: str) -> None:
        self.store.edit(todo_id, text)

    # ── Edit dialog ────────────────────────────────────────────

    def begin_edit(self, todo_id: int) -> EditTarget | None:
        """Open the edit dialog on *todo_id*, prefilled with its current text."""
        item = self.store.find(todo_id)
        if item is None:
            return None
        self.state.edit_target = EditTarget(item.id, item.text)
        return self.state.edit_target

    def submit_edit(self, text: str) -> bool:
        """Apply the dialog's text to the edit target and close the dialog.

        Blank or over-long text closes the dialog without changing the item.
        """
        target = self.state.edit_target
        self.state.edit_target = None
        if target is None:
            return False
        errors = validate_edit_text(text)
        if errors:
            logger.debug("Discarded edit for %d: %s", target.id, "; ".join(errors))
            return False
        self.store.edit(target.id, text)
        return True

    def cancel_edit(self) -> None:
        self.state.edit_target = None

    # ── Drag gesture ───────────────────────────────────────────

    def drag_start(self, index: int) -> None:
        self.reorder.drag_start(index)

    def drag_over(self, index: int) -> bool:
        return self.reorder.drag_over(index)

    def drop(self) -> None:
        self.reorder.drop()

    # ── Filtering ──────────────────────────────────────────────

    def set_filter(self, mode: FilterMode) -> list[TodoItem]:
        # A pending search would otherwise overwrite the explicit choice.
        self.debouncer.cancel()
        return self.engine.set_mode(mode)

    def search(self, term: str) -> None:
        """Queue a search; it runs once input is idle for the debounce window."""
        self.debouncer.trigger(term)

    def search_now(self, term: str) -> list[TodoItem]:
        return self.engine.set_mode(FilterMode.search(term))

    def poll(self) -> bool:
        """Run a due debounced search. Views call this from a timer."""
        return self.debouncer.flush()

    def close(self) -> None:
        self.debouncer.cancel()
        self.sync.close()
        self.engine.close()
