"""Pure transitions over the canonical todo list.

Every function takes the previous list and returns a new one; inputs are
never mutated. ``TodoStore`` layers ownership and change notification on
top of these.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Iterable, Sequence

from tidytodo.models import Action, TodoItem

EDIT_MAX_LENGTH = 100

# ── Validation ────────────────────────────────────────────────


def validate_text(text: Any) -> list[str]:
    """Validate todo text and return list of errors (empty if valid)."""
    if not isinstance(text, str):
        return [f"Text must be a string, got {type(text).__name__}"]
    if not text.strip():
        return ["Text must not be blank"]
    return []


def validate_edit_text(text: Any) -> list[str]:
    """Validate text submitted from an edit dialog, which is capped at EDIT_MAX_LENGTH."""
    errors = validate_text(text)
    if not errors and len(text) > EDIT_MAX_LENGTH:
        errors.append(f"Text must be at most {EDIT_MAX_LENGTH} characters")
    return errors


# ── Lookup ────────────────────────────────────────────────────


def find_todo(todos: Iterable[TodoItem], todo_id: int) -> TodoItem | None:
    """Find a todo by ID."""
    for t in todos:
        if t.id == todo_id:
            return t
    return None


def index_of(todos: Sequence[TodoItem], todo_id: int) -> int | None:
    for i, t in enumerate(todos):
        if t.id == todo_id:
            return i
    return None


# ── Transitions ───────────────────────────────────────────────


def add_todo(todos: Sequence[TodoItem], item: TodoItem) -> list[TodoItem]:
    return [*todos, item]


def delete_todo(todos: Sequence[TodoItem], todo_id: int) -> list[TodoItem]:
    return [t for t in todos if t.id != todo_id]


def check_todo(todos: Sequence[TodoItem], todo_id: int) -> list[TodoItem]:
    """Flip ``completed`` on the matching item."""
    return [
        TodoItem(t.id, t.text, not t.completed) if t.id == todo_id else t
        for t in todos
    ]


def edit_todo(todos: Sequence[TodoItem], todo_id: int, text: str) -> list[TodoItem]:
    return [
        TodoItem(t.id, text, t.completed) if t.id == todo_id else t
        for t in todos
    ]


def load_todos(items: Iterable[TodoItem]) -> list[TodoItem]:
    return list(items)


def move_todo(todos: Sequence[TodoItem], src: int, dst: int) -> list[TodoItem]:
    """Remove the item at *src* and insert it at *dst*.

    [A, B, C, D] with src=0, dst=2 -> [B, C, A, D]
    """
    if not (0 <= src < len(todos)) or not (0 <= dst < len(todos)):
        raise IndexError(f"Move {src} -> {dst} out of range for {len(todos)} items")
    result = list(todos)
    item = result.pop(src)
    result.insert(dst, item)
    return result


def reduce(todos: Sequence[TodoItem], action: Action) -> list[TodoItem]:
    """Apply a single action. Unknown action types leave the list unchanged."""
    if action.type == "add":
        return add_todo(todos, action.payload)
    if action.type == "delete":
        return delete_todo(todos, action.payload)
    if action.type == "check":
        return check_todo(todos, action.payload)
    if action.type == "edit":
        return edit_todo(todos, action.payload["id"], action.payload["text"])
    if action.type == "load":
        return load_todos(action.payload)
    return list(todos)


# ── Id generation ─────────────────────────────────────────────


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator:
    """Millisecond-timestamp ids, forced strictly increasing.

    Two adds within the same millisecond (or a clock step backwards) still
    get distinct ids; ``observe`` seeds the floor from hydrated data.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last = 0

    def observe(self, ids: Iterable[int]) -> None:
        for i in ids:
            if i > self._last:
                self._last = i

    def next_id(self) -> int:
        candidate = max(self._clock(), self._last + 1)
        self._last = candidate
        return candidate
