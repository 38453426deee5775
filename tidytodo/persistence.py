"""Persistence of the canonical list to a local key-value store.

The store side only ever sees ``TodoPersistence.save`` and ``load``.
Storage backends mimic browser localStorage: string values under string
keys, whole-value overwrite on every write.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from tidytodo.fileio import read_json_object, write_json_atomic
from tidytodo.models import TodoItem
from tidytodo.store import TodoStore
from tidytodo.workspace import storage_path

logger = logging.getLogger(__name__)

DEFAULT_KEY = "todos"


class StorageError(Exception):
    """Raised by storage backends when the underlying medium fails."""


# ── Backends ──────────────────────────────────────────────────


class MemoryStorage:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class LocalStorage:
    """Key-value store kept as one JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else storage_path()

    def _read_all(self) -> dict[str, str]:
        try:
            data = read_json_object(self.path)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except StorageError:
            logger.warning("Overwriting unreadable storage file %s", self.path)
            items = {}
        items[key] = value
        try:
            write_json_atomic(self.path, items)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            try:
                write_json_atomic(self.path, items)
            except OSError as e:
                raise StorageError(f"Cannot write {self.path}: {e}") from e


# ── Serialization ─────────────────────────────────────────────


def dump_todos(todos: Sequence[TodoItem]) -> str:
    return json.dumps([t.to_dict() for t in todos], ensure_ascii=False)


def parse_todos(raw: str) -> list[TodoItem]:
    """Parse a stored value. Raises ValueError if it is not a valid todo array."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
    items = [TodoItem.from_dict(d) for d in data]
    ids = [t.id for t in items]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate todo ids in stored list")
    return items


# ── Adapter ───────────────────────────────────────────────────


class TodoPersistence:
    """Best-effort load/save of the full list under a single key."""

    def __init__(self, storage: LocalStorage | MemoryStorage, key: str = DEFAULT_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> list[TodoItem] | None:
        """Return the stored list, or None on first run or unreadable data."""
        try:
            raw = self.storage.get_item(self.key)
        except StorageError as e:
            logger.warning("Storage unavailable, starting empty: %s", e)
            return None
        if raw is None:
            return None
        try:
            return parse_todos(raw)
        except ValueError as e:
            logger.warning("Discarding corrupt %r entry, starting empty: %s", self.key, e)
            return None

    def save(self, todos: Sequence[TodoItem]) -> None:
        """Overwrite the stored list.

        Failures are logged and dropped: the in-memory list stays
        authoritative and the write is not retried, so a failing medium
        loses changes made since the last good save.
        """
        try:
            self.storage.set_item(self.key, dump_todos(todos))
        except StorageError as e:
            logger.error("Failed to save %d todos: %s", len(todos), e)


class PersistenceSync:
    """Subscribes a ``TodoPersistence`` to a ``TodoStore``."""

    def __init__(self, store: TodoStore, persistence: TodoPersistence) -> None:
        self._store = store
        self.persistence = persistence
        self._last_saved: str | None = None
        self._hydrated = False
        self._unsubscribe = store.subscribe(self._on_store_change)

    def hydrate(self) -> bool:
        """Load stored data into the store once. Returns True if anything was loaded."""
        if self._hydrated:
            return False
        self._hydrated = True
        items = self.persistence.load()
        if not items:
            return False
        # Mark as saved first so the load commit does not write it straight back.
        self._last_saved = dump_todos(items)
        self._store.load(items)
        logger.info("Hydrated %d todos from storage", len(items))
        return True

    def close(self) -> None:
        self._unsubscribe()

    def _on_store_change(self, todos: list[TodoItem]) -> None:
        serialized = dump_todos(todos)
        if serialized == self._last_saved:
            return
        self.persistence.save(todos)
        self._last_saved = serialized
