"""Tests for tidytodo/persistence.py — storage backends, adapter, sync."""

import json

import pytest
from conftest import counter_ids, texts

from tidytodo.models import TodoItem
from tidytodo.persistence import (
    LocalStorage,
    MemoryStorage,
    PersistenceSync,
    StorageError,
    TodoPersistence,
    dump_todos,
    parse_todos,
)
from tidytodo.store import TodoStore

ITEMS = [TodoItem(3, "buy milk"), TodoItem(1, "call mom", True), TodoItem(2, "ünïcode ✓")]


class BrokenStorage(MemoryStorage):
    def get_item(self, key):
        raise StorageError("disk gone")

    def set_item(self, key, value):
        raise StorageError("disk full")


def test_save_then_load_round_trip(storage):
    p = TodoPersistence(storage)
    p.save(ITEMS)
    assert p.load() == ITEMS


def test_local_storage_round_trip(tmp_path):
    p = TodoPersistence(LocalStorage(tmp_path / "ls.json"))
    p.save(ITEMS)
    assert TodoPersistence(LocalStorage(tmp_path / "ls.json")).load() == ITEMS


def test_persistence_format(storage):
    TodoPersistence(storage).save(ITEMS[:2])
    raw = json.loads(storage.get_item("todos"))
    assert raw == [
        {"id": 3, "text": "buy milk", "completed": False},
        {"id": 1, "text": "call mom", "completed": True},
    ]


def test_save_overwrites(storage):
    p = TodoPersistence(storage)
    p.save(ITEMS)
    p.save(ITEMS[:1])
    assert p.load() == ITEMS[:1]


def test_custom_key(storage):
    TodoPersistence(storage, key="other").save(ITEMS)
    assert TodoPersistence(storage).load() is None
    assert TodoPersistence(storage, key="other").load() == ITEMS


def test_load_first_run_returns_none(storage):
    assert TodoPersistence(storage).load() is None


@pytest.mark.parametrize("raw", [
    "not json",
    '{"id": 1}',
    '[{"text": "no id"}]',
    '[{"id": 1, "text": "a"}, {"id": 1, "text": "dup"}]',
    '[{"id": 1, "text": "a", "completed": "false"}]',
    '[{"id": 1, "text": null}]',
    '[{"id": 1.9, "text": "a"}]',
])
def test_load_corrupt_returns_none(storage, raw):
    storage.set_item("todos", raw)
    assert TodoPersistence(storage).load() is None


def test_load_unavailable_storage_returns_none():
    assert TodoPersistence(BrokenStorage()).load() is None


def test_save_failure_is_swallowed():
    TodoPersistence(BrokenStorage()).save(ITEMS)


def test_local_storage_missing_file(tmp_path):
    ls = LocalStorage(tmp_path / "missing.json")
    assert ls.get_item("todos") is None


def test_local_storage_corrupt_file(tmp_path):
    path = tmp_path / "ls.json"
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(StorageError):
        LocalStorage(path).get_item("todos")
    assert TodoPersistence(LocalStorage(path)).load() is None


def test_local_storage_set_recovers_corrupt_file(tmp_path):
    path = tmp_path / "ls.json"
    path.write_text("[1, 2]", encoding="utf-8")
    ls = LocalStorage(path)
    ls.set_item("todos", "[]")
    assert ls.get_item("todos") == "[]"


def test_local_storage_keeps_other_keys(tmp_path):
    ls = LocalStorage(tmp_path / "ls.json")
    ls.set_item("theme", "dark")
    ls.set_item("todos", "[]")
    ls.remove_item("todos")
    assert ls.get_item("theme") == "dark"
    assert ls.get_item("todos") is None


def test_parse_and_dump():
    assert parse_todos(dump_todos(ITEMS)) == ITEMS
    with pytest.raises(ValueError):
        parse_todos('"string"')


class CountingStorage(MemoryStorage):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def set_item(self, key, value):
        self.writes += 1
        super().set_item(key, value)


def test_sync_saves_after_every_commit():
    storage = CountingStorage()
    store = TodoStore(ids=counter_ids())
    sync = PersistenceSync(store, TodoPersistence(storage))
    sync.hydrate()
    a = store.add("a")
    store.add("b")
    store.check(a.id)
    store.load(list(reversed(store.todos)))
    assert storage.writes == 4
    assert texts(TodoPersistence(storage).load()) == ["b", "a"]


def test_sync_skips_noop_commands():
    storage = CountingStorage()
    store = TodoStore(ids=counter_ids())
    PersistenceSync(store, TodoPersistence(storage))
    store.add("a")
    store.delete(999)
    store.add("   ")
    assert storage.writes == 1


def test_hydrate_loads_once_without_resaving():
    storage = CountingStorage()
    TodoPersistence(storage).save(ITEMS)
    storage.writes = 0

    store = TodoStore(ids=counter_ids())
    sync = PersistenceSync(store, TodoPersistence(storage))
    assert sync.hydrate() is True
    assert list(store.todos) == ITEMS
    assert storage.writes == 0
    assert sync.hydrate() is False

    new = store.add("fresh")
    assert new.id == 4
    assert storage.writes == 1


def test_hydrate_corrupt_starts_empty():
    storage = MemoryStorage()
    storage.set_item("todos", "garbage")
    store = TodoStore()
    assert PersistenceSync(store, TodoPersistence(storage)).hydrate() is False
    assert len(store) == 0


def test_save_failure_keeps_memory_state():
    store = TodoStore(ids=counter_ids())
    PersistenceSync(store, TodoPersistence(BrokenStorage()))
    store.add("still here")
    assert texts(store) == ["still here"]
