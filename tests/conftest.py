"""Shared test fixtures for TidyTodo tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from tidytodo.config import Config
from tidytodo.models import TodoItem
from tidytodo.persistence import MemoryStorage
from tidytodo.session import TodoSession
from tidytodo.store import TodoStore
from tidytodo.todos import IdGenerator


class FakeClock:
    """Manually advanced clock for debounce tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def counter_ids(start: int = 1) -> IdGenerator:
    """Id generator whose clock never moves, so ids count up from *start*."""
    return IdGenerator(clock=lambda: start)


def texts(items) -> list[str]:
    return [t.text for t in items]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> TodoStore:
    return TodoStore(ids=counter_ids())


@pytest.fixture
def abcd(store: TodoStore) -> TodoStore:
    for text in ("A", "B", "C", "D"):
        store.add(text)
    return store


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session(storage: MemoryStorage, clock: FakeClock) -> TodoSession:
    s = TodoSession(storage=storage, config=Config(), ids=counter_ids(), clock=clock)
    yield s
    s.close()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a config and stored todos."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    config = {
        "storage_key": "todos",
        "search_debounce_ms": 300,
        "log_level": "DEBUG",
    }
    (root / "config.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )

    todos = [
        TodoItem(1700000000000, "buy milk").to_dict(),
        TodoItem(1700000000001, "call mom", completed=True).to_dict(),
        TodoItem(1700000000002, "buy bread").to_dict(),
    ]
    (root / "local_storage.json").write_text(
        json.dumps({"todos": json.dumps(todos)}, indent=2), encoding="utf-8"
    )

    # Set env var
    os.environ["TIDYTODO_ROOT"] = str(root)
    yield root
    # Cleanup
    if "TIDYTODO_ROOT" in os.environ:
        del os.environ["TIDYTODO_ROOT"]
