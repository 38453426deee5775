"""Tests for tidytodo/models.py — serialization and filter modes."""

import pytest

from tidytodo.models import EditTarget, FilterMode, TodoItem, UIState


def test_todo_item_round_trip():
    data = {"id": 1700000000000, "text": "buy milk", "completed": True}
    item = TodoItem.from_dict(data)
    assert item.id == 1700000000000
    assert item.text == "buy milk"
    assert item.completed is True
    assert item.to_dict() == data


def test_todo_item_defaults_completed_false():
    item = TodoItem.from_dict({"id": 5, "text": "x"})
    assert item.completed is False


def test_todo_item_ignores_unknown_keys():
    item = TodoItem.from_dict({"id": 5, "text": "x", "priority": 3})
    assert item.to_dict() == {"id": 5, "text": "x", "completed": False}


def test_todo_item_float_id_from_json():
    assert TodoItem.from_dict({"id": 12.0, "text": "x"}).id == 12


@pytest.mark.parametrize("bad", [
    {"text": "no id"},
    {"id": 1},
    {"id": "1", "text": "string id"},
    {"id": True, "text": "bool id"},
    {"id": 1.9, "text": "fractional id"},
    {"id": 1, "text": None},
    {"id": 1, "text": "a", "completed": "false"},
    {"id": 1, "text": "a", "completed": 0},
    ["not", "a", "dict"],
])
def test_todo_item_rejects_malformed(bad):
    with pytest.raises(ValueError):
        TodoItem.from_dict(bad)


def test_todo_item_is_immutable():
    item = TodoItem(1, "a")
    with pytest.raises(AttributeError):
        item.text = "b"


def test_filter_mode_constructors():
    assert FilterMode.all().kind == "all"
    assert FilterMode.completed_only().kind == "completed_only"
    assert FilterMode.incomplete_only().kind == "incomplete_only"
    mode = FilterMode.search("buy")
    assert mode.kind == "search"
    assert mode.term == "buy"
    assert mode.is_search


def test_filter_mode_invalid_kind():
    with pytest.raises(ValueError, match="Invalid filter kind"):
        FilterMode("starred")


def test_ui_state_defaults():
    state = UIState()
    assert state.filter_mode == FilterMode.all()
    assert not state.editing
    assert not state.dragging
    state.edit_target = EditTarget(1, "a")
    state.dragging_index = 0
    assert state.editing
    assert state.dragging
