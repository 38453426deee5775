"""Tests for tidytodo/store.py — commands, no-ops, notifications."""

from conftest import counter_ids, texts

from tidytodo.models import TodoItem
from tidytodo.store import TodoStore


def test_add_appends_incomplete_item(store):
    item = store.add("buy milk")
    assert item == TodoItem(1, "buy milk", False)
    assert store.todos == (item,)


def test_add_keeps_text_as_given(store):
    assert store.add("  padded  ").text == "  padded  "


def test_blank_add_rejected(store):
    store.add("keep")
    assert store.add("") is None
    assert store.add("   ") is None
    assert len(store) == 1


def test_ids_pairwise_distinct():
    s = TodoStore()  # real millisecond clock
    items = [s.add(f"item {i}") for i in range(200)]
    ids = [t.id for t in items]
    assert len(set(ids)) == len(ids)


def test_ids_not_reused_after_delete(store):
    first = store.add("a")
    store.delete(first.id)
    second = store.add("b")
    assert second.id != first.id


def test_noop_commands_on_absent_id(abcd):
    before = abcd.todos
    abcd.delete(999)
    abcd.check(999)
    abcd.edit(999, "zzz")
    assert abcd.todos == before


def test_check_and_edit(abcd):
    abcd.check(2)
    abcd.edit(3, "sea")
    assert abcd.find(2).completed is True
    assert abcd.find(3).text == "sea"
    assert texts(abcd) == ["A", "B", "sea", "D"]


def test_edit_does_not_validate(abcd):
    abcd.edit(1, "")
    assert abcd.find(1).text == ""


def test_load_replaces_order_and_seeds_ids(store):
    store.load([TodoItem(500, "x"), TodoItem(400, "y")])
    assert texts(store) == ["x", "y"]
    assert store.add("z").id == 501


def test_subscribers_notified_on_commit_only(abcd):
    seen = []
    abcd.subscribe(seen.append)
    abcd.check(1)
    abcd.check(999)
    abcd.add("")
    assert len(seen) == 1
    assert seen[0][0].completed is True


def test_unsubscribe(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.add("a")
    unsubscribe()
    store.add("b")
    assert len(seen) == 1


def test_failing_subscriber_does_not_block_others(store):
    seen = []

    def broken(todos):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(seen.append)
    store.add("a")
    assert len(seen) == 1
    assert len(store) == 1


def test_todos_snapshot_is_read_only(store):
    store.add("a")
    snapshot = store.todos
    store.add("b")
    assert len(snapshot) == 1


def test_counter_ids_helper():
    s = TodoStore(ids=counter_ids(10))
    assert [s.add(t).id for t in "abc"] == [10, 11, 12]
