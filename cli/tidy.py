#!/usr/bin/env python3
"""TidyTodo TUI — interactive terminal todo list powered by Textual."""

from __future__ import annotations

import logging
import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Label, ListItem, ListView, Static

from tidytodo import (
    EDIT_MAX_LENGTH,
    FilterMode,
    TodoItem,
    TodoSession,
    configure_logging,
    load_config,
    log_path,
    workspace_root,
)

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05

CSS = """
Screen {
    layout: vertical;
}

#toolbar {
    height: auto;
    padding: 0 1;
}

#search {
    width: 1fr;
}

.filter-btn {
    min-width: 12;
    margin: 0 0 0 1;
}

#todo-list {
    height: 1fr;
    margin: 1 1 0 1;
    border: tall $primary-background-darken-2;
}

.todo-done Label {
    text-style: strike;
    opacity: 60%;
}

#empty {
    height: auto;
    padding: 0 2;
    color: $text-muted;
}

#entry-row {
    height: auto;
    padding: 0 1;
}

#new-todo {
    width: 1fr;
}

#status-bar {
    height: 1;
    padding: 0 2;
    color: $text-muted;
}

EditScreen {
    align: center middle;
}

#edit-dialog {
    width: 60;
    height: auto;
    padding: 1 2;
    border: thick $primary;
    background: $surface;
}
"""


# ── Widgets ────────────────────────────────────────────────────


class TodoRow(ListItem):
    """One todo: completion marker + text."""

    def __init__(self, item: TodoItem, **kwargs) -> None:
        super().__init__(**kwargs)
        self.todo = item

    def compose(self) -> ComposeResult:
        marker = "[x]" if self.todo.completed else "[ ]"
        yield Label(f"{marker} {self.todo.text}")

    def on_mount(self) -> None:
        if self.todo.completed:
            self.add_class("todo-done")


class EditScreen(ModalScreen[str | None]):
    """Edit dialog. Enter saves, Escape closes without saving."""

    BINDINGS = [Binding("escape", "close", "Close")]

    def __init__(self, text: str) -> None:
        super().__init__()
        self._text = text

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label("Edit todo"),
            Input(value=self._text, id="edit-input", max_length=EDIT_MAX_LENGTH),
            id="edit-dialog",
        )

    def on_mount(self) -> None:
        edit = self.query_one("#edit-input", Input)
        edit.focus()
        edit.cursor_position = len(self._text)

    @on(Input.Submitted, "#edit-input")
    def _on_submit(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def action_close(self) -> None:
        self.dismiss(None)


# ── Main app ───────────────────────────────────────────────────


class TidyTodoApp(App):
    """TidyTodo — single-user terminal todo list."""

    TITLE = "TidyTodo"
    CSS = CSS

    BINDINGS = [
        Binding("space", "check", "Check"),
        Binding("e", "edit", "Edit"),
        Binding("delete,x", "delete", "Delete"),
        Binding("ctrl+up", "move_up", "Move up"),
        Binding("ctrl+down", "move_down", "Move down"),
        Binding("c", "filter_checked", "Checked"),
        Binding("u", "filter_unchecked", "Unchecked"),
        Binding("a", "filter_all", "All"),
        Binding("n", "focus_entry", "New"),
        Binding("escape", "blur_focus", "Back", show=False),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, session: TodoSession) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Input(placeholder="Search...", id="search"),
            Button("Checked", id="filter-checked", classes="filter-btn"),
            Button("UnChecked", id="filter-unchecked", classes="filter-btn"),
            Button("All", id="filter-all", classes="filter-btn"),
            id="toolbar",
        )
        yield ListView(id="todo-list")
        yield Static("No matching todos.", id="empty")
        yield Horizontal(
            Input(placeholder="What needs doing?", id="new-todo"),
            Button("Add", id="add", variant="primary"),
            id="entry-row",
        )
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.session.engine.on_change(lambda _view: self._render_list())
        self.set_interval(POLL_INTERVAL, self.session.poll)
        self._render_list()
        self.query_one("#new-todo", Input).focus()

    # ── Rendering ──────────────────────────────────────────────

    def _render_list(self) -> None:
        list_view = self.query_one("#todo-list", ListView)
        keep = list_view.index
        view = self.session.view
        list_view.clear()
        list_view.extend(TodoRow(item) for item in view)
        if view:
            list_view.index = min(keep or 0, len(view) - 1)
        self.query_one("#empty", Static).display = not view
        self._update_status()

    def _update_status(self) -> None:
        c = self.session.counts()
        mode = self.session.state.filter_mode
        label = f"search {mode.term!r}" if mode.is_search else mode.kind.replace("_", " ")
        self.query_one("#status-bar", Static).update(
            f"{c['incomplete']} open · {c['completed']} done · {c['total']} total · filter: {label}"
        )

    def _highlighted(self) -> tuple[int, TodoItem] | None:
        list_view = self.query_one("#todo-list", ListView)
        view = self.session.view
        index = list_view.index
        if index is None or not (0 <= index < len(view)):
            return None
        return index, view[index]

    # ── Entry & search ─────────────────────────────────────────

    @on(Input.Submitted, "#new-todo")
    def _on_new_todo(self, event: Input.Submitted) -> None:
        self._add_from_entry()

    @on(Button.Pressed, "#add")
    def _on_add_pressed(self) -> None:
        self._add_from_entry()

    def _add_from_entry(self) -> None:
        entry = self.query_one("#new-todo", Input)
        if self.session.add(entry.value) is not None:
            entry.value = ""
        entry.focus()

    @on(Input.Changed, "#search")
    def _on_search_change(self, event: Input.Changed) -> None:
        self.session.search(event.value)

    @on(Button.Pressed, "#filter-checked")
    def action_filter_checked(self) -> None:
        self.session.set_filter(FilterMode.completed_only())

    @on(Button.Pressed, "#filter-unchecked")
    def action_filter_unchecked(self) -> None:
        self.session.set_filter(FilterMode.incomplete_only())

    @on(Button.Pressed, "#filter-all")
    def action_filter_all(self) -> None:
        self.session.set_filter(FilterMode.all())

    # ── Row commands ───────────────────────────────────────────

    def action_check(self) -> None:
        hit = self._highlighted()
        if hit:
            self.session.check(hit[1].id)

    def action_delete(self) -> None:
        hit = self._highlighted()
        if hit:
            self.session.delete(hit[1].id)

    def action_edit(self) -> None:
        hit = self._highlighted()
        if not hit:
            return
        target = self.session.begin_edit(hit[1].id)
        if target is None:
            return

        def on_result(text: str | None) -> None:
            if text is None:
                self.session.cancel_edit()
            else:
                self.session.submit_edit(text)
            self.query_one("#todo-list", ListView).focus()

        self.push_screen(EditScreen(target.text), on_result)

    def action_move_up(self) -> None:
        self._move(-1)

    def action_move_down(self) -> None:
        self._move(1)

    def _move(self, step: int) -> None:
        """Keyboard stand-in for a drag gesture of one slot."""
        hit = self._highlighted()
        if not hit:
            return
        index = hit[0]
        self.session.drag_start(index)
        moved = self.session.drag_over(index + step)
        self.session.drop()
        if moved:
            self.query_one("#todo-list", ListView).index = index + step

    def action_focus_entry(self) -> None:
        self.query_one("#new-todo", Input).focus()

    def action_blur_focus(self) -> None:
        self.query_one("#todo-list", ListView).focus()

    def on_unmount(self) -> None:
        self.session.close()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    try:
        config = load_config(root)
    except ValueError as e:
        print(f"Config error: {e}")
        sys.exit(1)
    configure_logging(config, filename=log_path(root))

    session = TodoSession.open(root)
    logger.info("Opened workspace %s with %d todos", root, len(session.todos))
    TidyTodoApp(session).run()


if __name__ == "__main__":
    main()
