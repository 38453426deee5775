"""Typed dataclasses for the TidyTodo data model.

All persisted models use from_dict/to_dict for JSON serialization.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ── Todo items ────────────────────────────────────────────────


@dataclass(frozen=True)
class TodoItem:
    """One entry of the canonical list. Replaced, never mutated in place."""

    id: int
    text: str
    completed: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TodoItem:
        """Build from a stored record. Raises ValueError on malformed records."""
        if not isinstance(d, dict):
            raise ValueError(f"Todo record must be an object, got {type(d).__name__}")
        if "id" not in d or "text" not in d:
            raise ValueError(f"Todo record missing id or text: {d!r}")
        raw_id = d["id"]
        if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float)):
            raise ValueError(f"Todo id must be an integer: {raw_id!r}")
        if isinstance(raw_id, float) and not raw_id.is_integer():
            raise ValueError(f"Todo id must be an integer: {raw_id!r}")
        text = d["text"]
        if not isinstance(text, str):
            raise ValueError(f"Todo text must be a string: {text!r}")
        completed = d.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"Todo completed flag must be a boolean: {completed!r}")
        return cls(id=int(raw_id), text=text, completed=completed)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}


# ── Reducer actions ───────────────────────────────────────────


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


# ── Filtering ─────────────────────────────────────────────────


FILTER_KINDS = {"all", "completed_only", "incomplete_only", "search"}


@dataclass(frozen=True)
class FilterMode:
    """Active filter. ``term`` is only meaningful for ``search``."""

    kind: str = "all"
    term: str = ""

    def __post_init__(self) -> None:
        if self.kind not in FILTER_KINDS:
            raise ValueError(f"Invalid filter kind: {self.kind}")

    @classmethod
    def all(cls) -> FilterMode:
        return cls("all")

    @classmethod
    def completed_only(cls) -> FilterMode:
        return cls("completed_only")

    @classmethod
    def incomplete_only(cls) -> FilterMode:
        return cls("incomplete_only")

    @classmethod
    def search(cls, term: str) -> FilterMode:
        return cls("search", term)

    @property
    def is_search(self) -> bool:
        return self.kind == "search"


# ── View state ────────────────────────────────────────────────


@dataclass
class EditTarget:
    id: int
    text: str


@dataclass
class UIState:
    """State the views used to keep as loose globals, held in one place."""

    filter_mode: FilterMode = field(default_factory=FilterMode.all)
    edit_target: EditTarget | None = None
    dragging_index: int | None = None

    @property
    def editing(self) -> bool:
        return self.edit_target is not None

    @property
    def dragging(self) -> bool:
        return self.dragging_index is not None
