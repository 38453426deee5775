from __future__ import annotations

import html
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from tidytodo import (
    FilterMode,
    TodoItem,
    TodoSession,
    apply_filter,
    configure_logging,
    load_config,
    validate_edit_text,
)

ASSET_V = "20261019-01"

FILTERS = {
    "all": FilterMode.all,
    "checked": FilterMode.completed_only,
    "unchecked": FilterMode.incomplete_only,
}


# ── Session ───────────────────────────────────────────────────

app = FastAPI(title="TidyTodo UI", version="0.1.0")

_session: TodoSession | None = None


async def get_session() -> TodoSession:
    """The process-wide session, opened from the workspace on first use.

    Endpoints are ``async`` so every access to the session runs on the event
    loop thread; the session is not thread-safe.
    """
    global _session
    if _session is None:
        configure_logging(load_config())
        _session = TodoSession.open()
    return _session


# ── Auth ──────────────────────────────────────────────────────

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("TIDYTODO_USERNAME", "")
    expected_password = os.environ.get("TIDYTODO_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Helpers ───────────────────────────────────────────────────

def _view_payload(session: TodoSession) -> dict[str, Any]:
    mode = session.state.filter_mode
    return {
        "todos": [t.to_dict() for t in session.view],
        "filter": {"kind": mode.kind, "term": mode.term},
        "counts": session.counts(),
        "dragging_index": session.state.dragging_index,
    }


def _index_arg(payload: dict[str, Any]) -> int:
    try:
        return int(payload["index"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Missing or invalid index")


def _mode_arg(filter: Any, q: str | None) -> FilterMode | None:
    if q is not None:
        return FilterMode.search(q)
    if filter is None:
        return None
    factory = FILTERS.get(filter) if isinstance(filter, str) else None
    if factory is None:
        raise HTTPException(status_code=400, detail=f"Invalid filter: {filter}")
    return factory()


def _render_row(item: TodoItem) -> str:
    mark = "&#10004;" if item.completed else "&nbsp;"
    cls = "done" if item.completed else ""
    return f'<li class="{cls}" data-id="{item.id}"><span class="box">{mark}</span> {html.escape(item.text)}</li>'


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
async def index(
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> HTMLResponse:
    view = session.view
    rows = "".join(_render_row(t) for t in view) or '<li class="muted">No matching todos.</li>'
    c = session.counts()
    page = f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>TidyTodo</title>
  <style>
    body {{ font-family: sans-serif; max-width: 720px; margin: 2rem auto; }}
    li {{ list-style: none; padding: 6px 8px; background: #f5f5f4; margin: 2px 0; }}
    li.done {{ background: #d6d3d1; text-decoration: line-through; }}
    .box {{ display: inline-block; width: 1em; color: #e11d48; }}
    .muted {{ color: #a8a29e; }}
  </style>
</head>
<body>
  <h1>TidyTodo</h1>
  <ul>{rows}</ul>
  <footer class="muted">{c['incomplete']} open &middot; {c['completed']} done &middot; v{ASSET_V}</footer>
</body>
</html>"""
    return HTMLResponse(page)


@app.get("/api/todos")
async def api_list_todos(
    filter: str | None = None,
    q: str | None = None,
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    """Derived view. ``q``/``filter`` narrow this response only; the session mode is untouched.

    ``q`` selects search mode and takes precedence over ``filter``.
    """
    mode = _mode_arg(filter, q)
    payload = _view_payload(session)
    if mode is None:
        return payload
    payload["todos"] = [t.to_dict() for t in apply_filter(session.todos, mode)]
    payload["filter"] = {"kind": mode.kind, "term": mode.term}
    return payload


@app.post("/api/filter")
async def api_set_filter(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    """Set the session's active filter mode, as the TUI's filter buttons and search box do."""
    filter = payload.get("filter")
    q = payload.get("q")
    if q is not None and not isinstance(q, str):
        raise HTTPException(status_code=400, detail="Invalid search term")
    mode = _mode_arg(filter, q)
    if mode is None:
        raise HTTPException(status_code=400, detail="Missing filter or q")
    if mode.is_search:
        session.search_now(mode.term)
    else:
        session.set_filter(mode)
    return {"ok": True, **_view_payload(session)}


@app.post("/api/todos")
async def api_add_todo(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    text = payload.get("text", "")
    item = session.add(text if isinstance(text, str) else "")
    if item is None:
        return {"ok": False, "reason": "Text must not be blank"}
    return {"ok": True, "todo": item.to_dict()}


@app.post("/api/todos/{todo_id}/check")
async def api_check_todo(
    todo_id: int,
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    session.check(todo_id)
    item = session.store.find(todo_id)
    return {"ok": True, "todo": item.to_dict() if item else None}


@app.put("/api/todos/{todo_id}")
async def api_edit_todo(
    todo_id: int,
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    text = payload.get("text", "")
    errors = validate_edit_text(text)
    if errors:
        return {"ok": False, "reason": "; ".join(errors)}
    session.edit(todo_id, text)
    item = session.store.find(todo_id)
    return {"ok": True, "todo": item.to_dict() if item else None}


@app.delete("/api/todos/{todo_id}")
async def api_delete_todo(
    todo_id: int,
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    session.delete(todo_id)
    return {"ok": True, "todo_id": todo_id}


@app.post("/api/drag/start")
async def api_drag_start(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    session.drag_start(_index_arg(payload))
    return {"ok": True, **_view_payload(session)}


@app.post("/api/drag/over")
async def api_drag_over(
    payload: dict[str, Any] = Body(...),
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    moved = session.drag_over(_index_arg(payload))
    return {"ok": True, "moved": moved, **_view_payload(session)}


@app.post("/api/drag/drop")
async def api_drop(
    username: str = Depends(get_current_user),
    session: TodoSession = Depends(get_session),
) -> dict[str, Any]:
    session.drop()
    return {"ok": True, **_view_payload(session)}
