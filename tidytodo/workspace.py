"""Workspace root and path helpers for TidyTodo."""

from __future__ import annotations

import os
from pathlib import Path


def workspace_root() -> Path:
    """Get the workspace directory holding config, local storage and logs."""
    return Path(
        os.environ.get("TIDYTODO_ROOT", str(Path.home() / ".tidytodo"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "config.yaml"


def storage_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "local_storage.json"


def log_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "tidytodo.log"
