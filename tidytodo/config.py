"""User configuration (config.yaml) for TidyTodo."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from tidytodo.fileio import read_yaml, write_yaml_atomic
from tidytodo.workspace import config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    storage_key: str = "todos"
    search_debounce_ms: int = 300
    log_level: str = "WARNING"

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            storage_key=str(d.get("storage_key", "todos")),
            search_debounce_ms=int(d.get("search_debounce_ms", 300)),
            log_level=str(d.get("log_level", "WARNING")).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "storage_key": self.storage_key,
            "search_debounce_ms": self.search_debounce_ms,
            "log_level": self.log_level,
        }


def validate_config(config: Config) -> list[str]:
    """Validate config values and return list of errors (empty if valid)."""
    errors = []
    if not config.storage_key.strip():
        errors.append("storage_key must not be blank")
    if config.search_debounce_ms < 0:
        errors.append("search_debounce_ms must be >= 0")
    if config.log_level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid log_level: {config.log_level}")
    return errors


def load_config(root: Path | None = None) -> Config:
    """Load config.yaml, falling back to defaults when it is missing or unreadable.

    Raises ``ValueError`` if the file parses but holds out-of-range values.
    """
    if root is None:
        root = workspace_root()
    path = config_path(root)
    try:
        data = read_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        data = {}

    try:
        config = Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e

    errors = validate_config(config)
    if errors:
        raise ValueError(f"Invalid config in {path}: " + "; ".join(errors))
    return config


def save_config(config: Config, root: Path | None = None) -> None:
    """Write config.yaml atomically."""
    write_yaml_atomic(config_path(root), config.to_dict())


def configure_logging(config: Config, filename: Path | None = None) -> None:
    """Set up root logging for an entry point."""
    kwargs: dict[str, Any] = {
        "level": getattr(logging, config.log_level, logging.WARNING),
        "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    }
    if filename is not None:
        filename.parent.mkdir(parents=True, exist_ok=True)
        kwargs["filename"] = str(filename)
    logging.basicConfig(**kwargs)
