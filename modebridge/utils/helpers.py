"""Small shared helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any


def ensure_dir(path: Path) -> Path:
    """Create the directory (and parents) when missing and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the modebridge data directory (~/.modebridge)."""
    return ensure_dir(Path.home() / ".modebridge")


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def safe_list(value: Any) -> list[Any]:
    """Return the value when list-like, otherwise an empty list."""
    return value if isinstance(value, list) else []
