"""Build the per-language resource tree from shared and mode-local translation files."""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from loguru import logger

from modebridge.utils.exceptions import ResourceFileError, skip_on_error

MAP_FILE_MARKER = ".map.json"
COMMON_KEY = "common"
MODES_KEY = "modes"

ResourceTree = Mapping[str, Mapping[str, Any]]


def is_map_file(path: Path) -> bool:
    """DOM map files sit beside the translations but are not translations."""
    return MAP_FILE_MARKER in path.name


def read_resource_file(path: Path) -> tuple[str, dict[str, Any]]:
    """Parse one translation file and return (language code, content)."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ResourceFileError(str(path), f"unreadable ({e})") from e
    except json.JSONDecodeError as e:
        raise ResourceFileError(str(path), f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ResourceFileError(str(path), "root must be an object")
    meta = data.get("_meta")
    target = meta.get("target") if isinstance(meta, dict) else None
    if not isinstance(target, str) or not target.strip():
        raise ResourceFileError(str(path), "missing _meta.target language code")
    return target.strip(), data


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _list_json_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        logger.warning("Language directory not found: {}", directory)
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".json")


class ResourceMergeEngine:
    """
    Merges two origins into one tree per language::

        {"en-US": {"common": {...shared file...},
                   "modes": {"<mode name>": {...mode file...}}}}

    A broken file is logged and skipped. ``build()`` always starts from an
    empty tree.
    """

    def __init__(self, shared_dir: Path, mode_dir: Path, mode_name: str):
        self.shared_dir = Path(shared_dir)
        self.mode_dir = Path(mode_dir)
        self.mode_name = mode_name

    def build(self) -> ResourceTree:
        logger.info("Loading languages...")
        res: dict[str, dict[str, Any]] = {}

        for path in _list_json_files(self.shared_dir):
            parsed = skip_on_error(read_resource_file, path, what=f"language file {path}")
            if parsed is None:
                continue
            lang, data = parsed
            res.setdefault(lang, {})[COMMON_KEY] = data

        for path in _list_json_files(self.mode_dir):
            if is_map_file(path):
                continue
            parsed = skip_on_error(read_resource_file, path, what=f"language file {path}")
            if parsed is None:
                continue
            lang, data = parsed
            modes = res.setdefault(lang, {}).setdefault(MODES_KEY, {})
            modes[self.mode_name] = data

        logger.debug("Resource tree built for languages: {}", ", ".join(sorted(res)) or "(none)")
        return _freeze(res)


def available_languages(tree: ResourceTree) -> list[dict[str, str]]:
    """Language codes with a display name taken from ``_meta.name`` when present."""
    out: list[dict[str, str]] = []
    for code in sorted(tree):
        name = code
        for part in (COMMON_KEY, MODES_KEY):
            subtree = tree[code].get(part)
            if part == MODES_KEY and isinstance(subtree, Mapping):
                subtree = next(iter(subtree.values()), None)
            meta = subtree.get("_meta") if isinstance(subtree, Mapping) else None
            if isinstance(meta, Mapping) and isinstance(meta.get("name"), str):
                name = meta["name"]
                break
        out.append({"code": code, "name": name})
    return out


def tree_to_dict(tree: ResourceTree) -> dict[str, Any]:
    """Plain, JSON-serializable copy of a tree."""
    return _thaw(tree)
