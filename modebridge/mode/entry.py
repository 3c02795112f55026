"""Load a mode's Python entry module and collect its capabilities."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from modebridge.mode.capabilities import ModeCapabilities
from modebridge.mode.descriptor import ModeDescriptor
from modebridge.utils.exceptions import ModeLoadError


def load_entry_object(mode_dir: Path, entry: str) -> Any:
    """Import ``file.py[:name]`` relative to the mode directory and return ``name`` (default ``setup``)."""
    module_ref, _, obj_name = entry.partition(":")
    object_name = obj_name.strip() or "setup"
    module_ref = module_ref.strip()
    if not module_ref.endswith(".py"):
        raise ModeLoadError(f"mode entry must be a .py file: {entry}")
    module_path = (Path(mode_dir) / module_ref).resolve()
    if not module_path.exists():
        raise ModeLoadError(f"mode entry file not found: {module_path}", path=str(module_path))
    module_name = f"modebridge_mode_{Path(mode_dir).name}_{abs(hash(str(module_path)))}"
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise ModeLoadError(f"failed to load spec for {module_path}", path=str(module_path))
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ModeLoadError(f"mode entry failed to import: {module_path} ({e})", path=str(module_path)) from e
    if not hasattr(module, object_name):
        raise ModeLoadError(f"mode entry object not found: {object_name}", path=str(module_path))
    return getattr(module, object_name)


def load_capabilities(descriptor: ModeDescriptor, api: Any) -> ModeCapabilities:
    """
    Run the mode's entry and turn what it returns into capabilities.

    ``setup(api)`` may return a ``ModeCapabilities``, any object or mapping with
    hook attributes, or ``None`` (no hooks). A class is instantiated with ``api``.
    """
    if not descriptor.entry:
        return ModeCapabilities()
    target = load_entry_object(descriptor.directory, descriptor.entry)
    result = target(api) if callable(target) else target
    caps = ModeCapabilities.from_object(result) if result is not None else ModeCapabilities()
    logger.debug("Mode {} provides hooks: {}", descriptor.name, ", ".join(caps.present()) or "(none)")
    return caps
