"""Resolve a mode's location and its package descriptor."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal
from urllib.parse import unquote

from loguru import logger

from modebridge.utils.exceptions import ModeLoadError
from modebridge.utils.helpers import safe_dict, safe_list

PACKAGE_FILENAME = "package.json"
TranslationType = Literal["native", "dom"]


@dataclass(frozen=True, slots=True)
class ModeDescriptor:
    """Identity and layout of one mode. Built once at boot."""

    name: str
    package_name: str
    version: str
    path: Path
    directory: Path
    dependencies: tuple[str, ...] = ()
    translation: TranslationType = "native"
    entry: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def i18n_dir(self) -> Path:
        return self.directory / "_i18n"

    @property
    def entry_path(self) -> Path | None:
        return (self.directory / self.entry) if self.entry else None

    def depends_on(self, name: str) -> bool:
        return name in self.dependencies


def resolve_mode_path(location: str) -> Path:
    """
    Turn the location a host hands a mode into the page path.

    Accepts a plain path, a ``file://`` URL, or a URL whose fragment carries the
    URI-encoded absolute page path (``...#%2Fmodes%2Fdraw%2Findex.html``).
    """
    raw = location.strip()
    if "#" in raw:
        raw = raw.split("#", 1)[1]
    raw = unquote(raw)
    if raw.startswith("file://"):
        raw = raw[len("file://"):]
    if not raw:
        raise ModeLoadError("mode location is empty")
    return Path(raw).expanduser().resolve()


def load_mode_descriptor(mode_path: Path) -> ModeDescriptor:
    """
    Read ``package.json`` next to the mode page. Any failure here is fatal.

    ``mode_path`` may be the page itself or the mode directory (``index.html``
    is assumed then).
    """
    path = Path(mode_path)
    if path.is_dir():
        path = path / "index.html"
    directory = path.parent
    if not directory.is_dir():
        raise ModeLoadError(f"mode directory not found: {directory}", path=str(directory))

    package_file = directory / PACKAGE_FILENAME
    try:
        data = json.loads(package_file.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ModeLoadError(f"mode package not found: {package_file}", path=str(package_file)) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ModeLoadError(f"mode package unreadable: {package_file} ({e})", path=str(package_file)) from e
    if not isinstance(data, dict):
        raise ModeLoadError(f"mode package must be a JSON object: {package_file}", path=str(package_file))

    rp = safe_dict(data.get("robopaint"))
    name = str(rp.get("name") or "").strip()
    if not name:
        raise ModeLoadError(f"mode package has no robopaint.name: {package_file}", path=str(package_file))

    dependencies = tuple(str(d).strip() for d in safe_list(rp.get("dependencies")) if str(d).strip())

    translation: TranslationType = "dom" if rp.get("i18n") == "dom" else "native"
    if rp.get("i18n") not in (None, "dom", "native"):
        logger.warning("Mode {} declares unknown i18n type {!r}, using native", name, rp.get("i18n"))

    entry = rp.get("entry")
    return ModeDescriptor(
        name=name,
        package_name=str(data.get("name") or name),
        version=str(data.get("version") or "0.0.0"),
        path=path,
        directory=directory,
        dependencies=dependencies,
        translation=translation,
        entry=str(entry) if isinstance(entry, str) and entry.strip() else None,
        raw=data,
    )
