"""Pytest fixtures: application and mode layouts on disk."""

import json
from pathlib import Path

import pytest

from modebridge.config.schema import Config, LoggingConfig, StorageConfig

DRAW_PAGE = """<!DOCTYPE html>
<html><head><title>Draw</title></head>
<body>
<h1 data-i18n="modes.draw.title">Draw</h1>
<form id="options">
  <input id="speed" type="text" value="50">
  <select id="pen"><option value="fine">Fine</option><option value="bold">Bold</option></select>
  <div id="fill">
    <input type="radio" name="fill" value="none" checked>
    <input type="radio" name="fill" value="hatch">
  </div>
</form>
</body></html>
"""

MODE_EN = {"_meta": {"target": "en-US"}, "title": "Draw mode", "start": "Go"}


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def write_json():
    return _write_json


@pytest.fixture
def app_dir(tmp_path):
    root = tmp_path / "app"
    _write_json(
        root / "resources" / "_i18n" / "en-US.json",
        {"_meta": {"target": "en-US", "name": "English"}, "hello": "Hi", "buttons": {"cancel": "Cancel"}},
    )
    return root


@pytest.fixture
def make_mode(tmp_path):
    def _make(
        name="draw",
        *,
        page=DRAW_PAGE,
        i18n="native",
        dependencies=(),
        entry_source=None,
        translations=None,
    ):
        mode_dir = tmp_path / "modes" / name
        mode_dir.mkdir(parents=True, exist_ok=True)
        robopaint = {"name": name, "i18n": i18n, "dependencies": list(dependencies)}
        if entry_source is not None:
            (mode_dir / "mode.py").write_text(entry_source, encoding="utf-8")
            robopaint["entry"] = "mode.py"
        _write_json(
            mode_dir / "package.json",
            {"name": f"robopaint-mode-{name}", "version": "1.2.0", "robopaint": robopaint},
        )
        (mode_dir / "index.html").write_text(page, encoding="utf-8")
        files = translations if translations is not None else {"en-US.json": MODE_EN}
        for filename, data in files.items():
            _write_json(mode_dir / "_i18n" / filename, data)
        return mode_dir

    return _make


@pytest.fixture
def config(app_dir):
    return Config(
        app_path=str(app_dir),
        storage=StorageConfig(backend="memory"),
        logging=LoggingConfig(level="ERROR", file_enabled=False),
    )
