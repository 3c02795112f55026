"""Configuration loading utilities."""

import json
from pathlib import Path
from typing import Any

from modebridge.config.schema import Config


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".modebridge" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config root must be a JSON object")
            data = _migrate_config(data)
            return Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            raise ValueError(
                f"Failed to load config from {path}: {e}. "
                "Fix the file or remove it to regenerate defaults."
            ) from e

    return Config()


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    # Older files kept the cncserver port at the top level as httpPort.
    if "httpPort" in data:
        port = data.pop("httpPort")
        cnc = data.setdefault("cncserver", {})
        if isinstance(cnc, dict) and "port" not in cnc and isinstance(port, int):
            cnc["port"] = port
    # fallbackLng (i18next spelling) -> i18n.fallbackLanguage
    i18n = data.get("i18n")
    if isinstance(i18n, dict) and "fallbackLng" in i18n:
        fallback = i18n.pop("fallbackLng")
        if isinstance(fallback, str) and fallback.strip():
            i18n.setdefault("fallbackLanguage", fallback.strip())
    return data


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)
