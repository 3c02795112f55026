"""Namespaced settings documents on top of a key-value backend."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger

from modebridge.settings.backends import KeyValueBackend

if TYPE_CHECKING:
    from modebridge.dom.document import Document
    from modebridge.settings.binding import FormBinder

APP_NAMESPACE = "robopaint"
LANGUAGE_KEY = "robopaint-lang"
SVG_KEY = "svgedit-default"


def settings_key(namespace: str) -> str:
    """Storage key of a namespace's settings document."""
    return f"{namespace}-settings"


def read_document(backend: KeyValueBackend, key: str) -> dict[str, Any]:
    """Read a JSON object from the backend; anything absent or malformed reads as empty."""
    raw = backend.get(key)
    if raw is None:
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Settings document {} is not valid JSON, treating as empty", key)
        return {}
    if not isinstance(data, dict):
        logger.warning("Settings document {} is not an object, treating as empty", key)
        return {}
    return data


class SettingsStore:
    """
    One mode's settings document.

    ``values`` is the in-memory copy. ``save()`` runs after every mutation made
    through ``set()`` or a bound form control, so it never lags the persisted
    document by more than one write. A concurrent writer simply wins on the
    next ``load()``.
    """

    def __init__(self, backend: KeyValueBackend, namespace: str):
        self.backend = backend
        self.namespace = namespace
        self.values: dict[str, Any] = {}
        self._binder: "FormBinder | None" = None

    @property
    def key(self) -> str:
        return settings_key(self.namespace)

    def load(self) -> dict[str, Any]:
        self.values = read_document(self.backend, self.key)
        return self.values

    def save(self) -> None:
        self.backend.set(self.key, json.dumps(self.values, ensure_ascii=False))

    def clear(self) -> None:
        self.backend.delete(self.key)
        self.values = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value
        self.save()

    def bind_document(self, document: "Document") -> "FormBinder":
        """Attach the document whose form controls ``manage()`` will bind."""
        from modebridge.settings.binding import FormBinder

        self._binder = FormBinder(self, document)
        return self._binder

    def manage(self, selectors: str | Sequence[str]) -> None:
        """Load, restore, track and persist the matched form controls, keyed on their ids."""
        if self._binder is None:
            raise RuntimeError("settings.manage() needs a document; call bind_document() first")
        self._binder.manage(selectors)


class AppSettings:
    """Read-only view of the central application settings; reloaded on settingsUpdate."""

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend
        self.values: dict[str, Any] = {}

    def reload(self) -> dict[str, Any]:
        self.values = read_document(self.backend, settings_key(APP_NAMESPACE))
        return self.values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


class LanguagePreference:
    """The language the user picked, shared by every mode."""

    def __init__(self, backend: KeyValueBackend, default: str | None = None):
        self.backend = backend
        self.default = default

    def get(self) -> str | None:
        value = self.backend.get(LANGUAGE_KEY)
        return value.strip() if value and value.strip() else self.default

    def set(self, code: str) -> None:
        self.backend.set(LANGUAGE_KEY, code)


class SvgStore:
    """Shared SVG drawing document, so storage may change without the API changing."""

    def __init__(self, backend: KeyValueBackend, canvas_size: Any = None):
        self.backend = backend
        self.canvas_size = canvas_size

    def wrap(self, inner: str) -> str:
        if self.canvas_size is None:
            raise RuntimeError("canvas size is not known until the bot profile has loaded")
        return (
            '<svg xmlns="http://www.w3.org/2000/svg" width="'
            f'{self.canvas_size.width}" height="{self.canvas_size.height}">{inner}</svg>'
        )

    def is_empty(self) -> bool:
        value = self.backend.get(SVG_KEY)
        return value is None or not value.strip()

    def load(self) -> str | None:
        return self.backend.get(SVG_KEY)

    def save(self, svg_data: str) -> None:
        self.backend.set(SVG_KEY, svg_data)
