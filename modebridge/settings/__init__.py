"""Settings persistence and form binding."""

from modebridge.settings.backends import (
    JsonFileBackend,
    KeyValueBackend,
    MemoryBackend,
    SqliteBackend,
    create_backend,
)
from modebridge.settings.binding import BindingEntry, FormBinder
from modebridge.settings.store import AppSettings, LanguagePreference, SettingsStore, SvgStore

__all__ = [
    "AppSettings",
    "BindingEntry",
    "FormBinder",
    "JsonFileBackend",
    "KeyValueBackend",
    "LanguagePreference",
    "MemoryBackend",
    "SettingsStore",
    "SqliteBackend",
    "SvgStore",
    "create_backend",
]
