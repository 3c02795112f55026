"""Form control ↔ settings synchronization (`settings.manage`)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Sequence

from bs4.element import Tag
from loguru import logger

from modebridge.dom.document import Document, Subscription

if TYPE_CHECKING:
    from modebridge.settings.store import SettingsStore


@dataclass(eq=False)
class BindingEntry:
    """One managed control: its id (the settings key) and its change subscriptions."""

    key: str
    kind: Literal["value", "radio"]
    subscriptions: list[Subscription] = field(default_factory=list)

    def release(self) -> None:
        for sub in self.subscriptions:
            sub.cancel()
        self.subscriptions.clear()


class FormBinder:
    """
    Keeps form controls and a ``SettingsStore`` in sync, keyed on element ids.

    Every change handler writes the control's full current value and persists
    at once, so ``manage()`` may be called again on the same controls without
    corrupting the stored document.
    """

    def __init__(self, store: "SettingsStore", document: Document):
        self.store = store
        self.document = document
        self.entries: dict[str, BindingEntry] = {}

    def manage(self, selectors: str | Sequence[str]) -> list[BindingEntry]:
        self.store.load()
        selector = selectors if isinstance(selectors, str) else ", ".join(selectors)
        bound: list[BindingEntry] = []
        for element in self.document.select(selector):
            entry = self._bind(element)
            if entry is not None:
                bound.append(entry)
        return bound

    def _bind(self, element: Tag) -> BindingEntry | None:
        key = str(element.get("id") or "").strip()
        if not key:
            logger.error("settings.manage: control <{}> has no id and cannot be keyed, skipped", element.name)
            return None

        previous = self.entries.pop(key, None)
        if previous is not None:
            previous.release()

        if self.document.has_value(element):
            entry = self._bind_value(key, element)
        else:
            radios = element.select('input[type="radio"]')
            if not radios:
                logger.warning("Incompatible settings manage element: <{} id={!r}>", element.name, key)
                return None
            entry = self._bind_radio_group(key, radios)
        self.entries[key] = entry
        return entry

    def _bind_value(self, key: str, element: Tag) -> BindingEntry:
        stored = self.store.values.get(key)
        if stored is not None:
            self.document.set_value(element, stored)

        def on_change(control: Tag) -> None:
            self.store.values[key] = self.document.get_value(control)
            self.store.save()

        entry = BindingEntry(key=key, kind="value")
        entry.subscriptions.append(self.document.on(element, "change", on_change))
        self.document.trigger(element, "change")
        return entry

    def _bind_radio_group(self, key: str, radios: list[Tag]) -> BindingEntry:
        stored = self.store.values.get(key)
        if stored is not None:
            for radio in radios:
                self.document.set_checked(radio, False)
            for radio in radios:
                if self.document.get_value(radio) == str(stored):
                    self.document.set_checked(radio, True)
                    break

        def on_change(radio: Tag) -> None:
            if self.document.is_checked(radio):
                self.store.values[key] = self.document.get_value(radio)
                self.store.save()

        entry = BindingEntry(key=key, kind="radio")
        for radio in radios:
            entry.subscriptions.append(self.document.on(radio, "change", on_change))
        for radio in radios:
            self.document.trigger(radio, "change")
        return entry
