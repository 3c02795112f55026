"""Apply the active language to a mode document, by DOM map or by in-page markers."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from bs4.element import Tag
from loguru import logger
from soupsieve import SelectorSyntaxError

from modebridge.dom.document import Document
from modebridge.i18n.catalog import Catalog

MARKER_ATTR = "data-i18n"
_INSTRUCTION = re.compile(r"^\[([A-Za-z0-9_:-]+)\](.*)$")


@dataclass(frozen=True, slots=True)
class DomMapStrategy:
    """Selector → key (or attribute → key) mapping read from ``<mode>.map.json``."""

    map_file: Path

    def load_map(self) -> Mapping[str, Any]:
        data = json.loads(self.map_file.read_text(encoding="utf-8"))
        mappings = data.get("map") if isinstance(data, dict) else None
        if not isinstance(mappings, dict):
            raise ValueError("map file has no 'map' object")
        return mappings

    def apply(self, document: Document, t: Callable[[str], str]) -> None:
        try:
            mappings = self.load_map()
        except (OSError, ValueError) as e:
            logger.error("Bad DOM location file: {} ({})", self.map_file, e)
            return

        for selector, rule in mappings.items():
            try:
                elements = document.select(selector)
            except SelectorSyntaxError as e:
                logger.warning("Translation DOM map selector invalid: {} ({})", selector, e)
                continue
            if not elements:
                logger.debug("Translation DOM map selector not found: {}", selector)
                continue

            if isinstance(rule, str):
                for element in elements:
                    document.replace_direct_text(element, t(rule))
            elif isinstance(rule, dict):
                for attr, key in rule.items():
                    for element in elements:
                        if attr == "text":
                            document.replace_direct_text(element, t(str(key)))
                        else:
                            element[attr] = t(str(key))
            else:
                logger.warning("Translation DOM map rule for {} is neither a key nor an object", selector)


@dataclass(frozen=True, slots=True)
class NativeStrategy:
    """``data-i18n`` markers in the page itself."""

    def normalize_markers(self, document: Document) -> None:
        # An empty marker means "my text is the key"; pin it so later runs still know the key.
        for element in document.body.select(f'[{MARKER_ATTR}=""]'):
            text = element.get_text()
            if "." in text:
                element[MARKER_ATTR] = text.strip()

    def apply(self, document: Document, t: Callable[[str], str]) -> None:
        self.normalize_markers(document)
        for element in document.body.select(f"[{MARKER_ATTR}]"):
            marker = str(element.get(MARKER_ATTR) or "").strip()
            if marker:
                self.localize(document, element, marker, t)

    @staticmethod
    def localize(document: Document, element: Tag, marker: str, t: Callable[[str], str]) -> None:
        for instruction in (part.strip() for part in marker.split(";")):
            if not instruction:
                continue
            match = _INSTRUCTION.match(instruction)
            target, key = (match.group(1), match.group(2).strip()) if match else ("text", instruction)
            if not key:
                continue
            value = t(key)
            if target == "text":
                document.set_text(element, value)
            elif target == "html":
                document.set_inner_html(element, value)
            elif target == "prepend":
                element.insert(0, value)
            elif target == "append":
                element.append(value)
            else:
                element[target] = value


TranslationStrategy = DomMapStrategy | NativeStrategy


class Translator:
    """
    Runs the mode's translation strategy against its document.

    The strategy is chosen once at mode load. ``translate()`` may run any number
    of times (boot, then every language change); the first run must wait for
    the document's ready signal, see ``translate_when_ready()``.
    """

    def __init__(
        self,
        catalog: Catalog,
        document: Document,
        strategy: TranslationStrategy,
        *,
        language_source: Callable[[], str | None] | None = None,
        on_complete: Callable[[], None] | None = None,
    ):
        self.catalog = catalog
        self.document = document
        self.strategy = strategy
        self.language_source = language_source
        self.on_complete = on_complete
        self.runs = 0

    def translate(self) -> None:
        if self.language_source is not None:
            self.catalog.set_language(self.language_source())
        self.strategy.apply(self.document, self.catalog.t)
        self.runs += 1
        logger.debug("Translated mode document to {} ({} run(s))", self.catalog.language, self.runs)
        if self.on_complete is not None:
            self.on_complete()

    def translate_when_ready(self) -> None:
        self.document.when_ready(self.translate)


def strategy_for(translation: str, mode_dir: Path, mode_name: str) -> TranslationStrategy:
    """Pick the strategy a mode declares (``"dom"`` → DOM map, anything else → native)."""
    if translation == "dom":
        return DomMapStrategy(map_file=Path(mode_dir) / "_i18n" / f"{mode_name}.map.json")
    return NativeStrategy()
