"""HTML document model for a mode page: selection, form values, change events and a ready signal."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag
from loguru import logger

EventHandler = Callable[[Tag], None]

# Elements that carry a DOM `value`.
VALUE_TAGS = frozenset({"input", "select", "textarea", "button", "output", "option", "data", "meter", "progress"})
_TEXT_VALUE_TAGS = frozenset({"textarea", "output"})


def _is_text_node(node: Any) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _option_value(option: Tag) -> str:
    value = option.get("value")
    return str(value) if value is not None else option.get_text()


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``Document.on``; ``cancel()`` removes the handler."""

    document: "Document"
    element: Tag
    event: str
    handler: EventHandler
    active: bool = field(default=True)

    def cancel(self) -> None:
        if self.active:
            self.document._remove_handler(self)
            self.active = False


class Document:
    """A parsed mode page. Event dispatch is synchronous and in subscription order."""

    def __init__(self, markup: str, *, path: Path | None = None, parser: str = "html.parser"):
        self.soup = BeautifulSoup(markup, parser)
        self.path = path
        self._ready = False
        self._ready_callbacks: list[Callable[[], None]] = []
        self._handlers: dict[int, tuple[Tag, dict[str, list[Subscription]]]] = {}

    @classmethod
    def from_file(cls, path: Path) -> "Document":
        return cls(Path(path).read_text(encoding="utf-8"), path=Path(path))

    @property
    def body(self) -> Tag:
        return self.soup.body or self.soup

    def select(self, selector: str) -> list[Tag]:
        """CSS selection over the whole document (soupsieve syntax)."""
        return list(self.soup.select(selector))

    def get_by_id(self, element_id: str) -> Tag | None:
        return self.soup.find(id=element_id)

    def render(self) -> str:
        return str(self.soup)

    # -- ready signal -------------------------------------------------------

    def when_ready(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the document is ready; immediately if it already is."""
        if self._ready:
            callback()
        else:
            self._ready_callbacks.append(callback)

    def mark_ready(self) -> None:
        if self._ready:
            return
        self._ready = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    # -- events -------------------------------------------------------------

    def on(self, element: Tag, event: str, handler: EventHandler) -> Subscription:
        sub = Subscription(self, element, event, handler)
        _, by_event = self._handlers.setdefault(id(element), (element, {}))
        by_event.setdefault(event, []).append(sub)
        return sub

    def _remove_handler(self, sub: Subscription) -> None:
        entry = self._handlers.get(id(sub.element))
        if entry is None:
            return
        subs = entry[1].get(sub.event, [])
        if sub in subs:
            subs.remove(sub)

    def trigger(self, element: Tag, event: str) -> None:
        entry = self._handlers.get(id(element))
        if entry is None:
            return
        for sub in list(entry[1].get(event, [])):
            if sub.active:
                sub.handler(element)

    def change(self, element: Tag, value: Any) -> None:
        """Simulate user input: set the value, then fire ``change``."""
        self.set_value(element, value)
        self.trigger(element, "change")

    def choose(self, radio: Tag) -> None:
        """Simulate picking a radio option: check it, uncheck its group, fire ``change``."""
        name = radio.get("name")
        scope = radio.find_parent("form") or self.soup
        if name:
            for other in scope.select(f'input[type="radio"][name="{name}"]'):
                self.set_checked(other, False)
        self.set_checked(radio, True)
        self.trigger(radio, "change")

    # -- values -------------------------------------------------------------

    @staticmethod
    def has_value(element: Tag) -> bool:
        return element.name in VALUE_TAGS

    @staticmethod
    def get_value(element: Tag) -> str:
        name = element.name
        if name == "select":
            options = element.find_all("option")
            for option in options:
                if option.has_attr("selected"):
                    return _option_value(option)
            return _option_value(options[0]) if options else ""
        if name in _TEXT_VALUE_TAGS:
            return element.get_text()
        if name == "option":
            return _option_value(element)
        if name == "input" and str(element.get("type", "")).lower() in ("checkbox", "radio"):
            return str(element.get("value", "on"))
        return str(element.get("value", ""))

    @staticmethod
    def set_value(element: Tag, value: Any) -> None:
        text = "" if value is None else str(value)
        name = element.name
        if name == "select":
            matched = False
            for option in element.find_all("option"):
                if not matched and _option_value(option) == text:
                    option["selected"] = "selected"
                    matched = True
                elif option.has_attr("selected"):
                    del option["selected"]
            if not matched:
                logger.debug("No <option> with value {!r} in select #{}", text, element.get("id"))
            return
        if name in _TEXT_VALUE_TAGS:
            element.string = text
            return
        element["value"] = text

    @staticmethod
    def is_checked(element: Tag) -> bool:
        return element.has_attr("checked")

    @staticmethod
    def set_checked(element: Tag, checked: bool) -> None:
        if checked:
            element["checked"] = "checked"
        elif element.has_attr("checked"):
            del element["checked"]

    # -- text ---------------------------------------------------------------

    @staticmethod
    def replace_direct_text(element: Tag, text: str) -> None:
        """
        Replace the element's own text node, leaving child elements in place.

        The first non-blank direct text node wins, else the first direct text
        node. An element without a direct text node is left as is.
        """
        nodes = [child for child in element.children if _is_text_node(child)]
        target = next((n for n in nodes if n.strip()), nodes[0] if nodes else None)
        if target is None:
            logger.debug("No text node to replace in <{}> #{}", element.name, element.get("id"))
            return
        target.replace_with(NavigableString(text))

    @staticmethod
    def set_text(element: Tag, text: str) -> None:
        element.clear()
        element.append(NavigableString(text))

    @staticmethod
    def set_inner_html(element: Tag, markup: str) -> None:
        fragment = BeautifulSoup(markup, "html.parser")
        element.clear()
        for child in list(fragment.contents):
            element.append(child.extract())
