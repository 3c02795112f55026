"""Key lookup over a resource tree with language fallback and interpolation."""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from modebridge.i18n.resources import ResourceTree

_PLACEHOLDER = re.compile(r"__([A-Za-z0-9_.]+)__")
_RESERVED_OPTIONS = frozenset({"default", "count", "lng"})


def _resolve(subtree: Any, key: str) -> Any:
    node = subtree
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def interpolate(text: str, values: Mapping[str, Any]) -> str:
    """Replace ``__name__`` placeholders; unknown names are left untouched."""
    def _sub(match: re.Match[str]) -> str:
        value = _resolve(values, match.group(1))
        return match.group(0) if value is None else str(value)

    return _PLACEHOLDER.sub(_sub, text)


class Catalog:
    """Reads the active language's subtree; switching language never rebuilds the tree."""

    def __init__(self, tree: ResourceTree, *, fallback_language: str = "en-US", language: str | None = None):
        self.tree = tree
        self.fallback_language = fallback_language
        self._language = language or fallback_language

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, code: str | None) -> None:
        self._language = (code or "").strip() or self.fallback_language

    def language_chain(self, code: str | None = None) -> list[str]:
        """Lookup order: the language, its base language, then the fallback."""
        lang = code or self._language
        chain = [lang]
        if "-" in lang:
            chain.append(lang.split("-", 1)[0])
        chain.append(self.fallback_language)
        return list(dict.fromkeys(chain))

    def lookup(self, key: str, code: str | None = None) -> str | None:
        for lang in self.language_chain(code):
            value = _resolve(self.tree.get(lang), key)
            if isinstance(value, str):
                return value
        return None

    def t(self, key: str, **options: Any) -> str:
        lang = options.get("lng")
        count = options.get("count")
        value = None
        if count is not None and count != 1:
            value = self.lookup(f"{key}_plural", lang)
        if value is None:
            value = self.lookup(key, lang)
        if value is None:
            value = str(options.get("default", key))
        values = {k: v for k, v in options.items() if k not in _RESERVED_OPTIONS}
        if count is not None:
            values["count"] = count
        return interpolate(value, values) if values else value

    def namespaced(self, prefix: str) -> Callable[..., str]:
        """A ``t`` that resolves keys under ``prefix``."""
        def t(key: str, **options: Any) -> str:
            return self.t(f"{prefix}.{key}", **options)

        return t
