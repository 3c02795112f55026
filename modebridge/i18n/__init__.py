"""Translation resources, lookup and document translation."""

from modebridge.i18n.catalog import Catalog, interpolate
from modebridge.i18n.resources import ResourceMergeEngine, ResourceTree, available_languages, tree_to_dict
from modebridge.i18n.translator import DomMapStrategy, NativeStrategy, Translator, strategy_for

__all__ = [
    "Catalog",
    "DomMapStrategy",
    "NativeStrategy",
    "ResourceMergeEngine",
    "ResourceTree",
    "Translator",
    "available_languages",
    "interpolate",
    "strategy_for",
    "tree_to_dict",
]
