from modebridge.i18n.catalog import Catalog, interpolate

TREE = {
    "en-US": {
        "common": {
            "hello": "Hi",
            "bye": "Bye",
            "greet": "Hello __name__",
            "item": "__count__ item",
            "item_plural": "__count__ items",
            "buttons": {"cancel": "Cancel"},
        },
        "modes": {"draw": {"start": "Go"}},
    },
    "de-DE": {"common": {"hello": "Hallo"}},
    "de": {"common": {"only": "Nur"}},
}


def test_active_language_then_fallback_then_raw_key():
    catalog = Catalog(TREE, language="de-DE")
    assert catalog.t("common.hello") == "Hallo"
    assert catalog.t("common.bye") == "Bye"
    assert catalog.t("common.nope") == "common.nope"
    assert catalog.t("common.nope", default="Nope") == "Nope"


def test_base_language_is_consulted():
    catalog = Catalog(TREE, language="de-AT")
    assert catalog.language_chain() == ["de-AT", "de", "en-US"]
    assert catalog.t("common.only") == "Nur"


def test_raw_key_without_fallback_language_data():
    catalog = Catalog({"de-DE": {"common": {"hello": "Hallo"}}}, language="de-DE")
    assert catalog.t("common.bye") == "common.bye"


def test_subtree_counts_as_missing():
    assert Catalog(TREE).t("common.buttons") == "common.buttons"
    assert Catalog(TREE).t("common.buttons.cancel") == "Cancel"


def test_interpolation_and_plural():
    catalog = Catalog(TREE)
    assert catalog.t("common.greet", name="Ann") == "Hello Ann"
    assert catalog.t("common.item", count=1) == "1 item"
    assert catalog.t("common.item", count=3) == "3 items"
    assert interpolate("__a__ and __b__", {"a": 1}) == "1 and __b__"


def test_lng_option_overrides_active_language():
    catalog = Catalog(TREE, language="en-US")
    assert catalog.t("common.hello", lng="de-DE") == "Hallo"
    assert catalog.language == "en-US"


def test_set_language_empty_falls_back():
    catalog = Catalog(TREE, language="de-DE")
    catalog.set_language(None)
    assert catalog.language == "en-US"


def test_namespaced_lookup():
    t = Catalog(TREE).namespaced("modes.draw")
    assert t("start") == "Go"
    assert t("missing") == "modes.draw.missing"
