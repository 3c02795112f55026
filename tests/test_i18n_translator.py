import json

from bs4.element import Tag

from modebridge.dom.document import Document
from modebridge.i18n.catalog import Catalog
from modebridge.i18n.translator import DomMapStrategy, NativeStrategy, Translator, strategy_for

TREE = {
    "en-US": {
        "common": {"hello": "Hi", "bye": "Bye", "rich": "<b>Bold</b>", "tip": "Press go"},
        "modes": {"draw": {"start": "Go", "name": "Your name"}},
    },
    "de-DE": {"common": {"hello": "Hallo"}, "modes": {"draw": {"start": "Los"}}},
}


def _map_file(tmp_path, mapping):
    path = tmp_path / "_i18n" / "draw.map.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"map": mapping}), encoding="utf-8")
    return path


def test_dom_map_replaces_only_direct_text(tmp_path):
    document = Document('<button id="go">Start <span class="icon">&gt;</span><i>x</i></button>')
    strategy = DomMapStrategy(_map_file(tmp_path, {"#go": "modes.draw.start"}))
    Translator(Catalog(TREE), document, strategy).translate()

    button = document.get_by_id("go")
    assert [c.name for c in button.children if isinstance(c, Tag)] == ["span", "i"]
    assert str(button) == '<button id="go">Go<span class="icon">&gt;</span><i>x</i></button>'


def test_dom_map_skips_icon_only_element(tmp_path):
    document = Document('<button id="b"><img src="x.png"/></button>')
    strategy = DomMapStrategy(_map_file(tmp_path, {"#b": "common.hello"}))
    Translator(Catalog(TREE), document, strategy).translate()

    button = document.get_by_id("b")
    assert button.get_text() == ""
    assert [c.name for c in button.children] == ["img"]


def test_dom_map_attribute_rules_and_multiple_matches(tmp_path):
    document = Document(
        '<input id="name"><p class="tip">a</p><p class="tip">b</p>'
    )
    strategy = DomMapStrategy(
        _map_file(
            tmp_path,
            {
                "#name": {"placeholder": "modes.draw.name", "title": "common.tip"},
                ".tip": {"text": "common.tip"},
                "#absent": "common.hello",
            },
        )
    )
    Translator(Catalog(TREE), document, strategy).translate()

    assert document.get_by_id("name")["placeholder"] == "Your name"
    assert document.get_by_id("name")["title"] == "Press go"
    assert [p.get_text() for p in document.select(".tip")] == ["Press go", "Press go"]


def test_dom_map_without_map_file_leaves_document_alone(tmp_path):
    document = Document('<p id="x">Start</p>')
    completed = []
    translator = Translator(
        Catalog(TREE),
        document,
        DomMapStrategy(tmp_path / "missing.map.json"),
        on_complete=lambda: completed.append(True),
    )
    translator.translate()
    assert document.get_by_id("x").get_text() == "Start"
    assert completed == [True]


def test_native_markers():
    document = Document(
        "<body>"
        '<p id="plain" data-i18n="common.hello">x</p>'
        '<a id="link" data-i18n="[title]common.tip;common.bye">y</a>'
        '<div id="rich" data-i18n="[html]common.rich">z</div>'
        '<span id="pre" data-i18n="[prepend]common.hello">!</span>'
        "</body>"
    )
    Translator(Catalog(TREE), document, NativeStrategy()).translate()

    assert document.get_by_id("plain").get_text() == "Hi"
    assert document.get_by_id("link")["title"] == "Press go"
    assert document.get_by_id("link").get_text() == "Bye"
    assert document.get_by_id("rich").find("b").get_text() == "Bold"
    assert document.get_by_id("pre").get_text() == "Hi!"


def test_empty_marker_is_normalized_once_and_survives_language_change():
    document = Document(
        '<body><span id="k" data-i18n="">common.hello</span><span id="p" data-i18n="">Plain</span></body>'
    )
    language = {"code": "en-US"}
    translator = Translator(
        Catalog(TREE), document, NativeStrategy(), language_source=lambda: language["code"]
    )
    translator.translate()
    span = document.get_by_id("k")
    assert span["data-i18n"] == "common.hello"
    assert span.get_text() == "Hi"
    assert document.get_by_id("p").get_text() == "Plain"

    language["code"] = "de-DE"
    translator.translate()
    assert span.get_text() == "Hallo"
    assert translator.runs == 2


def test_first_translation_waits_for_ready():
    document = Document('<body><p data-i18n="common.hello">x</p></body>')
    translator = Translator(Catalog(TREE), document, NativeStrategy())
    translator.translate_when_ready()
    assert translator.runs == 0
    document.mark_ready()
    assert translator.runs == 1
    assert document.select("p")[0].get_text() == "Hi"


def test_strategy_for(tmp_path):
    dom = strategy_for("dom", tmp_path, "draw")
    assert isinstance(dom, DomMapStrategy)
    assert dom.map_file == tmp_path / "_i18n" / "draw.map.json"
    assert isinstance(strategy_for("native", tmp_path, "draw"), NativeStrategy)
