from types import MappingProxyType

import pytest

from modebridge.i18n.catalog import Catalog
from modebridge.i18n.resources import (
    ResourceMergeEngine,
    available_languages,
    read_resource_file,
    tree_to_dict,
)
from modebridge.utils.exceptions import ResourceFileError


def _dirs(tmp_path):
    return tmp_path / "shared", tmp_path / "mode" / "_i18n"


def test_shared_and_mode_files_merge_under_one_language(tmp_path, write_json):
    shared, local = _dirs(tmp_path)
    write_json(shared / "en-US.json", {"_meta": {"target": "en-US"}, "hello": "Hi"})
    write_json(local / "en-US.json", {"_meta": {"target": "en-US"}, "start": "Go"})

    tree = ResourceMergeEngine(shared, local, "draw").build()
    catalog = Catalog(tree)

    assert tree["en-US"]["common"]["hello"] == "Hi"
    assert tree["en-US"]["modes"]["draw"]["start"] == "Go"
    assert catalog.t("common.hello") == "Hi"
    assert catalog.t("modes.draw.start") == "Go"
    assert catalog.t("modes.draw.missing") == "modes.draw.missing"


def test_map_files_are_not_translations(tmp_path, write_json):
    shared, local = _dirs(tmp_path)
    write_json(local / "en-US.json", {"_meta": {"target": "en-US"}, "start": "Go"})
    write_json(local / "draw.map.json", {"map": {"#go": "modes.draw.start"}})

    tree = ResourceMergeEngine(shared, local, "draw").build()
    assert list(tree) == ["en-US"]
    assert "map" not in tree["en-US"]["modes"]["draw"]


def test_bad_files_are_skipped(tmp_path, write_json):
    shared, local = _dirs(tmp_path)
    write_json(shared / "en-US.json", {"_meta": {"target": "en-US"}, "hello": "Hi"})
    (shared / "broken.json").write_text("{nope", encoding="utf-8")
    write_json(shared / "list.json", ["not", "an", "object"])
    write_json(shared / "nometa.json", {"hello": "?"})
    write_json(local / "fr-FR.json", {"_meta": {"target": ""}, "start": "Allez"})

    tree = ResourceMergeEngine(shared, local, "draw").build()
    assert list(tree) == ["en-US"]
    assert tree["en-US"]["common"]["hello"] == "Hi"


def test_language_only_in_mode_files_gets_an_entry(tmp_path, write_json):
    shared, local = _dirs(tmp_path)
    write_json(shared / "en-US.json", {"_meta": {"target": "en-US"}, "hello": "Hi"})
    write_json(local / "de-DE.json", {"_meta": {"target": "de-DE"}, "start": "Los"})

    tree = ResourceMergeEngine(shared, local, "draw").build()
    assert tree["de-DE"]["modes"]["draw"]["start"] == "Los"
    assert "common" not in tree["de-DE"]
    assert Catalog(tree, language="de-DE").t("common.hello") == "Hi"


def test_missing_directories_build_an_empty_tree(tmp_path):
    tree = ResourceMergeEngine(tmp_path / "nope", tmp_path / "also-nope", "draw").build()
    assert dict(tree) == {}


def test_tree_is_read_only_and_detached_from_sources(tmp_path, write_json):
    shared, local = _dirs(tmp_path)
    write_json(shared / "en-US.json", {"_meta": {"target": "en-US"}, "hello": "Hi"})
    tree = ResourceMergeEngine(shared, local, "draw").build()

    assert isinstance(tree, MappingProxyType)
    with pytest.raises(TypeError):
        tree["xx"] = {}
    with pytest.raises(TypeError):
        tree["en-US"]["common"]["hello"] = "changed"
    assert Catalog(tree).t("common.hello") == "Hi"
    plain = tree_to_dict(tree)
    plain["en-US"]["common"]["hello"] = "changed"
    assert tree["en-US"]["common"]["hello"] == "Hi"


def test_available_languages_uses_meta_name(tmp_path, write_json):
    shared, local = _dirs(tmp_path)
    write_json(shared / "en-US.json", {"_meta": {"target": "en-US", "name": "English"}})
    write_json(local / "de-DE.json", {"_meta": {"target": "de-DE"}})

    tree = ResourceMergeEngine(shared, local, "draw").build()
    assert available_languages(tree) == [
        {"code": "de-DE", "name": "de-DE"},
        {"code": "en-US", "name": "English"},
    ]


def test_read_resource_file_rejects_non_object(tmp_path, write_json):
    path = write_json(tmp_path / "x.json", [1])
    with pytest.raises(ResourceFileError) as exc:
        read_resource_file(path)
    assert exc.value.code == "RESOURCE_FILE_INVALID"
