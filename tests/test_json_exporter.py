# tests/test_json_exporter.py

from __future__ import annotations

import json

from gedcom_graph.analysis import Analyzer
from gedcom_graph.exporter import (
    export_tree_json,
    serialize_tree_to_json_string,
    tree_to_dict,
)


def test_tree_to_dict_shape(extended_tree) -> None:
    data = tree_to_dict(extended_tree)

    assert set(data) >= {
        "header", "individuals", "families", "repositories",
        "sources", "submitters", "multimedia", "counts",
    }
    assert data["counts"]["individuals"] == 4
    assert "analysis" not in data


def test_enums_sets_and_private_fields(extended_tree) -> None:
    john = tree_to_dict(extended_tree)["individuals"]["@I1@"]

    assert john["sex"] == "MALE"
    assert john["fam_spouse"] == ["@F1@"]
    assert john["fam_child"] == {"@F0@": "BIRTH"}
    assert [e["kind"] for e in john["events"]] == ["BIRTH", "RESIDENCE", "RESIDENCE"]
    assert "_events" not in john
    assert "SINGULAR_EVENT_KINDS" not in john
    assert john["custom_data"] == [{"tag": "_UID", "value": "0123456789"}]


def test_family_and_source_data(extended_tree) -> None:
    data = tree_to_dict(extended_tree)
    family = data["families"]["@F1@"]
    assert family["husbs"] == ["@I1@"]
    assert family["events"][0]["date"] == "5 MAY 1895"

    source = data["sources"][0]
    assert source["data"]["events"][0]["source_data"] == "BIRT, DEAT"


def test_analysis_section(simple_tree) -> None:
    data = tree_to_dict(simple_tree, Analyzer(simple_tree))
    assert data["analysis"] == {
        "individuals_sorted": ["@CHILD@", "@FATHER@", "@MOTHER@"],
        "components": [["@CHILD@", "@FATHER@", "@MOTHER@"]],
    }


def test_serialized_string_is_valid_json(simple_tree) -> None:
    compact = serialize_tree_to_json_string(simple_tree, indent=None)
    assert "\n" not in compact
    assert json.loads(compact)["header"]["encoding"] == "ASCII"


def test_export_writes_file(tmp_path, extended_tree) -> None:
    out = tmp_path / "nested" / "tree.json"
    export_tree_json(extended_tree, out, Analyzer(extended_tree))

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["analysis"]["components"] == [["@I1@", "@I2@", "@I3@"], ["@I4@"]]
    assert data["submitters"][0]["address"]["value"] == "12 High Street\nFlat 3 rear entrance"
