"""
Tests for fragment merging, schema closure and the document envelope.
"""

from __future__ import annotations

import json

from contractrest.openapi.document import (
    OPENAPI_VERSION,
    build_document,
    empty_fragment,
    merge_fragments,
    schema_closure,
    write_document,
)


def ref(name: str) -> dict:
    return {"$ref": f"#/components/schemas/{name}"}


class TestMergeFragments:
    def test_empty(self):
        assert merge_fragments([]) == empty_fragment()

    def test_union_of_paths_and_schemas(self):
        merged = merge_fragments(
            [
                {"paths": {"/a/op": {}}, "components": {"schemas": {"a.X": {}}}},
                {"paths": {"/b/op": {}}, "components": {"schemas": {"b.X": {}}}},
            ]
        )
        assert set(merged["paths"]) == {"/a/op", "/b/op"}
        assert set(merged["components"]["schemas"]) == {"a.X", "b.X"}

    def test_fragments_without_keys(self):
        merged = merge_fragments([{}, {"paths": {"/p": {}}}, {"components": {}}])
        assert merged == {"paths": {"/p": {}}, "components": {"schemas": {}}}

    def test_later_fragment_wins(self):
        merged = merge_fragments([{"paths": {"/p": {"v": 1}}}, {"paths": {"/p": {"v": 2}}}])
        assert merged["paths"]["/p"] == {"v": 2}


class TestSchemaClosure:
    definitions = {
        "Car": {"properties": {"owner": ref("Owner")}},
        "Owner": {"properties": {"address": ref("Address")}},
        "Address": {"type": "object"},
        "Loop": {"items": ref("Loop")},
        "Unused": {},
    }

    def test_transitive(self):
        assert list(schema_closure([ref("Car")], self.definitions)) == ["Car", "Owner", "Address"]

    def test_cycles_terminate(self):
        assert list(schema_closure([ref("Loop")], self.definitions)) == ["Loop"]

    def test_unknown_refs_ignored(self):
        assert schema_closure([ref("Missing"), {"type": "string"}], self.definitions) == {}

    def test_no_roots(self):
        assert schema_closure([], self.definitions) == {}

    def test_unreferenced_definitions_dropped(self):
        closure = schema_closure([{"properties": {"car": ref("Car")}}], self.definitions)
        assert "Unused" not in closure
        assert "Loop" not in closure


class TestBuildDocument:
    def test_envelope(self):
        doc = build_document(
            {"paths": {"/p": {}}, "components": {"schemas": {"S": {}}}},
            title="FabCar REST",
            version="1.0.0",
        )
        assert doc == {
            "openapi": OPENAPI_VERSION,
            "info": {"title": "FabCar REST", "version": "1.0.0"},
            "paths": {"/p": {}},
            "components": {"schemas": {"S": {}}},
        }

    def test_empty_fragment(self):
        doc = build_document({}, title="t", version="v")
        assert doc["paths"] == {}
        assert doc["components"] == {"schemas": {}}


class TestWriteDocument:
    def test_writes_indented_json(self, tmp_path):
        target = tmp_path / "out" / "swagger.json"
        doc = build_document(empty_fragment(), title="t", version="v")
        path = write_document(doc, target)
        assert path == target
        text = target.read_text(encoding="utf-8")
        assert json.loads(text) == doc
        assert text.startswith("{\n  ")

    def test_overwrites(self, tmp_path):
        target = tmp_path / "swagger.json"
        target.write_text("old", encoding="utf-8")
        write_document({"openapi": "3.0.0"}, str(target))
        assert json.loads(target.read_text(encoding="utf-8")) == {"openapi": "3.0.0"}
