import json

import pytest

from api_hurl_gen.generator.diagnostics import DiagnosticKind, DiagnosticSink, Scope
from api_hurl_gen.generator.request_body import RequestBodySynthesisError, render_request_body, synthesize_body
from api_hurl_gen.parser.base import Document, Schema
from api_hurl_gen.parser.openapi import parse_document


def _document(schemas: dict | None = None) -> Document:
    return parse_document({"openapi": "3.0.3", "paths": {}, "components": {"schemas": schemas or {}}})


def _body(schema: dict, schemas: dict | None = None, name: str | None = None) -> tuple[str | None, Scope]:
    scope = Scope(operation="op", path="/x", sink=DiagnosticSink())
    fragment = synthesize_body(_document(schemas), Schema.model_validate(schema), name, "$", scope)
    return fragment, scope


def _parsed(schema: dict, schemas: dict | None = None):
    fragment, _ = _body(schema, schemas)
    return json.loads(fragment)


class TestPrimitives:
    @pytest.mark.parametrize(
        "type_name, expected_type",
        [("boolean", bool), ("string", str), ("number", int), ("integer", int)],
    )
    def test_placeholder_parses_to_matching_type(self, type_name, expected_type):
        assert type(_parsed({"type": type_name})) is expected_type

    def test_named_fragment(self):
        fragment, _ = _body({"type": "boolean"}, name="active")
        assert fragment == '"active": false'

    def test_name_is_json_escaped(self):
        fragment, _ = _body({"type": "string"}, name='say "hi"')
        assert json.loads("{" + fragment + "}") == {'say "hi"': ""}


class TestObjects:
    def test_every_property_included(self):
        value = _parsed({
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}, "admin": {"type": "boolean"}},
        })
        assert value == {"name": "", "age": 0, "admin": False}

    def test_nested_object(self):
        value = _parsed({
            "type": "object",
            "properties": {"owner": {"type": "object", "properties": {"name": {"type": "string"}}}},
        })
        assert value == {"owner": {"name": ""}}

    def test_empty_object(self):
        assert _parsed({"type": "object"}) == {}

    def test_referenced_property(self):
        value = _parsed(
            {"type": "object", "properties": {"tag": {"$ref": "#/components/schemas/Tag"}}},
            schemas={"Tag": {"type": "object", "properties": {"label": {"type": "string"}}}},
        )
        assert value == {"tag": {"label": ""}}

    def test_unresolved_property_skipped(self):
        fragment, scope = _body({
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"$ref": "#/components/schemas/Nope"}},
        })
        assert json.loads(fragment) == {"a": ""}
        assert scope.sink.kinds() == [DiagnosticKind.MISSING_SCHEMA_REFERENCE]


class TestArrays:
    def test_array_of_objects(self):
        value = _parsed({"type": "array", "items": {"type": "object", "properties": {"id": {"type": "integer"}}}})
        assert value == [{"id": 0}]

    def test_named_array(self):
        fragment, _ = _body({"type": "array", "items": {"type": "string"}}, name="tags")
        assert fragment == '"tags": [""]'

    def test_array_without_items(self):
        fragment, _ = _body({"type": "array"})
        assert fragment is None


class TestReadOnly:
    def test_read_only_skipped_at_any_depth(self):
        value = _parsed({
            "type": "object",
            "properties": {
                "id": {"type": "integer", "readOnly": True},
                "name": {"type": "string"},
                "items": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "created": {"type": "string", "readOnly": True},
                            "sku": {"type": "string"},
                        },
                    },
                },
            },
        })
        assert value == {"name": "", "items": [{"sku": ""}]}

    def test_read_only_root(self):
        fragment, _ = _body({"type": "object", "readOnly": True})
        assert fragment is None

    def test_write_only_included(self):
        assert _parsed({"type": "object", "properties": {"password": {"type": "string", "writeOnly": True}}}) == {
            "password": ""
        }


class TestAllOf:
    def test_disjoint_objects_are_merged(self):
        value = _parsed({
            "allOf": [
                {"type": "object", "properties": {"a": {"type": "string"}}},
                {"type": "object", "properties": {"b": {"type": "integer"}}},
            ]
        })
        assert value == {"a": "", "b": 0}

    def test_overlapping_property_last_member_wins(self):
        fragment, _ = _body({
            "allOf": [
                {"type": "object", "properties": {"x": {"type": "string"}, "y": {"type": "boolean"}}},
                {"type": "object", "properties": {"x": {"type": "integer"}}},
            ]
        })
        value = json.loads(fragment)
        assert value == {"x": 0, "y": False}
        assert list(value) == ["x", "y"]

    def test_named_all_of(self):
        fragment, _ = _body(
            {"allOf": [{"$ref": "#/components/schemas/Base"}]},
            schemas={"Base": {"type": "object", "properties": {"id": {"type": "integer"}}}},
            name="base",
        )
        assert json.loads("{" + fragment + "}") == {"base": {"id": 0}}

    def test_properties_beside_all_of_merged_last(self):
        fragment, scope = _body({
            "type": "object",
            "properties": {"own": {"type": "string"}, "id": {"type": "string"}},
            "allOf": [{"type": "object", "properties": {"id": {"type": "integer"}, "base": {"type": "integer"}}}],
        })
        value = json.loads(fragment)
        assert value == {"id": "", "base": 0, "own": ""}
        assert list(value) == ["id", "base", "own"]
        assert len(scope.sink) == 0

    def test_single_primitive_member(self):
        assert _parsed({"allOf": [{"type": "string"}]}) == ""

    def test_members_with_nothing_to_add(self):
        fragment, _ = _body({"allOf": [{"type": "string", "readOnly": True}]})
        assert fragment is None

    def test_object_with_only_read_only_fields_contributes_nothing(self):
        value = _parsed({
            "allOf": [
                {"type": "object", "properties": {"id": {"type": "integer", "readOnly": True}}},
                {"type": "object", "properties": {"name": {"type": "string"}}},
            ]
        })
        assert value == {"name": ""}


class TestUnsupported:
    def test_any_of_property_reported(self):
        fragment, scope = _body({
            "type": "object",
            "properties": {"v": {"anyOf": [{"type": "string"}]}, "w": {"type": "string"}},
        })
        assert json.loads(fragment) == {"w": ""}
        [diagnostic] = scope.sink
        assert diagnostic.kind is DiagnosticKind.UNSUPPORTED_SCHEMA_KIND
        assert diagnostic.detail == "anyOf"
        assert diagnostic.jsonpath == "$.v"


class TestCycles:
    def test_via_intermediate_object(self):
        schemas = {
            "Person": {
                "type": "object",
                "properties": {"name": {"type": "string"}, "employer": {"$ref": "#/components/schemas/Company"}},
            },
            "Company": {
                "type": "object",
                "properties": {"title": {"type": "string"}, "ceo": {"$ref": "#/components/schemas/Person"}},
            },
        }
        doc = _document(schemas)
        scope = Scope(operation="op", path="/x", sink=DiagnosticSink())
        fragment = synthesize_body(doc, doc.components.schemas["Person"], None, "$", scope)
        assert json.loads(fragment) == {"name": "", "employer": {"title": ""}}
        [diagnostic] = scope.sink
        assert diagnostic.kind is DiagnosticKind.REQUEST_BODY_SCHEMA_CYCLE
        assert diagnostic.jsonpath == "$.employer.ceo"


class TestRenderRequestBody:
    def test_pretty_printed(self):
        assert render_request_body('{\n"name": "",\n"tags": [""]\n}') == '{\n  "name": "",\n  "tags": [\n    ""\n  ]\n}'

    def test_invalid_fragment_is_fatal(self):
        with pytest.raises(RequestBodySynthesisError):
            render_request_body('0,\n""')

    def test_all_of_primitives_is_fatal(self):
        fragment, _ = _body({"allOf": [{"type": "string"}, {"type": "integer"}]})
        with pytest.raises(RequestBodySynthesisError):
            render_request_body(fragment)
