"""Tests for structdoc.parser.resolver."""

from __future__ import annotations

import copy
import logging
from typing import Any

import pytest

from structdoc.exceptions import ReferenceNotFoundError
from structdoc.models import ObjectSchema, PrimitiveSchema
from structdoc.parser.resolver import SchemaResolver, resolve
from structdoc.parser.schema import parse_schema


def _doc(**schemas: Any) -> dict[str, Any]:
    return {"openapi": "3.0.0", "components": {"schemas": schemas}}


# ---------------------------------------------------------------------------
# lookup_raw
# ---------------------------------------------------------------------------


class TestLookupRaw:
    """JSON Pointer navigation inside the document."""

    def test_simple_pointer(self) -> None:
        doc = _doc(Pet={"type": "object"})
        assert SchemaResolver(doc).lookup_raw("#/components/schemas/Pet") == {"type": "object"}

    def test_rfc6901_escaping(self) -> None:
        doc = {"paths": {"/pets/{id}": {"get": {"x": 1}}}, "a~b": {"c": 2}}
        resolver = SchemaResolver(doc)
        assert resolver.lookup_raw("#/paths/~1pets~1{id}/get") == {"x": 1}
        assert resolver.lookup_raw("#/a~0b/c") == 2

    def test_list_index(self) -> None:
        doc = {"servers": [{"url": "a"}, {"url": "b"}]}
        assert SchemaResolver(doc).lookup_raw("#/servers/1/url") == "b"

    def test_swagger2_definitions(self) -> None:
        doc = {"definitions": {"Pet": {"type": "object"}}}
        assert SchemaResolver(doc).lookup_raw("#/definitions/Pet") == {"type": "object"}

    def test_missing_segment_raises(self) -> None:
        with pytest.raises(ReferenceNotFoundError, match="Missing") as exc_info:
            SchemaResolver(_doc()).lookup_raw("#/components/schemas/Missing")
        assert exc_info.value.ref == "#/components/schemas/Missing"

    def test_bad_list_index_raises(self) -> None:
        with pytest.raises(ReferenceNotFoundError):
            SchemaResolver({"servers": []}).lookup_raw("#/servers/3")

    def test_external_ref_raises(self) -> None:
        with pytest.raises(ReferenceNotFoundError, match="External"):
            SchemaResolver({}).lookup_raw("other.yaml#/Pet")


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


class TestResolve:
    """Reference following and composite flattening."""

    def test_concrete_schema_returned_unchanged(self) -> None:
        node = parse_schema({"type": "string"})
        assert resolve(node, {}) is node

    def test_follows_reference(self) -> None:
        doc = _doc(Pet={"type": "object", "properties": {"name": {"type": "string"}}})
        result = resolve(parse_schema({"$ref": "#/components/schemas/Pet"}), doc)
        assert isinstance(result, ObjectSchema)
        assert list(result.properties) == ["name"]

    def test_follows_reference_chain(self) -> None:
        doc = _doc(A={"$ref": "#/components/schemas/B"}, B={"type": "integer"})
        result = resolve(parse_schema({"$ref": "#/components/schemas/A"}), doc)
        assert isinstance(result, PrimitiveSchema)
        assert result.type == "integer"

    def test_missing_reference_raises(self) -> None:
        with pytest.raises(ReferenceNotFoundError):
            resolve(parse_schema({"$ref": "#/components/schemas/Nope"}), _doc())

    def test_all_of_merges_properties(self) -> None:
        node = parse_schema({
            "allOf": [
                {"properties": {"a": {"type": "string"}}},
                {"properties": {"b": {"type": "integer"}}},
            ]
        })
        result = resolve(node, {})
        assert isinstance(result, ObjectSchema)
        assert list(result.properties) == ["a", "b"]

    def test_all_of_last_member_wins(self) -> None:
        node = parse_schema({
            "allOf": [
                {"properties": {"a": {"type": "string"}}},
                {"properties": {"a": {"type": "integer"}}},
            ]
        })
        result = resolve(node, {})
        assert result.properties["a"].type == "integer"

    def test_all_of_unions_required(self) -> None:
        doc = _doc(Base={"type": "object", "required": ["id"], "properties": {"id": {}}})
        node = parse_schema({
            "allOf": [
                {"$ref": "#/components/schemas/Base"},
                {"type": "object", "required": ["name", "id"], "properties": {"name": {}}},
            ]
        })
        result = resolve(node, doc)
        assert result.required == ["id", "name"]

    def test_all_of_unresolvable_member_is_empty_object(self, caplog: pytest.LogCaptureFixture) -> None:
        node = parse_schema({
            "allOf": [
                {"$ref": "#/components/schemas/Gone"},
                {"properties": {"ok": {"type": "boolean"}}},
            ]
        })
        with caplog.at_level(logging.WARNING, logger="structdoc"):
            result = resolve(node, _doc())
        assert list(result.properties) == ["ok"]
        assert "Gone" in caplog.text

    def test_all_of_without_objects_returns_first_member(self) -> None:
        doc = _doc(Id={"type": "string", "format": "uuid"})
        result = resolve(parse_schema({"allOf": [{"$ref": "#/components/schemas/Id"}]}), doc)
        assert isinstance(result, PrimitiveSchema)
        assert result.format == "uuid"

    def test_one_of_picks_first_branch(self) -> None:
        node = parse_schema({"oneOf": [{"type": "string"}, {"type": "integer"}]})
        assert resolve(node, {}).type == "string"

    def test_any_of_picks_first_branch(self) -> None:
        node = parse_schema({"anyOf": [{"type": "boolean"}, {"type": "string"}]})
        assert resolve(node, {}).type == "boolean"

    def test_empty_composite_is_empty_object(self) -> None:
        result = resolve(parse_schema({"oneOf": []}), {})
        assert isinstance(result, ObjectSchema)
        assert result.properties == {}

    def test_reference_cycle_yields_empty_object(
        self, circular_doc: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="structdoc"):
            result = resolve(parse_schema({"$ref": "#/components/schemas/Loop"}), circular_doc)
        assert isinstance(result, ObjectSchema)
        assert "cycle" in caplog.text

    def test_self_referencing_all_of_terminates(self, circular_doc: dict[str, Any]) -> None:
        result = resolve(parse_schema({"$ref": "#/components/schemas/SelfAllOf"}), circular_doc)
        assert isinstance(result, ObjectSchema)

    def test_resolve_tracked_reports_followed_pointers(self) -> None:
        doc = _doc(A={"$ref": "#/components/schemas/B"}, B={"type": "string"})
        node = parse_schema({"oneOf": [{"$ref": "#/components/schemas/A"}]})
        result, followed = SchemaResolver(doc).resolve_tracked(node)
        assert result.type == "string"
        assert followed == {"#/components/schemas/A", "#/components/schemas/B"}

    def test_does_not_mutate_document(self, users_doc: dict[str, Any]) -> None:
        snapshot = copy.deepcopy(users_doc)
        resolver = SchemaResolver(users_doc)
        for name in users_doc["components"]["schemas"]:
            resolver.resolve(parse_schema({"$ref": f"#/components/schemas/{name}"}))
        assert users_doc == snapshot


class TestCache:
    """Per-instance caching of parsed targets."""

    def test_lookup_is_cached(self) -> None:
        resolver = SchemaResolver(_doc(Pet={"type": "object"}))
        first = resolver.lookup("#/components/schemas/Pet")
        assert resolver.lookup("#/components/schemas/Pet") is first

    def test_cache_not_shared_between_instances(self) -> None:
        doc = _doc(Pet={"type": "object"})
        first = SchemaResolver(doc).lookup("#/components/schemas/Pet")
        second = SchemaResolver(doc).lookup("#/components/schemas/Pet")
        assert first is not second
