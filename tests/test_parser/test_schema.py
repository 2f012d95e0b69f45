"""Tests for structdoc.parser.schema."""

from __future__ import annotations

import copy

from structdoc.models import (
    ArraySchema,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
)
from structdoc.parser.schema import parse_schema


class TestParseSchema:
    """Variant selection and field mapping."""

    def test_reference_wins_over_siblings(self) -> None:
        node = parse_schema({"$ref": "#/components/schemas/Pet", "type": "object"})
        assert isinstance(node, ReferenceSchema)
        assert node.ref == "#/components/schemas/Pet"

    def test_composite_keeps_member_order(self) -> None:
        node = parse_schema({"oneOf": [{"type": "string"}, {"type": "integer"}]})
        assert isinstance(node, CompositeSchema)
        assert node.keyword == "oneOf"
        assert [m.type for m in node.members] == ["string", "integer"]

    def test_composite_sibling_properties_become_trailing_member(self) -> None:
        node = parse_schema({
            "allOf": [{"$ref": "#/components/schemas/Base"}],
            "properties": {"extra": {"type": "boolean"}},
        })
        assert isinstance(node, CompositeSchema)
        assert len(node.members) == 2
        assert isinstance(node.members[1], ObjectSchema)
        assert list(node.members[1].properties) == ["extra"]

    def test_object_from_properties_without_type(self) -> None:
        node = parse_schema({"properties": {"b": {"type": "string"}, "a": {"type": "integer"}}})
        assert isinstance(node, ObjectSchema)
        assert list(node.properties) == ["b", "a"]

    def test_object_required(self) -> None:
        node = parse_schema({"type": "object", "required": ["id"], "properties": {}})
        assert isinstance(node, ObjectSchema)
        assert node.required == ["id"]

    def test_array_with_and_without_items(self) -> None:
        with_items = parse_schema({"type": "array", "items": {"type": "string"}})
        assert isinstance(with_items, ArraySchema)
        assert isinstance(with_items.items, PrimitiveSchema)

        bare = parse_schema({"type": "array"})
        assert isinstance(bare, ArraySchema)
        assert bare.items is None

    def test_primitive_with_format_and_enum(self) -> None:
        node = parse_schema({"type": "string", "format": "email", "enum": ["a", "b"]})
        assert isinstance(node, PrimitiveSchema)
        assert node.format == "email"
        assert node.enum == ["a", "b"]

    def test_enum_on_object_type_stays_primitive(self) -> None:
        node = parse_schema({"type": "object", "enum": [{"a": 1}]})
        assert isinstance(node, PrimitiveSchema)
        assert node.enum == [{"a": 1}]

    def test_type_list_narrows_to_first_non_null(self) -> None:
        assert parse_schema({"type": ["null", "integer"]}).type == "integer"
        assert parse_schema({"type": ["null"]}).type == "null"

    def test_non_mapping_is_untyped_primitive(self) -> None:
        node = parse_schema("not a schema")
        assert isinstance(node, PrimitiveSchema)
        assert node.type is None


class TestExplicitExample:
    """``has_example`` tracks whether the key was present."""

    def test_absent_example(self) -> None:
        assert parse_schema({"type": "string"}).has_example is False

    def test_present_example(self) -> None:
        node = parse_schema({"type": "string", "example": "X"})
        assert node.has_example is True
        assert node.example == "X"

    def test_null_example_counts(self) -> None:
        node = parse_schema({"type": "string", "example": None})
        assert node.has_example is True
        assert node.example is None

    def test_does_not_mutate_input(self) -> None:
        raw = {
            "allOf": [{"$ref": "#/components/schemas/A"}],
            "properties": {"x": {"type": "array", "items": {"type": "string"}}},
            "example": {"x": ["y"]},
        }
        snapshot = copy.deepcopy(raw)
        parse_schema(raw)
        assert raw == snapshot
