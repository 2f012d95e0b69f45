"""Convert raw JSON-Schema-like nodes into the :data:`~structdoc.models.SchemaNode` variant.

OpenAPI documents describe schemas as loosely structured mappings.  This
module sniffs each mapping once and produces exactly one typed variant so
that the resolver and the example synthesizer can dispatch on ``kind``
instead of probing for keys.

Precedence when a node carries several markers:

1. ``$ref`` -- :class:`~structdoc.models.ReferenceSchema` (siblings ignored,
   as OpenAPI 3.0 mandates).
2. ``allOf`` / ``oneOf`` / ``anyOf`` -- :class:`~structdoc.models.CompositeSchema`.
   Sibling ``properties`` become a trailing object member.
3. ``type: object`` or ``properties`` -- :class:`~structdoc.models.ObjectSchema`.
4. ``type: array`` or ``items`` -- :class:`~structdoc.models.ArraySchema`.
5. Anything else -- :class:`~structdoc.models.PrimitiveSchema`.

The input is never modified.
"""

from __future__ import annotations

from typing import Any

from structdoc.models import (
    ArraySchema,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaNode,
)

_COMPOSITE_KEYWORDS = ("allOf", "oneOf", "anyOf")


def parse_schema(raw: Any) -> SchemaNode:
    """Parse a raw schema node into its typed variant.

    Args:
        raw: A schema mapping from the document.  Non-mapping values (which
            only occur in malformed documents) become an untyped
            :class:`~structdoc.models.PrimitiveSchema`.

    Returns:
        The matching :data:`~structdoc.models.SchemaNode` variant.

    Example::

        >>> parse_schema({"$ref": "#/components/schemas/Pet"}).kind
        'reference'
        >>> parse_schema({"type": ["string", "null"]}).type
        'string'
    """
    if not isinstance(raw, dict):
        return PrimitiveSchema()

    common = _common_fields(raw)

    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ReferenceSchema(ref=ref, **common)

    for keyword in _COMPOSITE_KEYWORDS:
        members_raw = raw.get(keyword)
        if isinstance(members_raw, list):
            members = [parse_schema(member) for member in members_raw]
            if isinstance(raw.get("properties"), dict):
                members.append(_parse_object(raw, {}))
            return CompositeSchema(keyword=keyword, members=members, **common)

    schema_type = _schema_type(raw.get("type"))

    if "enum" not in raw:
        if schema_type == "object" or isinstance(raw.get("properties"), dict):
            return _parse_object(raw, common)
        if schema_type == "array" or "items" in raw:
            items_raw = raw.get("items")
            items = parse_schema(items_raw) if isinstance(items_raw, dict) else None
            return ArraySchema(items=items, **common)

    enum_values = raw.get("enum")
    return PrimitiveSchema(
        type=schema_type,
        format=raw.get("format") if isinstance(raw.get("format"), str) else None,
        enum=list(enum_values) if isinstance(enum_values, list) else None,
        **common,
    )


def _parse_object(raw: dict[str, Any], common: dict[str, Any]) -> ObjectSchema:
    """Build an :class:`~structdoc.models.ObjectSchema`, keeping property order."""
    properties_raw = raw.get("properties")
    properties: dict[str, SchemaNode] = {}
    if isinstance(properties_raw, dict):
        for name, prop in properties_raw.items():
            properties[str(name)] = parse_schema(prop)

    required_raw = raw.get("required")
    required = [str(r) for r in required_raw] if isinstance(required_raw, list) else []

    return ObjectSchema(properties=properties, required=required, **common)


def _common_fields(raw: dict[str, Any]) -> dict[str, Any]:
    """Collect the fields every variant carries.

    ``example`` is only passed through when the key exists so that
    ``has_example`` reflects the source document.
    """
    fields: dict[str, Any] = {}
    description = raw.get("description")
    if isinstance(description, str):
        fields["description"] = description
    if "example" in raw:
        fields["example"] = raw["example"]
    return fields


def _schema_type(type_value: Any) -> str | None:
    """Normalise the ``type`` keyword to a single string.

    OpenAPI 3.1 allows a list such as ``["string", "null"]``; the first
    non-null entry wins, and a list of only ``"null"`` yields ``"null"``.
    """
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        if non_null:
            return str(non_null[0])
        return "null" if type_value else None
    if isinstance(type_value, str):
        return type_value
    return None
