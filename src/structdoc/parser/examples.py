"""Synthesize concrete example values from schema nodes.

:class:`ExampleSynthesizer` walks a :data:`~structdoc.models.SchemaNode` and
produces a JSON-compatible value that conforms to it.  The rules, in order:

1. An explicit ``example`` on the node is returned verbatim.
2. References are checked against the ``visiting`` set of pointers on the
   current descent.  A pointer already on the stack yields
   :data:`CIRCULAR_REFERENCE` instead of recursing; otherwise it is pushed,
   resolved, synthesized and popped again.
3. ``allOf`` members are synthesized one by one and their objects merged,
   later members winning.  ``oneOf`` / ``anyOf`` nodes are narrowed to their
   first branch via the :class:`~structdoc.parser.resolver.SchemaResolver`.
4. Objects map each declared property, in declaration order.
5. Arrays hold exactly one synthesized element.
6. Enums yield their first value.
7. Primitives yield a fixed literal chosen by ``type`` and ``format``.

Synthesis is a pure function of the schema and the document: no randomness,
no clock, no state carried between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from structdoc.exceptions import ReferenceNotFoundError
from structdoc.models import (
    ArraySchema,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaNode,
)
from structdoc.parser.resolver import SchemaResolver

logger = logging.getLogger(__name__)

CIRCULAR_REFERENCE = "[Circular Reference]"
"""Placeholder emitted where a schema refers back to one of its ancestors."""

_STRING_FORMATS: dict[str, str] = {
    "email": "user@example.com",
    "date-time": "2024-01-01T00:00:00Z",
    "date": "2024-01-01",
    "uuid": "123e4567-e89b-12d3-a456-426614174000",
    "uri": "https://example.com",
    "url": "https://example.com",
}

_TYPE_EXAMPLES: dict[str, Any] = {
    "string": "string",
    "integer": 123,
    "number": 123,
    "boolean": True,
}


class ExampleSynthesizer:
    """Produces example values for schemas of one document.

    Args:
        resolver: The resolver bound to the document the schemas come from.
    """

    def __init__(self, resolver: SchemaResolver) -> None:
        self._resolver = resolver

    def synthesize(self, schema: SchemaNode, visiting: Optional[set[str]] = None) -> Any:
        """Return an example value for *schema*.

        Args:
            schema: Any schema variant.
            visiting: Pointers currently being expanded on this descent.
                ``None`` starts a fresh root descent.  The set is restored
                to its original contents before returning.

        Returns:
            A JSON-compatible value (dict, list, str, int, bool or ``None``).

        Example::

            synth = ExampleSynthesizer(SchemaResolver(document))
            synth.synthesize(parse_schema({"type": "string", "format": "email"}))
            # 'user@example.com'
        """
        if visiting is None:
            visiting = set()

        if schema.has_example:
            return schema.example

        if isinstance(schema, ReferenceSchema):
            return self._synthesize_reference(schema, visiting)

        if isinstance(schema, CompositeSchema):
            return self._synthesize_composite(schema, visiting)

        if isinstance(schema, ObjectSchema):
            return {
                name: self.synthesize(prop, visiting)
                for name, prop in schema.properties.items()
            }

        if isinstance(schema, ArraySchema):
            if schema.items is None:
                return [None]
            return [self.synthesize(schema.items, visiting)]

        return _primitive_example(schema)

    def _synthesize_reference(self, schema: ReferenceSchema, visiting: set[str]) -> Any:
        if schema.ref in visiting:
            return CIRCULAR_REFERENCE

        visiting.add(schema.ref)
        try:
            try:
                target = self._resolver.lookup(schema.ref)
            except ReferenceNotFoundError as exc:
                logger.warning("Treating unresolvable reference as an empty object: %s", exc)
                return {}
            return self.synthesize(target, visiting)
        finally:
            visiting.discard(schema.ref)

    def _synthesize_composite(self, schema: CompositeSchema, visiting: set[str]) -> Any:
        if schema.keyword == "allOf":
            return self._synthesize_all_of(schema, visiting)

        # Pointers followed while picking the branch join the guard like direct refs.
        try:
            resolved, followed = self._resolver.resolve_tracked(schema)
        except ReferenceNotFoundError as exc:
            logger.warning("Treating unresolvable composite as an empty object: %s", exc)
            return {}

        if followed & visiting:
            return CIRCULAR_REFERENCE

        visiting.update(followed)
        try:
            return self.synthesize(resolved, visiting)
        finally:
            visiting.difference_update(followed)

    def _synthesize_all_of(self, schema: CompositeSchema, visiting: set[str]) -> Any:
        """Synthesize each member separately and merge the object results.

        Later members win on key collision.  When no member yields an
        object, the first member's value stands for the whole node.
        """
        if not schema.members:
            return {}

        values = [self.synthesize(member, visiting) for member in schema.members]
        objects = [value for value in values if isinstance(value, dict)]
        if not objects:
            return values[0]

        merged: dict[str, Any] = {}
        for value in objects:
            merged.update(value)
        return merged


def _primitive_example(schema: PrimitiveSchema) -> Any:
    """Pick the literal for a scalar node: first enum value, then by type/format."""
    if schema.enum:
        return schema.enum[0]

    if schema.type == "string":
        if schema.format is not None:
            return _STRING_FORMATS.get(schema.format, "string")
        return "string"

    return _TYPE_EXAMPLES.get(schema.type or "")


def synthesize(
    schema: SchemaNode,
    document: dict[str, Any],
    visiting: Optional[set[str]] = None,
) -> Any:
    """Synthesize an example for *schema* drawn from *document*.

    Builds a fresh resolver, so repeated calls share nothing.
    """
    return ExampleSynthesizer(SchemaResolver(document)).synthesize(schema, visiting)
