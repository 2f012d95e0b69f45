"""Resolve ``$ref`` pointers and flatten composition keywords.

OpenAPI documents use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition and
``allOf`` / ``oneOf`` / ``anyOf`` to compose schemas.  :class:`SchemaResolver`
turns either kind of node into a concrete, directly inspectable schema:

* ``$ref`` -- the pointer is followed inside the document (RFC 6901 escaping,
  mapping keys and list indices).  A missing segment raises
  :class:`~structdoc.exceptions.ReferenceNotFoundError`; callers recover by
  treating the node as an empty object.
* ``allOf`` -- every member is resolved and the object members' property
  maps are shallow-merged, later members winning on key collision.
* ``oneOf`` / ``anyOf`` -- the first listed member stands in for the union.
  This loses the other branches on purpose: one representative example is
  enough for documentation.

Only **internal** references (those starting with ``#/``) are supported.

A resolver is bound to one document and lives for one transformation.  It
caches parsed reference targets by pointer string; the cache is discarded
with the instance, so nothing leaks between independent builds.  The
document itself is never modified.
"""

from __future__ import annotations

import logging
from typing import Any

from structdoc.exceptions import ReferenceNotFoundError
from structdoc.models import (
    CompositeSchema,
    ObjectSchema,
    ReferenceSchema,
    SchemaNode,
)
from structdoc.parser.schema import parse_schema

logger = logging.getLogger(__name__)


class SchemaResolver:
    """Resolves schema nodes against a single document.

    Args:
        document: The raw OpenAPI/Swagger document.  Treated as read-only.

    Example::

        resolver = SchemaResolver(document)
        pet = resolver.resolve(parse_schema({"$ref": "#/components/schemas/Pet"}))
        assert pet.kind == "object"
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = document
        self._cache: dict[str, SchemaNode] = {}

    @property
    def document(self) -> dict[str, Any]:
        """The document this resolver looks pointers up in."""
        return self._document

    # ------------------------------------------------------------------
    # Pointer lookup
    # ------------------------------------------------------------------

    def lookup_raw(self, ref: str) -> Any:
        """Return the raw value a ``$ref`` string points to.

        Used directly for parameter, request body and response references,
        whose targets are not schemas.

        Args:
            ref: The ``$ref`` string (e.g., ``"#/components/parameters/Limit"``).

        Returns:
            The value found at the referenced path, unparsed.

        Raises:
            ReferenceNotFoundError: If the reference is external or any
                segment in the pointer does not exist in the document.
        """
        if not ref.startswith("#/"):
            raise ReferenceNotFoundError(
                ref,
                f"External $ref not supported: {ref}. "
                "Only internal references (#/...) are handled.",
            )

        current: Any = self._document
        for segment in ref[2:].split("/"):
            # RFC 6901 escaping
            segment = segment.replace("~1", "/").replace("~0", "~")

            if isinstance(current, dict):
                if segment not in current:
                    raise ReferenceNotFoundError(
                        ref,
                        f"Cannot resolve $ref '{ref}': key '{segment}' not found at path",
                    )
                current = current[segment]
            elif isinstance(current, list):
                try:
                    current = current[int(segment)]
                except (ValueError, IndexError) as exc:
                    raise ReferenceNotFoundError(
                        ref,
                        f"Cannot resolve $ref '{ref}': invalid array index '{segment}'",
                    ) from exc
            else:
                raise ReferenceNotFoundError(
                    ref,
                    f"Cannot resolve $ref '{ref}': "
                    f"cannot navigate into {type(current).__name__}",
                )

        return current

    def lookup(self, ref: str) -> SchemaNode:
        """Return the parsed schema a ``$ref`` string points to, one level deep.

        Results are cached per pointer for the lifetime of this resolver.

        Raises:
            ReferenceNotFoundError: If the pointer cannot be followed.
        """
        cached = self._cache.get(ref)
        if cached is None:
            cached = parse_schema(self.lookup_raw(ref))
            self._cache[ref] = cached
        return cached

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, schema: SchemaNode) -> SchemaNode:
        """Replace a reference or composite node with its concrete form.

        Reference chains are followed until a non-reference node is reached.
        Primitive, object and array nodes are returned unchanged.

        Args:
            schema: Any schema variant.

        Returns:
            A node whose ``kind`` is ``primitive``, ``object`` or ``array``.

        Raises:
            ReferenceNotFoundError: If *schema* is a reference (or a chain of
                references) that cannot be followed.  Unresolvable
                ``allOf`` members do not raise; they count as empty objects.
        """
        return self._resolve(schema, frozenset(), set())

    def resolve_tracked(self, schema: SchemaNode) -> tuple[SchemaNode, set[str]]:
        """Like :meth:`resolve`, also returning every pointer followed on the way.

        The example synthesizer uses the pointer set to extend its cycle guard
        across references hidden inside composite members.
        """
        followed: set[str] = set()
        return self._resolve(schema, frozenset(), followed), followed

    def _resolve(
        self, schema: SchemaNode, chain: frozenset[str], followed: set[str]
    ) -> SchemaNode:
        if isinstance(schema, ReferenceSchema):
            if schema.ref in chain:
                logger.warning(
                    "Reference cycle through '%s' has no concrete schema; "
                    "using an empty object",
                    schema.ref,
                )
                return ObjectSchema()
            followed.add(schema.ref)
            return self._resolve(self.lookup(schema.ref), chain | {schema.ref}, followed)

        if isinstance(schema, CompositeSchema):
            if schema.keyword == "allOf":
                return self._merge_all_of(schema, chain, followed)
            # oneOf / anyOf: the first branch is the representative.
            if not schema.members:
                return ObjectSchema()
            return self._resolve(schema.members[0], chain, followed)

        return schema

    def _merge_all_of(
        self, schema: CompositeSchema, chain: frozenset[str], followed: set[str]
    ) -> SchemaNode:
        """Shallow-merge the object members of an ``allOf`` node.

        Later members override earlier ones on property collision.  When no
        member resolves to an object, the first resolved member is returned
        (the common ``allOf: [{$ref: ...}]`` wrapper around a scalar).
        """
        if not schema.members:
            return ObjectSchema()

        resolved: list[SchemaNode] = []
        for member in schema.members:
            try:
                resolved.append(self._resolve(member, chain, followed))
            except ReferenceNotFoundError as exc:
                logger.warning("Skipping unresolvable allOf member: %s", exc)
                resolved.append(ObjectSchema())

        objects = [node for node in resolved if isinstance(node, ObjectSchema)]
        if not objects:
            return resolved[0]

        properties: dict[str, SchemaNode] = {}
        required: list[str] = []
        for node in objects:
            properties.update(node.properties)
            for name in node.required:
                if name not in required:
                    required.append(name)

        merged: dict[str, Any] = {"properties": properties, "required": required}
        if schema.description is not None:
            merged["description"] = schema.description
        return ObjectSchema(**merged)


def resolve(schema: SchemaNode, document: dict[str, Any]) -> SchemaNode:
    """Resolve *schema* against *document* with a fresh, uncached resolver.

    Raises:
        ReferenceNotFoundError: If *schema* is an unresolvable reference.
    """
    return SchemaResolver(document).resolve(schema)
