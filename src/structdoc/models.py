"""Canonical Pydantic models shared across all structdoc modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in ``structdoc.json``:
    :class:`DocsConfig`.

**Schema models** -- a tagged variant over the JSON-Schema-like nodes found in
an OpenAPI document, discriminated by ``kind``:
    :class:`PrimitiveSchema`, :class:`ObjectSchema`, :class:`ArraySchema`,
    :class:`ReferenceSchema`, :class:`CompositeSchema`, and the union alias
    :data:`SchemaNode`.

**Documentation models** -- the section/module/endpoint tree produced by the
grouping engine and consumed by renderers:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`ErrorDescriptor`, :class:`EndpointDescriptor`, :class:`Module`,
    :class:`Section`, :class:`ServerInfo`, and :class:`Documentation`.

Documentation models serialise with camelCase aliases (``requiresAuth``,
``successStatus``) so the JSON they produce matches what template renderers
expect.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# --- Config ---


class DocsConfig(BaseModel):
    """User-supplied settings for a documentation build.

    Loaded by :func:`~structdoc.config.resolve_config` from ``--config``,
    ``$STRUCTDOC_CONFIG`` or ``./structdoc.json``. Every field is optional;
    an empty file yields the defaults.

    Example::

        DocsConfig(title="Pet API", tags=["Pets"], exclude_deprecated=True)
    """

    title: Optional[str] = Field(
        default=None, description="Overrides info.title from the document"
    )
    description: Optional[str] = Field(
        default=None, description="Overrides info.description from the document"
    )
    version: Optional[str] = Field(
        default=None, description="Overrides info.version from the document"
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Only keep sections for these tags (empty keeps all)",
    )
    default_tag: str = Field(
        default="Default", description="Section name for untagged operations"
    )
    exclude_deprecated: bool = Field(
        default=False, description="Drop operations marked deprecated"
    )


# --- Schema variant ---


class _SchemaBase(BaseModel):
    """Fields shared by every schema variant.

    ``example`` is only considered explicit when it was actually supplied;
    an ``example: null`` in the source document still counts.
    """

    description: Optional[str] = None
    example: Any = None

    @property
    def has_example(self) -> bool:
        """Whether the source node declared an ``example`` key."""
        return "example" in self.model_fields_set


class PrimitiveSchema(_SchemaBase):
    """A scalar node (``string``, ``integer``, ``number``, ``boolean``, ``null``).

    Also used for nodes with no recognisable shape at all, in which case
    ``type`` is ``None``.
    """

    kind: Literal["primitive"] = "primitive"
    type: Optional[str] = None
    format: Optional[str] = None
    enum: Optional[list[Any]] = None


class ObjectSchema(_SchemaBase):
    """An object node; ``properties`` keeps declaration order."""

    kind: Literal["object"] = "object"
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ArraySchema(_SchemaBase):
    kind: Literal["array"] = "array"
    items: Optional[SchemaNode] = None


class ReferenceSchema(_SchemaBase):
    """A ``$ref`` pointer, e.g. ``#/components/schemas/Pet``."""

    kind: Literal["reference"] = "reference"
    ref: str


class CompositeSchema(_SchemaBase):
    """An ``allOf`` / ``oneOf`` / ``anyOf`` node with its ordered members."""

    kind: Literal["composite"] = "composite"
    keyword: Literal["allOf", "oneOf", "anyOf"]
    members: list[SchemaNode] = Field(default_factory=list)


SchemaNode = Annotated[
    Union[PrimitiveSchema, ObjectSchema, ArraySchema, ReferenceSchema, CompositeSchema],
    Field(discriminator="kind"),
]
"""Union of all schema variants, discriminated by the ``kind`` field."""


ObjectSchema.model_rebuild()
ArraySchema.model_rebuild()
CompositeSchema.model_rebuild()


# --- Documentation models ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs that turn a path-item key into an operation."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    OPTIONS = "options"
    HEAD = "head"


class ParameterLocation(str, enum.Enum):
    """Locations where a parameter can appear, per the OpenAPI ``in`` field.

    ``body`` and ``formData`` only occur in Swagger 2.x documents.
    """

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"
    FORM_DATA = "formData"


class _DocModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Parameter(_DocModel):
    """A single operation parameter with its resolved schema and example."""

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")
    example: Any = None


class ErrorDescriptor(_DocModel):
    """One declared error response (status >= 400)."""

    status: int
    description: Optional[str] = None
    message: str
    error: Optional[str] = None
    example: Any = None


class EndpointDescriptor(_DocModel):
    """The fully resolved documentation unit for one HTTP operation.

    ``success_example`` and ``request_example`` are ``None`` when the
    operation declares no JSON body for them.
    """

    method: str
    path: str
    summary: str = ""
    description: Optional[str] = None
    operation_id: Optional[str] = None
    deprecated: bool = False
    requires_auth: bool = False
    tags: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    request_headers: dict[str, Any] = Field(default_factory=dict)
    request_example: Any = None
    success_status: int = 200
    success_description: Optional[str] = None
    success_example: Any = None
    error_responses: list[ErrorDescriptor] = Field(default_factory=list)
    anchor: Optional[str] = None


class Module(_DocModel):
    """Endpoints sharing one inferred operation name within a section."""

    id: str
    name: str
    description: Optional[str] = None
    anchor: Optional[str] = None
    endpoints: list[EndpointDescriptor] = Field(default_factory=list)


class Section(_DocModel):
    """All modules for one tag."""

    id: str
    name: str
    description: Optional[str] = None
    anchor: Optional[str] = None
    modules: list[Module] = Field(default_factory=list)


class ServerInfo(_DocModel):
    """A server entry from ``servers`` (or Swagger 2.x ``host``/``basePath``)."""

    url: str
    description: Optional[str] = None


class Documentation(_DocModel):
    """Complete normalised documentation model for one document.

    Produced by :func:`~structdoc.documentation.build_documentation`. The
    whole tree is rebuilt on every call; nothing is shared between builds.
    """

    title: str
    description: Optional[str] = None
    version: str
    spec_version: Optional[str] = Field(
        default=None, description="The document's 'openapi' or 'swagger' marker"
    )
    servers: list[ServerInfo] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
