"""Canonical Pydantic models shared across all clearapi modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`TreeConfig`, and :class:`GlobalConfig`.

**Schema models** -- an explicit tagged variant over every JSON Schema node
the engine understands. Each variant carries a ``kind`` discriminator so the
resolver and synthesizers dispatch on the variant instead of probing for
ad hoc keys:
    :class:`ReferenceSchema`, :class:`StringSchema`, :class:`NumberSchema`,
    :class:`BooleanSchema`, :class:`ArraySchema`, :class:`ObjectSchema`, and
    :class:`UnknownSchema`, joined as the :data:`Schema` union.

**Document models** -- produced by the extractor and consumed by the
generators:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`MediaType`, :class:`RequestBody`, :class:`Response`,
    :class:`Operation`, :class:`APIInfo`, :class:`ServerInfo`,
    :class:`Document`, plus the engine's result shapes
    :class:`ResolvedSchema`, :class:`OperationEntry`, :class:`SchemaNode`,
    and :class:`SchemaTreeNode`.

Schema models are frozen: a parsed document is an immutable view for the
duration of one rendering pass.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class TreeConfig(BaseModel):
    """Schema tree rendering settings stored in :class:`GlobalConfig`."""

    max_depth: int = Field(
        default=8, description="Deepest nesting level expanded by 'clearapi schema'"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/clearapi/config.json``.

    Loaded and saved by :func:`~clearapi.config.load_global_config` and
    :func:`~clearapi.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~clearapi.config.resolve_config`
    for the full precedence chain.
    """

    default_document: Optional[str] = None
    auto_select_single_document: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)


# --- Schema variants ---


class _SchemaBase(BaseModel):
    """Fields shared by every schema variant.

    ``default`` and ``example`` may legitimately be ``null`` in a document,
    so their presence is read from ``model_fields_set`` rather than from
    their value. Build instances with only the keys the document declares.
    """

    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    default: Any = None
    example: Any = None
    enum: Optional[list[Any]] = None
    read_only: bool = False
    write_only: bool = False

    @property
    def has_default(self) -> bool:
        """Whether the document declared a ``default`` for this node."""
        return "default" in self.model_fields_set

    @property
    def has_example(self) -> bool:
        """Whether the document declared an ``example`` for this node."""
        return "example" in self.model_fields_set


class ReferenceSchema(_SchemaBase):
    """A ``$ref`` pointer into ``components.schemas``."""

    kind: Literal["ref"] = "ref"
    ref: str


class StringSchema(_SchemaBase):
    kind: Literal["string"] = "string"
    format: Optional[str] = None


class NumberSchema(_SchemaBase):
    """``number`` or ``integer`` node; ``type`` keeps the declared flavour."""

    kind: Literal["number"] = "number"
    type: Literal["number", "integer"] = "number"
    format: Optional[str] = None


class BooleanSchema(_SchemaBase):
    kind: Literal["boolean"] = "boolean"


class ArraySchema(_SchemaBase):
    kind: Literal["array"] = "array"
    items: Optional[Schema] = None


class ObjectSchema(_SchemaBase):
    """An object node. ``required`` lists the mandatory property names."""

    kind: Literal["object"] = "object"
    properties: dict[str, Schema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class UnknownSchema(_SchemaBase):
    """Any node without a supported ``type`` (composites, missing type, ...).

    The raw dict is kept so renderers can still show it verbatim.
    """

    kind: Literal["unknown"] = "unknown"
    raw: dict[str, Any] = Field(default_factory=dict)


Schema = Annotated[
    Union[
        ReferenceSchema,
        StringSchema,
        NumberSchema,
        BooleanSchema,
        ArraySchema,
        ObjectSchema,
        UnknownSchema,
    ],
    Field(discriminator="kind"),
]
"""Tagged union of all schema variants, discriminated by ``kind``."""

ArraySchema.model_rebuild()
ObjectSchema.model_rebuild()


# --- Document models ---


class HTTPMethod(str, Enum):
    """HTTP methods recognised as operations inside an OpenAPI path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class ExampleContext(str, Enum):
    """Direction an example is synthesized for.

    ``REQUEST`` hides ``readOnly`` properties, ``RESPONSE`` hides
    ``writeOnly`` ones.
    """

    REQUEST = "request"
    RESPONSE = "response"


class Parameter(BaseModel):
    """A single parameter of an :class:`Operation` (OpenAPI *Parameter Object*)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")


class MediaType(BaseModel):
    """One entry of a ``content`` map, keyed by media type."""

    model_config = ConfigDict(populate_by_name=True)

    schema_: Optional[Schema] = Field(default=None, alias="schema")


JSON_MEDIA_TYPE = "application/json"


class RequestBody(BaseModel):
    """Request body of an :class:`Operation`.

    Only the ``application/json`` entry of ``content`` is interpreted; the
    other media types are kept for display.
    """

    description: Optional[str] = None
    required: bool = False
    content: dict[str, MediaType] = Field(default_factory=dict)

    @property
    def json_schema(self) -> Optional[Schema]:
        """Schema of the ``application/json`` entry, if any."""
        media = self.content.get(JSON_MEDIA_TYPE)
        return media.schema_ if media is not None else None


class Response(BaseModel):
    """Parsed response metadata for a single status code."""

    status_code: str
    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)

    @property
    def json_schema(self) -> Optional[Schema]:
        """Schema of the ``application/json`` entry, if any."""
        media = self.content.get(JSON_MEDIA_TYPE)
        return media.schema_ if media is not None else None


class Operation(BaseModel):
    """A single parsed operation (OpenAPI *Operation Object*).

    The path and method live on the enclosing mapping; see
    :class:`OperationEntry` for the flattened triple.
    """

    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: dict[str, Response] = Field(default_factory=dict)
    deprecated: bool = False

    @property
    def display_summary(self) -> str:
        """Summary, falling back to the operation id."""
        return self.summary or self.operation_id or "No summary"


class APIInfo(BaseModel):
    """API metadata extracted from the document's *Info Object*."""

    title: str = "API Untitled"
    version: str = "N/A"
    description: Optional[str] = None


class ServerInfo(BaseModel):
    """A server entry from the document's ``servers`` array."""

    url: str
    description: Optional[str] = None


class Document(BaseModel):
    """Complete parsed representation of an OpenAPI document.

    ``paths`` maps each path template to its operations keyed by method, in
    document order. ``schemas`` is ``components.schemas``.

    See Also:
        :func:`~clearapi.parser.extractor.extract_document`: Builds this
        model from a raw dict.
    """

    info: APIInfo = Field(default_factory=APIInfo)
    servers: list[ServerInfo] = Field(default_factory=list)
    paths: dict[str, dict[HTTPMethod, Operation]] = Field(default_factory=dict)
    schemas: dict[str, Schema] = Field(default_factory=dict)
    openapi_version: Optional[str] = None
    raw: Optional[dict[str, Any]] = Field(
        default=None, description="Original document dict for reference"
    )

    @property
    def server_url(self) -> Optional[str]:
        """URL of the first (authoritative) server, if any."""
        return self.servers[0].url if self.servers else None


# --- Engine results ---


class ResolvedSchema(BaseModel):
    """A component schema located by :func:`~clearapi.parser.resolver.resolve_ref`."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    schema_: Schema = Field(alias="schema")


class OperationEntry(BaseModel):
    """One ``(path, method, operation)`` triple inside a display group."""

    path: str
    method: HTTPMethod
    operation: Operation


class SchemaNode(BaseModel):
    """A child schema reached by expanding a property.

    ``name`` is the component name when the child came from a reference.
    ``required`` is the child's own mandatory-field set.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    schema_: Schema = Field(alias="schema")
    required: frozenset[str] = frozenset()


class SchemaTreeNode(BaseModel):
    """One row of a fully expanded schema tree."""

    name: str
    type_label: str
    required: bool = False
    description: Optional[str] = None
    read_only: bool = False
    write_only: bool = False
    ref_name: Optional[str] = None
    cycle: bool = False
    truncated: bool = False
    children: list[SchemaTreeNode] = Field(default_factory=list)
