"""Canonical Pydantic models shared across all oasir modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- resolved from CLI flags, the environment, and a
project-local ``oasir.json``:
    :class:`ParserSettings`.

**IR models** -- produced by the schema resolver and consumed by external code
generators:
    :class:`TypeKind`, :class:`TypeRef`, :class:`Property`, :class:`Model`,
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`RequestBody`, :class:`Response`, :class:`Endpoint`,
    :class:`Diagnostic`, :class:`APIInfo`, and :class:`SchemaIR`.

IR models are frozen: the whole IR is built in one pass and never mutated
afterwards, and two parses of the same document compare equal. Sequences are
stored as tuples and the response map as a :class:`ResponseMap`, so neither
attribute assignment nor in-place edits can change a built IR.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Settings ---


class ParserSettings(BaseModel):
    """Tunables for loading and resolving a document.

    Resolved by :func:`~oasir.config.resolve_settings`; every field can be
    overridden by a CLI flag or an ``OASIR_*`` environment variable.
    """

    timeout: float = Field(
        default=30.0, gt=0, description="HTTP timeout in seconds for remote documents"
    )
    follow_redirects: bool = Field(
        default=True, description="Follow HTTP redirects when fetching a document"
    )
    media_type: str = Field(
        default="application/json",
        description="Media type whose schema types request and response bodies",
    )


# --- Type references ---


class TypeKind(str, enum.Enum):
    """Closed set of logical types a schema fragment can resolve to."""

    STRING = "string"
    INT = "int"
    DOUBLE = "double"
    BOOL = "bool"
    DATETIME = "datetime"
    LIST = "list"
    MAP = "map"
    MODEL = "model"
    ANY = "any"


_PRIMITIVE_NAMES = {
    TypeKind.STRING: "String",
    TypeKind.INT: "Int",
    TypeKind.DOUBLE: "Double",
    TypeKind.BOOL: "Bool",
    TypeKind.DATETIME: "DateTime",
    TypeKind.ANY: "Any",
}


class TypeRef(BaseModel):
    """A resolved, language-neutral type expression.

    ``item`` holds the element type of a ``list`` and the value type of a
    ``map`` (map keys are always strings). ``ref_name`` names the referenced
    model for ``model``. Nullability is a single flag on the outermost value;
    there is no "nullable of nullable".

    Example::

        TypeRef.list_of(TypeRef.reference("Pet")).with_nullable(True).display()
        # 'List<Pet>?'
    """

    model_config = ConfigDict(frozen=True)

    kind: TypeKind
    nullable: bool = False
    item: Optional[TypeRef] = None
    ref_name: Optional[str] = None

    @classmethod
    def string(cls) -> TypeRef:
        return cls(kind=TypeKind.STRING)

    @classmethod
    def integer(cls) -> TypeRef:
        return cls(kind=TypeKind.INT)

    @classmethod
    def double(cls) -> TypeRef:
        return cls(kind=TypeKind.DOUBLE)

    @classmethod
    def boolean(cls) -> TypeRef:
        return cls(kind=TypeKind.BOOL)

    @classmethod
    def datetime(cls) -> TypeRef:
        return cls(kind=TypeKind.DATETIME)

    @classmethod
    def list_of(cls, item: TypeRef) -> TypeRef:
        return cls(kind=TypeKind.LIST, item=item)

    @classmethod
    def map_of(cls, value: TypeRef) -> TypeRef:
        return cls(kind=TypeKind.MAP, item=value)

    @classmethod
    def reference(cls, name: str) -> TypeRef:
        return cls(kind=TypeKind.MODEL, ref_name=name)

    @classmethod
    def any_(cls) -> TypeRef:
        return cls(kind=TypeKind.ANY)

    def with_nullable(self, nullable: bool) -> TypeRef:
        """Return a copy whose flag is ``self.nullable or nullable``.

        Nullability signals only ever upgrade the flag; once a type is
        nullable no later signal turns it back.
        """
        merged = self.nullable or nullable
        if merged == self.nullable:
            return self
        return self.model_copy(update={"nullable": merged})

    def display(self) -> str:
        """Render the type as a short neutral string (``Map<String, Int>?``)."""
        if self.kind == TypeKind.LIST:
            inner = self.item.display() if self.item else "Any"
            text = f"List<{inner}>"
        elif self.kind == TypeKind.MAP:
            inner = self.item.display() if self.item else "Any"
            text = f"Map<String, {inner}>"
        elif self.kind == TypeKind.MODEL:
            text = self.ref_name or "Any"
        else:
            text = _PRIMITIVE_NAMES[self.kind]
        return f"{text}?" if self.nullable else text


# --- Models ---


class Property(BaseModel):
    """A single named property of a :class:`Model`."""

    model_config = ConfigDict(frozen=True)

    name: str
    resolved_type: TypeRef
    is_required: bool = False
    description: str = ""


class Model(BaseModel):
    """An object schema from ``components/schemas``.

    Properties keep the order in which the source document declares them.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    properties: tuple[Property, ...] = ()
    description: str = ""


# --- Operations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operation keys of an OpenAPI path item.

    Values are uppercase; path-item keys are matched case-insensitively.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """An operation parameter with its resolved type."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: ParameterLocation
    resolved_type: TypeRef
    is_required: bool = False
    description: str = ""


class RequestBody(BaseModel):
    """The JSON request body of an :class:`Endpoint`.

    ``content_types`` lists every media type the document declares, even
    though only the JSON one contributes to ``resolved_type``.
    """

    model_config = ConfigDict(frozen=True)

    resolved_type: TypeRef
    is_required: bool = False
    description: str = ""
    content_types: tuple[str, ...] = ()


class Response(BaseModel):
    """A response for one literal status-code key (``"200"``, ``"default"``)."""

    model_config = ConfigDict(frozen=True)

    status_code: str
    resolved_type: TypeRef
    description: str = ""


class ResponseMap(dict):
    """Read-only ``status code -> Response`` mapping used by :class:`Endpoint`.

    A ``dict`` subclass so that it serializes like one; every mutating method
    raises :class:`TypeError`.
    """

    def _readonly(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("ResponseMap is read-only")

    __setitem__ = _readonly
    __delitem__ = _readonly
    __ior__ = _readonly
    clear = _readonly
    pop = _readonly
    popitem = _readonly
    setdefault = _readonly
    update = _readonly

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (dict(self),))


class Endpoint(BaseModel):
    """A single resolved operation (one URL path + HTTP method pair)."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    parameters: tuple[Parameter, ...] = ()
    request_body: Optional[RequestBody] = None
    responses: dict[str, Response] = Field(default_factory=ResponseMap)
    deprecated: bool = False

    @field_validator("responses", mode="after")
    @classmethod
    def _freeze_responses(cls, value: dict[str, Response]) -> ResponseMap:
        return value if isinstance(value, ResponseMap) else ResponseMap(value)


# --- Diagnostics ---


class DiagnosticKind(str, enum.Enum):
    """What kind of entry a :class:`Diagnostic` refers to."""

    DOCUMENT = "document"
    MODEL = "model"
    PROPERTY = "property"
    PATH = "path"
    ENDPOINT = "endpoint"
    PARAMETER = "parameter"


class Diagnostic(BaseModel):
    """A recoverable problem found while resolving one entry.

    ``subject`` identifies the entry: a model name, ``"Model.property"``,
    ``"GET /widgets"``, or a path.
    """

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    subject: str
    message: str
    severity: str = "warning"

    def __str__(self) -> str:
        return f"{self.kind.value} {self.subject}: {self.message}"


# --- Root ---


class APIInfo(BaseModel):
    """API metadata extracted from the document's *Info Object*."""

    model_config = ConfigDict(frozen=True)

    title: str = "Untitled API"
    version: str = "0.0.0"
    description: Optional[str] = None


class SchemaIR(BaseModel):
    """Root of the intermediate representation.

    Produced by :func:`~oasir.parser.document.parse`. Owned exclusively by
    the caller; nothing in oasir keeps a reference to it.

    See Also:
        :class:`Model`: Data models from ``components/schemas``.
        :class:`Endpoint`: Operations from ``paths``.
    """

    model_config = ConfigDict(frozen=True)

    openapi_version: Optional[str] = None
    info: APIInfo = Field(default_factory=APIInfo)
    models: tuple[Model, ...] = ()
    endpoints: tuple[Endpoint, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def model(self, name: str) -> Optional[Model]:
        """Return the model called *name*, or ``None``."""
        for model in self.models:
            if model.name == name:
                return model
        return None

    def endpoint(self, method: HTTPMethod | str, path: str) -> Optional[Endpoint]:
        """Return the endpoint for *method* and *path*, or ``None``."""
        wanted = HTTPMethod(method.upper()) if isinstance(method, str) else method
        for endpoint in self.endpoints:
            if endpoint.method == wanted and endpoint.path == path:
                return endpoint
        return None

    def to_dict(self) -> dict[str, Any]:
        """Dump the IR as JSON-compatible Python data."""
        return self.model_dump(mode="json")
