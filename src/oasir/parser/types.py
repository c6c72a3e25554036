"""Map JSON Schema fragments to :class:`~oasir.models.TypeRef` values.

OpenAPI documents express types in several overlapping styles: plain
``type`` keywords, OpenAPI 3.1 type arrays (``["integer", "null"]``),
``anyOf``/``oneOf`` unions, and three different nullability conventions.
:func:`resolve_type` folds all of them into one type plus one nullability
flag.

Resolution is a two-step matcher. :func:`classify_shape` assigns the fragment
to exactly one :class:`SchemaShape`, checked in a fixed priority order::

    REF  >  UNION  >  TYPE_ARRAY  >  SCALAR  >  UNKNOWN

and a single handler per shape builds the type. The nullability flag is the
logical OR of every signal the fragment carries (``nullable: true``, a
``"null"`` member of a type array, a ``{"type": "null"}`` union member), so
signals never cancel each other out.

:func:`resolve_type` is total: it never raises. Fragments it does not
understand, including non-mappings, resolve to ``Any``.

Unions are resolved with a deliberately lossy heuristic: the first member
that is neither ``null`` nor ``object`` wins, because object-typed members
rarely carry useful leaf type information. The IR has no union type.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from typing import Any

from oasir.models import TypeRef
from oasir.parser.refs import schema_ref_name

# Deeper fragments resolve to Any; recursive YAML aliases would never end.
_MAX_DEPTH = 64

_DATETIME_FORMATS = frozenset({"date-time", "date"})


class SchemaShape(str, enum.Enum):
    """The closed set of fragment shapes the resolver distinguishes."""

    REF = "ref"
    UNION = "union"
    TYPE_ARRAY = "type_array"
    SCALAR = "scalar"
    UNKNOWN = "unknown"


def classify_shape(fragment: Any) -> SchemaShape:
    """Return the shape that decides how *fragment* is resolved.

    A ``$ref`` beats everything else in the same fragment, a union beats a
    ``type`` keyword, and a type array beats nothing.

    Args:
        fragment: Any JSON value found where a schema was expected.

    Returns:
        The matching :class:`SchemaShape`.
    """
    if not isinstance(fragment, Mapping):
        return SchemaShape.UNKNOWN
    if "$ref" in fragment:
        return SchemaShape.REF
    if "anyOf" in fragment or "oneOf" in fragment:
        return SchemaShape.UNION

    type_value = fragment.get("type")
    if isinstance(type_value, list):
        return SchemaShape.TYPE_ARRAY
    if isinstance(type_value, str) and type_value in _SCALAR_HANDLERS:
        return SchemaShape.SCALAR
    return SchemaShape.UNKNOWN


def resolve_type(fragment: Any) -> TypeRef:
    """Resolve a schema fragment to a :class:`~oasir.models.TypeRef`.

    Args:
        fragment: A schema object. Anything else resolves to ``Any``.

    Returns:
        The resolved type. Never raises.

    Example::

        resolve_type({"type": ["integer", "null"]}).display()
        # 'Int?'
        pet_or_null = {"anyOf": [{"$ref": "#/components/schemas/Pet"}, {"type": "null"}]}
        resolve_type(pet_or_null).display()
        # 'Pet?'
    """
    return _resolve(fragment, 0)


def _resolve(fragment: Any, depth: int) -> TypeRef:
    if depth > _MAX_DEPTH:
        return TypeRef.any_()

    shape = classify_shape(fragment)
    resolved = _SHAPE_HANDLERS[shape](fragment, depth)

    # $ref siblings are ignored, nullable included
    if shape is not SchemaShape.REF and isinstance(fragment, Mapping):
        resolved = resolved.with_nullable(fragment.get("nullable") is True)
    return resolved


# --- Shape handlers ---


def _resolve_ref(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    name = schema_ref_name(fragment["$ref"])
    if name is None:
        return TypeRef.any_()
    return TypeRef.reference(name)


def _resolve_union(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    members = fragment.get("anyOf")
    if members is None:
        members = fragment.get("oneOf")
    if not isinstance(members, list):
        return TypeRef.any_()

    has_null = False
    candidates: list[Mapping[str, Any]] = []
    for member in members:
        if not isinstance(member, Mapping):
            continue
        if member.get("type") == "null":
            has_null = True
            continue
        candidates.append(member)

    primary = next((m for m in candidates if m.get("type") != "object"), None)
    if primary is None and candidates:
        primary = candidates[0]
    if primary is None:
        return TypeRef.any_().with_nullable(has_null)

    return _resolve(primary, depth + 1).with_nullable(has_null)


# Type-array members map shallowly: no format, items or additionalProperties.
_TYPE_ARRAY_TABLE: dict[str, Callable[[], TypeRef]] = {
    "string": TypeRef.string,
    "integer": TypeRef.integer,
    "number": TypeRef.double,
    "boolean": TypeRef.boolean,
    "array": lambda: TypeRef.list_of(TypeRef.any_()),
    "object": lambda: TypeRef.map_of(TypeRef.any_()),
}


def _resolve_type_array(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    has_null = False
    primary: TypeRef | None = None
    for entry in fragment["type"]:
        if entry == "null":
            has_null = True
        elif primary is None and isinstance(entry, str):
            primary = _TYPE_ARRAY_TABLE.get(entry, TypeRef.any_)()

    if primary is None:
        return TypeRef.any_().with_nullable(has_null)
    return primary.with_nullable(has_null)


def _resolve_scalar(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    return _SCALAR_HANDLERS[fragment["type"]](fragment, depth)


def _resolve_unknown(fragment: Any, depth: int) -> TypeRef:
    return TypeRef.any_()


# --- Scalar handlers (keyed by the ``type`` keyword) ---


def _resolve_string(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    fmt = fragment.get("format")
    if isinstance(fmt, str) and fmt in _DATETIME_FORMATS:
        return TypeRef.datetime()
    return TypeRef.string()


def _resolve_array(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    items = fragment.get("items")
    if not isinstance(items, Mapping):
        return TypeRef.list_of(TypeRef.any_())
    return TypeRef.list_of(_resolve(items, depth + 1))


def _resolve_object(fragment: Mapping[str, Any], depth: int) -> TypeRef:
    # additionalProperties: true / absent is an open map of anything
    value_schema = fragment.get("additionalProperties")
    if not isinstance(value_schema, Mapping):
        return TypeRef.map_of(TypeRef.any_())
    return TypeRef.map_of(_resolve(value_schema, depth + 1))


_SCALAR_HANDLERS: dict[str, Callable[[Mapping[str, Any], int], TypeRef]] = {
    "string": _resolve_string,
    "integer": lambda fragment, depth: TypeRef.integer(),
    "number": lambda fragment, depth: TypeRef.double(),
    "boolean": lambda fragment, depth: TypeRef.boolean(),
    "array": _resolve_array,
    "object": _resolve_object,
}

_SHAPE_HANDLERS: dict[SchemaShape, Callable[[Any, int], TypeRef]] = {
    SchemaShape.REF: _resolve_ref,
    SchemaShape.UNION: _resolve_union,
    SchemaShape.TYPE_ARRAY: _resolve_type_array,
    SchemaShape.SCALAR: _resolve_scalar,
    SchemaShape.UNKNOWN: _resolve_unknown,
}
