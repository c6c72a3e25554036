"""Tests for oasir.parser.types -- the schema fragment to TypeRef resolver."""

from __future__ import annotations

from typing import Any

import pytest

from oasir.models import TypeKind, TypeRef
from oasir.parser.types import SchemaShape, classify_shape, resolve_type


# ---------------------------------------------------------------------------
# Shape classification
# ---------------------------------------------------------------------------


class TestClassifyShape:
    """Shapes are checked in the order ref > union > type array > scalar."""

    def test_ref_beats_everything(self) -> None:
        fragment = {
            "$ref": "#/components/schemas/Widget",
            "anyOf": [{"type": "string"}],
            "type": ["integer", "null"],
        }
        assert classify_shape(fragment) is SchemaShape.REF

    def test_union_beats_type(self) -> None:
        assert classify_shape({"oneOf": [], "type": "string"}) is SchemaShape.UNION

    def test_type_array(self) -> None:
        assert classify_shape({"type": ["string", "null"]}) is SchemaShape.TYPE_ARRAY

    def test_scalar(self) -> None:
        assert classify_shape({"type": "boolean"}) is SchemaShape.SCALAR

    @pytest.mark.parametrize(
        "fragment",
        [{}, {"type": "file"}, {"type": 3}, {"enum": ["a"]}, None, "string", [1, 2]],
    )
    def test_unknown(self, fragment: Any) -> None:
        assert classify_shape(fragment) is SchemaShape.UNKNOWN


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalarTypes:
    """Plain ``type`` keywords."""

    def test_string(self) -> None:
        assert resolve_type({"type": "string"}) == TypeRef.string()

    @pytest.mark.parametrize("fmt", ["date-time", "date"])
    def test_date_formats_upgrade_to_datetime(self, fmt: str) -> None:
        assert resolve_type({"type": "string", "format": fmt}) == TypeRef.datetime()

    @pytest.mark.parametrize("fmt", ["uuid", "byte", "binary", "email"])
    def test_other_string_formats_stay_string(self, fmt: str) -> None:
        assert resolve_type({"type": "string", "format": fmt}) == TypeRef.string()

    @pytest.mark.parametrize("fmt", [None, "int32", "int64"])
    def test_integer_formats_all_map_to_int(self, fmt: str | None) -> None:
        fragment: dict[str, Any] = {"type": "integer"}
        if fmt:
            fragment["format"] = fmt
        result = resolve_type(fragment)
        assert result.kind is TypeKind.INT
        assert result.nullable is False

    def test_number(self) -> None:
        assert resolve_type({"type": "number", "format": "float"}) == TypeRef.double()

    def test_boolean(self) -> None:
        assert resolve_type({"type": "boolean"}) == TypeRef.boolean()

    def test_array_of_numbers(self) -> None:
        result = resolve_type({"type": "array", "items": {"type": "number"}})
        assert result == TypeRef.list_of(TypeRef.double())
        assert result.display() == "List<Double>"

    def test_array_without_items(self) -> None:
        assert resolve_type({"type": "array"}) == TypeRef.list_of(TypeRef.any_())

    def test_array_items_follow_ref(self) -> None:
        result = resolve_type(
            {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
        )
        assert result.display() == "List<Pet>"

    def test_nested_arrays(self) -> None:
        fragment = {"type": "array", "items": {"type": "array", "items": {"type": "integer"}}}
        assert resolve_type(fragment).display() == "List<List<Int>>"

    def test_object_with_value_schema(self) -> None:
        result = resolve_type(
            {"type": "object", "additionalProperties": {"type": "integer"}}
        )
        assert result == TypeRef.map_of(TypeRef.integer())
        assert result.display() == "Map<String, Int>"

    @pytest.mark.parametrize("extra", [{}, {"additionalProperties": True}, {"properties": {"a": {}}}])
    def test_object_without_value_schema_is_open_map(self, extra: dict[str, Any]) -> None:
        result = resolve_type({"type": "object", **extra})
        assert result == TypeRef.map_of(TypeRef.any_())

    def test_missing_type_is_any(self) -> None:
        assert resolve_type({"description": "anything"}) == TypeRef.any_()

    def test_unknown_type_is_any(self) -> None:
        assert resolve_type({"type": "file"}) == TypeRef.any_()


# ---------------------------------------------------------------------------
# $ref
# ---------------------------------------------------------------------------


class TestRefTypes:
    """``$ref`` wins over every sibling in the same fragment."""

    def test_schema_ref(self) -> None:
        result = resolve_type({"$ref": "#/components/schemas/Widget"})
        assert result == TypeRef.reference("Widget")
        assert result.nullable is False

    def test_siblings_are_ignored(self) -> None:
        fragment = {
            "$ref": "#/components/schemas/Widget",
            "type": "string",
            "anyOf": [{"type": "integer"}],
            "nullable": True,
        }
        assert resolve_type(fragment) == TypeRef.reference("Widget")

    @pytest.mark.parametrize(
        "ref",
        [
            "other.yaml#/components/schemas/Widget",
            "https://example.com/schemas/widget.json",
            "#/components/parameters/Limit",
            "#/components/schemas/",
            "#/components/schemas/Widget/properties/id",
            42,
        ],
    )
    def test_other_ref_shapes_are_any(self, ref: Any) -> None:
        assert resolve_type({"$ref": ref}) == TypeRef.any_()

    def test_escaped_name(self) -> None:
        result = resolve_type({"$ref": "#/components/schemas/a~1b~0c"})
        assert result.ref_name == "a/b~c"


# ---------------------------------------------------------------------------
# Unions
# ---------------------------------------------------------------------------


class TestUnionTypes:
    """``anyOf`` / ``oneOf`` with the first non-null, non-object heuristic."""

    def test_nullable_integer(self) -> None:
        result = resolve_type({"anyOf": [{"type": "integer"}, {"type": "null"}]})
        assert result == TypeRef.integer().with_nullable(True)

    def test_null_first(self) -> None:
        result = resolve_type({"oneOf": [{"type": "null"}, {"type": "string"}]})
        assert result.display() == "String?"

    def test_nullable_ref(self) -> None:
        result = resolve_type(
            {"anyOf": [{"$ref": "#/components/schemas/Pet"}, {"type": "null"}]}
        )
        assert result.kind is TypeKind.MODEL
        assert result.ref_name == "Pet"
        assert result.nullable is True

    def test_object_members_are_deprioritised(self) -> None:
        fragment = {
            "oneOf": [
                {"type": "object", "additionalProperties": {"type": "string"}},
                {"type": "boolean"},
            ]
        }
        assert resolve_type(fragment) == TypeRef.boolean()

    def test_falls_back_to_first_object_member(self) -> None:
        fragment = {
            "anyOf": [
                {"type": "object", "additionalProperties": {"type": "integer"}},
                {"type": "object"},
            ]
        }
        assert resolve_type(fragment).display() == "Map<String, Int>"

    def test_first_non_object_wins(self) -> None:
        fragment = {"anyOf": [{"type": "string"}, {"type": "integer"}]}
        assert resolve_type(fragment) == TypeRef.string()

    def test_any_of_preferred_over_one_of(self) -> None:
        fragment = {"anyOf": [{"type": "integer"}], "oneOf": [{"type": "string"}]}
        assert resolve_type(fragment) == TypeRef.integer()

    def test_empty_union_is_any(self) -> None:
        result = resolve_type({"anyOf": []})
        assert result == TypeRef.any_()

    def test_all_null_union_is_nullable_any(self) -> None:
        result = resolve_type({"oneOf": [{"type": "null"}]})
        assert result.kind is TypeKind.ANY
        assert result.nullable is True

    def test_non_list_union_is_any(self) -> None:
        assert resolve_type({"anyOf": {"type": "string"}}) == TypeRef.any_()

    def test_non_mapping_members_skipped(self) -> None:
        result = resolve_type({"anyOf": ["junk", 3, {"type": "number"}]})
        assert result == TypeRef.double()

    def test_nested_union_nullability_propagates(self) -> None:
        fragment = {
            "anyOf": [
                {"anyOf": [{"type": "integer"}, {"type": "null"}]},
            ]
        }
        assert resolve_type(fragment).display() == "Int?"


# ---------------------------------------------------------------------------
# Type arrays
# ---------------------------------------------------------------------------


class TestTypeArrays:
    """OpenAPI 3.1 ``type: [...]`` lists."""

    def test_string_or_null(self) -> None:
        result = resolve_type({"type": ["string", "null"]})
        assert result == TypeRef.string().with_nullable(True)

    def test_null_first(self) -> None:
        assert resolve_type({"type": ["null", "integer"]}).display() == "Int?"

    def test_without_null(self) -> None:
        assert resolve_type({"type": ["boolean"]}) == TypeRef.boolean()

    def test_first_non_null_entry_wins(self) -> None:
        assert resolve_type({"type": ["number", "string"]}) == TypeRef.double()

    def test_array_is_shallow(self) -> None:
        result = resolve_type({"type": ["array", "null"], "items": {"type": "string"}})
        assert result.display() == "List<Any>?"

    def test_object_is_shallow(self) -> None:
        result = resolve_type(
            {"type": ["object"], "additionalProperties": {"type": "string"}}
        )
        assert result.display() == "Map<String, Any>"

    def test_format_is_ignored(self) -> None:
        result = resolve_type({"type": ["string", "null"], "format": "date-time"})
        assert result.display() == "String?"

    def test_empty_is_any(self) -> None:
        assert resolve_type({"type": []}) == TypeRef.any_()

    def test_all_null_is_nullable_any(self) -> None:
        assert resolve_type({"type": ["null"]}).display() == "Any?"

    def test_unknown_entry_is_any(self) -> None:
        assert resolve_type({"type": ["file", "null"]}).display() == "Any?"


# ---------------------------------------------------------------------------
# Nullability composition
# ---------------------------------------------------------------------------


class TestNullability:
    """All nullability signals OR together into one flag."""

    def test_nullable_keyword(self) -> None:
        assert resolve_type({"type": "string", "nullable": True}).display() == "String?"

    def test_nullable_false_is_ignored(self) -> None:
        assert resolve_type({"type": "string", "nullable": False}).nullable is False

    def test_non_boolean_nullable_is_ignored(self) -> None:
        assert resolve_type({"type": "string", "nullable": "yes"}).nullable is False

    def test_double_signal_is_single_flag(self) -> None:
        result = resolve_type({"type": ["integer", "null"], "nullable": True})
        assert result == TypeRef(kind=TypeKind.INT, nullable=True)
        assert result.display() == "Int?"

    def test_nullable_union_with_keyword(self) -> None:
        fragment = {"anyOf": [{"type": "string"}, {"type": "null"}], "nullable": True}
        assert resolve_type(fragment).display() == "String?"

    def test_nullable_on_list_is_outer(self) -> None:
        result = resolve_type({"type": "array", "items": {"type": "string"}, "nullable": True})
        assert result.nullable is True
        assert result.item is not None
        assert result.item.nullable is False

    def test_with_nullable_never_downgrades(self) -> None:
        nullable = TypeRef.string().with_nullable(True)
        assert nullable.with_nullable(False).nullable is True


# ---------------------------------------------------------------------------
# Totality
# ---------------------------------------------------------------------------


class TestTotality:
    """resolve_type returns a TypeRef for any input and never raises."""

    @pytest.mark.parametrize(
        "fragment",
        [
            None,
            42,
            "string",
            [],
            [{"type": "string"}],
            {"type": None},
            {"type": {"nested": "dict"}},
            {"type": ["string", 7, None]},
            {"anyOf": None},
            {"oneOf": [None, []]},
            {"type": "array", "items": "string"},
            {"type": "array", "items": [{"type": "string"}]},
            {"type": "object", "additionalProperties": "yes"},
            {"$ref": None},
            {"$ref": {"nested": True}},
        ],
    )
    def test_malformed_fragments_resolve(self, fragment: Any) -> None:
        assert isinstance(resolve_type(fragment), TypeRef)

    def test_non_mapping_is_non_nullable_any(self) -> None:
        result = resolve_type(["not", "a", "schema"])
        assert result == TypeRef.any_()

    def test_deeply_nested_fragment_terminates(self) -> None:
        fragment: dict[str, Any] = {"type": "string"}
        for _ in range(200):
            fragment = {"type": "array", "items": fragment}
        result = resolve_type(fragment)
        assert result.kind is TypeKind.LIST

    def test_self_referencing_fragment_terminates(self) -> None:
        fragment: dict[str, Any] = {"type": "array"}
        fragment["items"] = fragment
        assert resolve_type(fragment).kind is TypeKind.LIST

    def test_does_not_mutate_input(self) -> None:
        fragment = {"anyOf": [{"type": "integer"}, {"type": "null"}], "nullable": True}
        snapshot = {"anyOf": [{"type": "integer"}, {"type": "null"}], "nullable": True}
        resolve_type(fragment)
        assert fragment == snapshot
