"""Resolve ``components/schemas`` entries into :class:`~oasir.models.Model` objects.

Only object-like schemas become models: those with ``type: object`` or a
``properties`` map. Enums, arrays, primitives and composition-only schemas
are left to the type resolver wherever they are referenced.

A malformed property never takes its model down with it: the property is
skipped and a diagnostic recorded. A malformed *model* (for example a
``properties`` value that is not a map) raises
:class:`~oasir.exceptions.SchemaShapeError`, which the document resolver
turns into a diagnostic for that model alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from oasir.exceptions import ResolutionError, SchemaShapeError
from oasir.models import Diagnostic, DiagnosticKind, Model, Property
from oasir.parser.diagnostics import report
from oasir.parser.types import resolve_type


def as_text(value: Any) -> str:
    """Return *value* if it is a string, otherwise ``""``."""
    return value if isinstance(value, str) else ""


def resolve_property(name: str, fragment: Any, is_required: bool) -> Property:
    """Build a :class:`~oasir.models.Property` for one schema property.

    Optional properties are nullable. Explicit nullability in the fragment
    is kept even for required properties; it is never downgraded.

    Args:
        name: The property name (key in ``properties``).
        fragment: The property's schema fragment.
        is_required: Whether *name* appears in the parent's ``required``.

    Returns:
        The resolved property.
    """
    resolved = resolve_type(fragment).with_nullable(not is_required)
    description = fragment.get("description") if isinstance(fragment, Mapping) else None
    return Property(
        name=name,
        resolved_type=resolved,
        is_required=is_required,
        description=as_text(description),
    )


def _required_names(fragment: Mapping[str, Any]) -> frozenset[str]:
    required = fragment.get("required")
    if required is None:
        return frozenset()
    if not isinstance(required, list):
        raise SchemaShapeError(
            f"'required' must be a list, got {type(required).__name__}"
        )
    # YAML may load keys such as ``200`` or ``on`` as int or bool.
    return frozenset(
        str(entry) for entry in required if isinstance(entry, (str, int, float))
    )


def resolve_model(
    name: str,
    fragment: Any,
    diagnostics: Optional[list[Diagnostic]] = None,
) -> Optional[Model]:
    """Build a :class:`~oasir.models.Model` from a ``components/schemas`` entry.

    Args:
        name: The schema name (key in ``components/schemas``).
        fragment: The schema object.
        diagnostics: Collecting list for skipped properties.

    Returns:
        The model, or ``None`` when the schema is not object-like.

    Raises:
        SchemaShapeError: If the schema, its ``properties`` or its
            ``required`` value has the wrong JSON type.
    """
    if not isinstance(fragment, Mapping):
        raise SchemaShapeError(
            f"schema must be an object, got {type(fragment).__name__}"
        )

    raw_properties = fragment.get("properties")
    if fragment.get("type") != "object" and raw_properties is None:
        return None
    if raw_properties is None:
        raw_properties = {}
    if not isinstance(raw_properties, Mapping):
        raise SchemaShapeError(
            f"'properties' must be an object, got {type(raw_properties).__name__}"
        )

    required = _required_names(fragment)
    properties: list[Property] = []
    for raw_name, prop_schema in raw_properties.items():
        prop_name = str(raw_name)
        subject = f"{name}.{prop_name}"
        if not isinstance(prop_schema, Mapping):
            report(
                diagnostics,
                DiagnosticKind.PROPERTY,
                subject,
                f"property schema must be an object, got {type(prop_schema).__name__}",
            )
            continue
        try:
            properties.append(
                resolve_property(prop_name, prop_schema, prop_name in required)
            )
        except (ResolutionError, ValueError) as exc:
            report(diagnostics, DiagnosticKind.PROPERTY, subject, str(exc))

    return Model(
        name=name,
        properties=properties,
        description=as_text(fragment.get("description")),
    )
