"""Interpret ``$ref`` JSON Reference pointers.

Two different things happen to a ``$ref`` depending on where it appears:

* Inside a **schema** fragment the pointer is never followed. A ref of the
  exact shape ``#/components/schemas/<Name>`` becomes a reference to the model
  ``<Name>``; any other shape (external files, URLs, pointers into other
  component sections) is unknown to the type resolver.
  :func:`schema_ref_name` implements this rule.
* A reusable **parameter**, **request body**, or **response** (``$ref`` into
  ``components/parameters`` and friends) is dereferenced one hop with
  :func:`resolve_pointer` / :func:`deref`, so the endpoint resolver sees the
  real object.

Only internal references (those starting with ``#/``) are followed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from oasir.exceptions import RefResolutionError

SCHEMA_REF_PREFIX = "#/components/schemas/"


def _unescape(segment: str) -> str:
    """Undo RFC 6901 JSON Pointer escaping (``~1`` for ``/``, ``~0`` for ``~``)."""
    return segment.replace("~1", "/").replace("~0", "~")


def _is_array_index(segment: str) -> bool:
    return segment == "0" or (
        segment.isascii() and segment.isdigit() and not segment.startswith("0")
    )


def schema_ref_name(ref: Any) -> str | None:
    """Return the model name a schema ``$ref`` points to.

    Args:
        ref: The raw ``$ref`` value.

    Returns:
        ``"Widget"`` for ``"#/components/schemas/Widget"``, otherwise ``None``
        (including for non-string values and nested pointers such as
        ``#/components/schemas/Widget/properties/id``).
    """
    if not isinstance(ref, str) or not ref.startswith(SCHEMA_REF_PREFIX):
        return None
    name = ref[len(SCHEMA_REF_PREFIX):]
    if not name or "/" in name:
        return None
    return _unescape(name)


def resolve_pointer(ref: str, root: Mapping[str, Any]) -> Any:
    """Resolve a single internal ``$ref`` string against the root document.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/responses/NotFound"``).
        root: The root document to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        RefResolutionError: If the reference is external (does not start with
            ``#/``), or if any segment in the pointer path does not exist.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise RefResolutionError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = _unescape(raw_segment)

        if isinstance(current, Mapping):
            if segment not in current:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            # Array indexes are unsigned decimals without leading zeros.
            if not _is_array_index(segment) or int(segment) >= len(current):
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                )
            current = current[int(segment)]
        else:
            raise RefResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def deref(obj: Any, root: Mapping[str, Any] | None) -> Any:
    """Follow ``$ref`` chains on a component object until a non-ref is reached.

    Used for parameters, request bodies and responses, never for schemas.
    Chains are followed while they stay internal; a cycle raises.

    Args:
        obj: A component object that may be ``{"$ref": "#/..."}``.
        root: The root document, or ``None`` when no document is available.

    Returns:
        The dereferenced object (*obj* itself when it is not a ref).

    Raises:
        RefResolutionError: If the chain is circular, external, dangling, or
            no root document is available to resolve against.
    """
    seen: set[str] = set()
    while isinstance(obj, Mapping) and "$ref" in obj:
        ref = obj["$ref"]
        if not isinstance(ref, str):
            raise RefResolutionError(f"$ref must be a string, got {type(ref).__name__}")
        if root is None:
            raise RefResolutionError(f"Cannot resolve $ref '{ref}' without a document")
        if ref in seen:
            raise RefResolutionError(f"Circular $ref '{ref}'")
        seen.add(ref)
        obj = resolve_pointer(ref, root)
    return obj
