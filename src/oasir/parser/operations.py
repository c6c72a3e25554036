"""Resolve path-item operations into :class:`~oasir.models.Endpoint` objects.

Each operation is resolved in independent parts -- parameters, request body,
and responses -- and every part degrades on its own. A parameter without a
schema is skipped, an unreadable request body becomes ``None``, and an
unreadable response becomes ``Any``; each of these records a diagnostic, and
none of them fails the endpoint.

Parameter merging follows OpenAPI semantics: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values. Reusable parameters, request bodies and
responses (``$ref`` into ``components``) are dereferenced against the root
document. Schema ``$ref`` pointers are never followed; they become model
references.

Only the configured JSON media type (``application/json`` unless overridden in
:class:`~oasir.models.ParserSettings`) contributes body and response types.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from oasir.exceptions import ResolutionError, SchemaShapeError
from oasir.models import (
    Diagnostic,
    DiagnosticKind,
    Endpoint,
    HTTPMethod,
    Parameter,
    ParameterLocation,
    ParserSettings,
    RequestBody,
    Response,
    TypeRef,
)
from oasir.parser.diagnostics import report
from oasir.parser.refs import deref
from oasir.parser.schemas import as_text
from oasir.parser.types import resolve_type


def _media_schema(content: Any, media_type: str) -> Optional[Mapping[str, Any]]:
    """Return the schema declared for *media_type* in a ``content`` map."""
    if not isinstance(content, Mapping):
        return None
    media = content.get(media_type)
    if not isinstance(media, Mapping):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, Mapping) else None


# --- Parameters ---


def _param_key(param: Mapping[str, Any]) -> tuple[str, str]:
    return as_text(param.get("name")), as_text(param.get("in"))


def merge_parameters(
    path_params: list[Mapping[str, Any]],
    op_params: list[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field).

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.

    Returns:
        Path-level survivors followed by all operation-level parameters.
    """
    op_keys = {_param_key(param) for param in op_params}
    merged = [param for param in path_params if _param_key(param) not in op_keys]
    merged.extend(op_params)
    return merged


def _dereferenced_parameters(
    entries: Any,
    root: Optional[Mapping[str, Any]],
    subject: str,
    diagnostics: Optional[list[Diagnostic]],
) -> list[Mapping[str, Any]]:
    """Follow ``$ref`` on each raw parameter, dropping the unusable ones."""
    if entries is None:
        return []
    if not isinstance(entries, list):
        report(
            diagnostics,
            DiagnosticKind.PARAMETER,
            subject,
            f"'parameters' must be a list, got {type(entries).__name__}",
        )
        return []

    result: list[Mapping[str, Any]] = []
    for entry in entries:
        try:
            target = deref(entry, root)
        except ResolutionError as exc:
            report(diagnostics, DiagnosticKind.PARAMETER, subject, str(exc))
            continue
        if not isinstance(target, Mapping):
            report(
                diagnostics,
                DiagnosticKind.PARAMETER,
                subject,
                f"parameter must be an object, got {type(target).__name__}",
            )
            continue
        result.append(target)
    return result


def resolve_parameter(param: Mapping[str, Any]) -> Parameter:
    """Build a :class:`~oasir.models.Parameter` from a dereferenced parameter object.

    Nullability is a single boolean: the parameter is nullable when it is
    optional or when its schema carries any explicit nullability signal.
    Path parameters are always required.

    Args:
        param: The parameter object (``name``, ``in``, ``schema``, ...).

    Returns:
        The resolved parameter.

    Raises:
        SchemaShapeError: If ``name``, a known ``in`` location, or a
            ``schema`` object is missing.
    """
    name = param.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaShapeError("parameter has no 'name'")

    try:
        location = ParameterLocation(param.get("in"))
    except ValueError:
        raise SchemaShapeError(
            f"parameter '{name}' has unknown location {param.get('in')!r}"
        ) from None

    schema = param.get("schema")
    if not isinstance(schema, Mapping):
        raise SchemaShapeError(f"parameter '{name}' has no schema")

    required = param.get("required") is True or location == ParameterLocation.PATH
    return Parameter(
        name=name,
        location=location,
        resolved_type=resolve_type(schema).with_nullable(not required),
        is_required=required,
        description=as_text(param.get("description")),
    )


# --- Request body ---


def resolve_request_body(
    body: Any,
    root: Optional[Mapping[str, Any]] = None,
    settings: Optional[ParserSettings] = None,
) -> Optional[RequestBody]:
    """Build a :class:`~oasir.models.RequestBody` from an operation's ``requestBody``.

    Args:
        body: The raw ``requestBody`` value (``None`` when absent).
        root: The root document, used to follow a ``$ref``.
        settings: Supplies the media type to read the schema from.

    Returns:
        The request body, or ``None`` when the operation has none or the
        body declares no schema for the JSON media type.

    Raises:
        RefResolutionError: If a ``$ref`` body cannot be followed.
        SchemaShapeError: If the body is not an object.
    """
    if body is None:
        return None
    settings = settings or ParserSettings()

    body = deref(body, root)
    if not isinstance(body, Mapping):
        raise SchemaShapeError(
            f"requestBody must be an object, got {type(body).__name__}"
        )

    content = body.get("content")
    schema = _media_schema(content, settings.media_type)
    if schema is None:
        return None

    return RequestBody(
        resolved_type=resolve_type(schema),
        is_required=body.get("required") is True,
        description=as_text(body.get("description")),
        content_types=[str(key) for key in content],
    )


# --- Responses ---


def resolve_response(
    status_code: str,
    response: Any,
    root: Optional[Mapping[str, Any]] = None,
    settings: Optional[ParserSettings] = None,
) -> Response:
    """Build a :class:`~oasir.models.Response` for one status code.

    Args:
        status_code: The literal key from the ``responses`` map.
        response: The response object or a ``$ref`` to one.
        root: The root document, used to follow a ``$ref``.
        settings: Supplies the media type to read the schema from.

    Returns:
        The response; its type is ``Any`` when no JSON schema is declared.

    Raises:
        RefResolutionError: If a ``$ref`` response cannot be followed.
        SchemaShapeError: If the response is not an object.
    """
    settings = settings or ParserSettings()

    response = deref(response, root)
    if not isinstance(response, Mapping):
        raise SchemaShapeError(
            f"response must be an object, got {type(response).__name__}"
        )

    schema = _media_schema(response.get("content"), settings.media_type)
    return Response(
        status_code=status_code,
        resolved_type=resolve_type(schema) if schema is not None else TypeRef.any_(),
        description=as_text(response.get("description")),
    )


def resolve_responses(
    responses: Any,
    root: Optional[Mapping[str, Any]] = None,
    settings: Optional[ParserSettings] = None,
    subject: str = "",
    diagnostics: Optional[list[Diagnostic]] = None,
) -> dict[str, Response]:
    """Resolve every entry of an operation's ``responses`` map.

    Keys are kept as the literal status-code strings, ``"default"``
    included, in document order. A response that cannot be read keeps its
    key with an ``Any`` type; when it was an unresolvable ``$ref`` the type
    comes from the ref itself, so a schema ref still names its model.
    """
    if responses is None:
        return {}
    if not isinstance(responses, Mapping):
        report(
            diagnostics,
            DiagnosticKind.ENDPOINT,
            subject,
            f"'responses' must be an object, got {type(responses).__name__}",
        )
        return {}

    result: dict[str, Response] = {}
    for status, response in responses.items():
        key = str(status)
        try:
            result[key] = resolve_response(key, response, root, settings)
        except (ResolutionError, ValueError) as exc:
            report(diagnostics, DiagnosticKind.ENDPOINT, subject, f"response {key}: {exc}")
            result[key] = Response(status_code=key, resolved_type=resolve_type(response))
    return result


# --- Endpoint ---


def resolve_endpoint(
    path: str,
    method: HTTPMethod | str,
    operation: Any,
    path_parameters: Any = None,
    root: Optional[Mapping[str, Any]] = None,
    settings: Optional[ParserSettings] = None,
    diagnostics: Optional[list[Diagnostic]] = None,
) -> Endpoint:
    """Build an :class:`~oasir.models.Endpoint` for one path + method pair.

    Args:
        path: The path template (key in ``paths``).
        method: The HTTP method; strings are matched case-insensitively.
        operation: The operation object.
        path_parameters: The path item's own ``parameters`` list.
        root: The root document, used to follow component ``$ref``s.
        settings: Parser settings (media type).
        diagnostics: Collecting list for degraded sub-parts.

    Returns:
        The resolved endpoint.

    Raises:
        SchemaShapeError: If *operation* is not an object.
        ValueError: If *method* is not an HTTP method.
    """
    if isinstance(method, str) and not isinstance(method, HTTPMethod):
        method = HTTPMethod(method.upper())
    if not isinstance(operation, Mapping):
        raise SchemaShapeError(
            f"operation must be an object, got {type(operation).__name__}"
        )
    settings = settings or ParserSettings()
    subject = f"{method.value} {path}"

    merged = merge_parameters(
        _dereferenced_parameters(path_parameters, root, subject, diagnostics),
        _dereferenced_parameters(operation.get("parameters"), root, subject, diagnostics),
    )
    parameters: list[Parameter] = []
    for raw in merged:
        try:
            parameters.append(resolve_parameter(raw))
        except (ResolutionError, ValueError) as exc:
            report(diagnostics, DiagnosticKind.PARAMETER, subject, str(exc))

    try:
        request_body = resolve_request_body(operation.get("requestBody"), root, settings)
    except (ResolutionError, ValueError) as exc:
        report(diagnostics, DiagnosticKind.ENDPOINT, subject, f"requestBody: {exc}")
        request_body = None

    raw_tags = operation.get("tags")
    tags = [tag for tag in raw_tags if isinstance(tag, str)] if isinstance(raw_tags, list) else []
    operation_id = operation.get("operationId")

    return Endpoint(
        path=path,
        method=method,
        operation_id=operation_id if isinstance(operation_id, str) else None,
        summary=as_text(operation.get("summary")),
        description=as_text(operation.get("description")),
        tags=tags,
        parameters=parameters,
        request_body=request_body,
        responses=resolve_responses(
            operation.get("responses"), root, settings, subject, diagnostics
        ),
        deprecated=operation.get("deprecated") is True,
    )
