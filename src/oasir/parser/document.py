"""Assemble the :class:`~oasir.models.SchemaIR` for a whole OpenAPI document.

:func:`parse` is the single entry point of the resolution engine. It walks
``components/schemas`` and ``paths`` in document order, resolving each entry
independently. Any exception raised while resolving one model or one
endpoint is caught here, logged as a warning, recorded as a
:class:`~oasir.models.Diagnostic` naming the entry, and the entry is left out
of the result. Nothing short of an undecodable document makes the parse fail.

:func:`parse_schema` adds the I/O step in front: load from a path or URL,
then parse.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from oasir.exceptions import InvalidDocumentError, ResolutionError, UnsupportedVersionError
from oasir.models import (
    APIInfo,
    Diagnostic,
    DiagnosticKind,
    Endpoint,
    HTTPMethod,
    Model,
    ParserSettings,
    SchemaIR,
)
from oasir.parser.diagnostics import report
from oasir.parser.loader import load_spec, validate_openapi_version
from oasir.parser.operations import resolve_endpoint
from oasir.parser.refs import deref
from oasir.parser.schemas import as_text, resolve_model

logger = logging.getLogger(__name__)

# Path-item keys that name operations, matched case-insensitively
_METHODS = {method.value.lower(): method for method in HTTPMethod}


def parse_schema(source: str, settings: Optional[ParserSettings] = None) -> SchemaIR:
    """Load an OpenAPI document from *source* and resolve it.

    Args:
        source: A URL (http/https), file path, or ``'-'`` for stdin.
        settings: Loader and resolver settings; defaults when ``None``.

    Returns:
        The resolved IR.

    Raises:
        LoadError: If the document cannot be found, fetched, or decoded.
    """
    settings = settings or ParserSettings()
    document = load_spec(source, settings)
    return parse(document, settings)


def parse(document: Any, settings: Optional[ParserSettings] = None) -> SchemaIR:
    """Resolve a decoded OpenAPI document into a :class:`~oasir.models.SchemaIR`.

    The document is only read, never modified, and the result depends on
    nothing else: parsing the same document twice gives equal IRs.

    Args:
        document: The decoded document (a JSON object).
        settings: Resolver settings; defaults when ``None``.

    Returns:
        The IR with its models, endpoints, and diagnostics.

    Raises:
        InvalidDocumentError: If *document* is not a mapping.

    Example::

        ir = parse({"openapi": "3.1.0", "paths": {"/ping": {"get": {}}}})
        ir.endpoints[0].method
        # <HTTPMethod.GET: 'GET'>
    """
    if not isinstance(document, Mapping):
        raise InvalidDocumentError(
            f"OpenAPI document must be an object (got {type(document).__name__})"
        )
    settings = settings or ParserSettings()
    diagnostics: list[Diagnostic] = []

    openapi_version = _check_version(document, diagnostics)
    models = _resolve_models(document, diagnostics)
    endpoints = _resolve_endpoints(document, settings, diagnostics)

    logger.debug(
        "Resolved %d models and %d endpoints with %d diagnostics",
        len(models),
        len(endpoints),
        len(diagnostics),
    )
    return SchemaIR(
        openapi_version=openapi_version,
        info=_extract_info(document),
        models=models,
        endpoints=endpoints,
        diagnostics=diagnostics,
    )


def _check_version(document: Mapping[str, Any], diagnostics: list[Diagnostic]) -> Optional[str]:
    """Return the declared version; an unsupported one is only a diagnostic."""
    try:
        return validate_openapi_version(document)
    except UnsupportedVersionError as exc:
        report(diagnostics, DiagnosticKind.DOCUMENT, "openapi", str(exc))
    declared = document.get("openapi")
    return str(declared) if declared is not None else None


def _extract_info(document: Mapping[str, Any]) -> APIInfo:
    info = document.get("info")
    if not isinstance(info, Mapping):
        return APIInfo()
    version = info.get("version")
    description = info.get("description")
    return APIInfo(
        title=as_text(info.get("title")) or "Untitled API",
        version=str(version) if version is not None else "0.0.0",
        description=description if isinstance(description, str) else None,
    )


def _section(
    container: Mapping[str, Any],
    key: str,
    subject: str,
    diagnostics: list[Diagnostic],
) -> Mapping[str, Any]:
    """Return ``container[key]`` when it is a map; absent or malformed gives ``{}``."""
    value = container.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        report(
            diagnostics,
            DiagnosticKind.DOCUMENT,
            subject,
            f"must be an object, got {type(value).__name__}",
        )
        return {}
    return value


def _resolve_models(document: Mapping[str, Any], diagnostics: list[Diagnostic]) -> list[Model]:
    components = _section(document, "components", "components", diagnostics)
    schemas = _section(components, "schemas", "components.schemas", diagnostics)

    models: list[Model] = []
    for name, fragment in schemas.items():
        name = str(name)
        try:
            model = resolve_model(name, fragment, diagnostics)
        except Exception as exc:  # noqa: BLE001
            report(diagnostics, DiagnosticKind.MODEL, name, str(exc) or type(exc).__name__)
            continue
        if model is not None:
            models.append(model)
    return models


def _resolve_endpoints(
    document: Mapping[str, Any],
    settings: ParserSettings,
    diagnostics: list[Diagnostic],
) -> list[Endpoint]:
    paths = _section(document, "paths", "paths", diagnostics)

    endpoints: list[Endpoint] = []
    for path, path_item in paths.items():
        path = str(path)
        try:
            path_item = deref(path_item, document)
        except ResolutionError as exc:
            report(diagnostics, DiagnosticKind.PATH, path, str(exc))
            continue
        if not isinstance(path_item, Mapping):
            report(
                diagnostics,
                DiagnosticKind.PATH,
                path,
                f"path item must be an object, got {type(path_item).__name__}",
            )
            continue

        for key, operation in path_item.items():
            method = _METHODS.get(key.lower()) if isinstance(key, str) else None
            if method is None:
                # parameters, summary, servers, x-* extensions
                continue
            try:
                endpoints.append(
                    resolve_endpoint(
                        path,
                        method,
                        operation,
                        path_parameters=path_item.get("parameters"),
                        root=document,
                        settings=settings,
                        diagnostics=diagnostics,
                    )
                )
            except Exception as exc:  # noqa: BLE001
                report(
                    diagnostics,
                    DiagnosticKind.ENDPOINT,
                    f"{method.value} {path}",
                    str(exc) or type(exc).__name__,
                )
    return endpoints
