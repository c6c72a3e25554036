"""Load OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries. It is the only place a parse can fail as a
whole: every problem here raises a :class:`~oasir.exceptions.LoadError`
subclass carrying the offending source.

* Missing file -- :class:`~oasir.exceptions.SpecNotFoundError`.
* Any HTTP status other than 200 -- :class:`~oasir.exceptions.HTTPStatusLoadError`.
* Network failure -- :class:`~oasir.exceptions.FetchError`.
* Empty or undecodable body, or a non-object top level --
  :class:`~oasir.exceptions.DecodeError`.

Documents are JSON. Sources that are not explicitly JSON (by file extension
or content type) fall back to YAML, since OpenAPI documents are often
written in YAML.

The two public functions are:

* :func:`load_spec` -- Load and decode a document from any supported source.
* :func:`validate_openapi_version` -- Check and return the ``openapi`` version
  string. The document resolver records a failure here as a diagnostic
  rather than aborting.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from oasir.exceptions import (
    DecodeError,
    FetchError,
    HTTPStatusLoadError,
    SpecNotFoundError,
    UnsupportedVersionError,
)
from oasir.models import ParserSettings

logger = logging.getLogger(__name__)


def load_spec(source: str, settings: Optional[ParserSettings] = None) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin (``'-'``).

    Args:
        source: A URL (http/https), file path, or ``'-'`` for stdin.
        settings: Supplies the HTTP timeout and redirect policy.

    Returns:
        The decoded document as a dictionary.

    Raises:
        LoadError: If the source cannot be loaded or decoded.
    """
    settings = settings or ParserSettings()
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source, settings)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, as JSON or YAML."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DecodeError(f"Failed to read from stdin: {exc}", source="-") from exc

    if not content.strip():
        raise DecodeError("No input received from stdin", source="-")

    return _parse_content(content, source="-")


def _load_from_url(url: str, settings: ParserSettings) -> dict[str, Any]:
    """Fetch a document with a blocking GET.

    Args:
        url: The HTTP(S) URL to fetch.
        settings: Timeout and redirect policy.

    Returns:
        The decoded document.

    Raises:
        HTTPStatusLoadError: If the final response status is not 200.
        FetchError: If the request fails at the network level.
        DecodeError: If the body cannot be decoded.
    """
    logger.debug("Fetching %s (timeout=%ss)", url, settings.timeout)
    try:
        response = httpx.get(
            url,
            timeout=settings.timeout,
            follow_redirects=settings.follow_redirects,
        )
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch spec from {url}: {exc}", source=url) from exc

    if response.status_code != 200:
        raise HTTPStatusLoadError(
            f"HTTP {response.status_code} fetching spec from {url}",
            source=url,
            status_code=response.status_code,
        )

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint, source=url)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local UTF-8 file.

    ``.json`` files are decoded as JSON only; other extensions fall back to
    YAML when the content is not JSON.

    Raises:
        SpecNotFoundError: If *path* is not an existing file.
        DecodeError: If the file is unreadable, empty, or undecodable.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecNotFoundError(f"Spec file not found: {path}", source=path)

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Failed to read spec file {path}: {exc}", source=path) from exc

    if not content.strip():
        raise DecodeError(f"Spec file is empty: {path}", source=path)

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint, source=path)


def _parse_content(content: str, hint: str = "", source: str = "") -> dict[str, Any]:
    """Decode content as JSON or YAML.

    Tries JSON first (unless hint is ``'yaml'``), then falls back to YAML.
    A ``'json'`` hint disables the YAML fallback.

    Args:
        content: The raw string content.
        hint: Optional format hint (``'json'`` or ``'yaml'``).
        source: Path or URL, attached to any error raised.

    Returns:
        The decoded dictionary.

    Raises:
        DecodeError: If the content cannot be decoded or is not an object.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_object(json.loads(content), source)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DecodeError(
                    f"Invalid JSON in {source or 'document'}: {exc}", source=source
                ) from exc

    try:
        return _require_object(yaml.safe_load(content), source)
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = f"Failed to parse {source or 'document'} as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise DecodeError(msg, source=source)


def _require_object(result: Any, source: str) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DecodeError(f"Spec must be a JSON/YAML object (got {kind})", source=source)
    return result


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Accepts any 3.x version. Swagger 2.x, a missing ``openapi`` field, and
    other major versions raise.

    Args:
        spec: The decoded document.

    Returns:
        The OpenAPI version string (e.g., ``'3.0.3'``, ``'3.1.0'``).

    Raises:
        UnsupportedVersionError: If the version is missing or not 3.x.
    """
    if "swagger" in spec:
        raise UnsupportedVersionError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x documents are resolved."
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise UnsupportedVersionError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise UnsupportedVersionError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only OpenAPI 3.x documents are resolved."
    )
