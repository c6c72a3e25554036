"""Exception hierarchy for oasir.

All exceptions inherit from :class:`OasirError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`oasir.exit_codes`.
The top-level error handler in :func:`oasir.app.main` catches ``OasirError``
and exits with the appropriate code.

There are two tiers. :class:`LoadError` and its subclasses are *fatal*: the
document could not be obtained or decoded, so nothing can be resolved.
:class:`ResolutionError` and its subclasses are *recoverable*: they are
raised for one malformed model, endpoint, or parameter, caught by the
document resolver, and turned into a :class:`~oasir.models.Diagnostic`.

Subclass hierarchy::

    OasirError (exit 1)
    +-- ConfigError             (exit 1)
    +-- LoadError               (exit 7)
    |   +-- SpecNotFoundError
    |   +-- HTTPStatusLoadError
    |   +-- FetchError
    |   +-- DecodeError
    |   +-- InvalidDocumentError
    +-- ResolutionError         (exit 1)
        +-- SchemaShapeError
        +-- RefResolutionError
        +-- UnsupportedVersionError
"""

from __future__ import annotations

from oasir.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_SPEC_LOAD_ERROR,
)


class OasirError(Exception):
    """Base exception for all oasir errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`oasir.exit_codes`. The entry point catches this
    exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(OasirError):
    """Raised for configuration problems (invalid project file, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE


# --- Fatal tier ---


class LoadError(OasirError):
    """Raised when the OpenAPI document cannot be loaded at all.

    Args:
        message: Human-readable error description.
        source: The path or URL that was being loaded.
    """

    exit_code = EXIT_SPEC_LOAD_ERROR

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class SpecNotFoundError(LoadError):
    """Raised when a local document path does not exist."""


class HTTPStatusLoadError(LoadError):
    """Raised when fetching a remote document returns anything but HTTP 200."""

    def __init__(self, message: str, source: str = "", status_code: int = 0):
        super().__init__(message, source=source)
        self.status_code = status_code


class FetchError(LoadError):
    """Raised on network-level failures (timeout, DNS, connection refused)."""


class DecodeError(LoadError):
    """Raised when the document body is empty or is not a JSON/YAML object."""


class InvalidDocumentError(LoadError):
    """Raised when :func:`~oasir.parser.document.parse` is given a non-mapping."""


# --- Recoverable tier ---


class ResolutionError(OasirError):
    """Base class for per-entry failures that never abort a whole parse."""


class SchemaShapeError(ResolutionError):
    """Raised when a fragment is structurally wrong (e.g. a list where a map was expected)."""


class RefResolutionError(ResolutionError):
    """Raised when an internal ``$ref`` pointer cannot be followed."""


class UnsupportedVersionError(ResolutionError):
    """Raised when the ``openapi`` field is missing or is not a 3.x version."""
