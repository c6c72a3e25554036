"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oasir.exceptions.OasirError` subclass.
CI scripts can inspect the exit code to tell a broken document apart from
a document that parsed with warnings.

Example::

    $ oasir parse openapi.json --strict > ir.json
    $ echo $?
    8   # EXIT_DIAGNOSTICS -- some models or endpoints were skipped
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters.

Raised by Click itself for usage errors; listed so the full code table lives here.
"""

EXIT_SPEC_LOAD_ERROR = 7
"""The OpenAPI document could not be found, fetched, or decoded."""

EXIT_DIAGNOSTICS = 8
"""The document parsed, but entries were skipped and ``--strict`` was given."""
