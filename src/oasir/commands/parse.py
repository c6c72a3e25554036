"""The ``oasir parse`` command -- resolve a document and emit the IR as JSON.

The IR goes to stdout (or the root ``--output`` file) so that it can be
piped straight into a code generator. Every diagnostic is printed to stderr
as a warning. With ``--strict`` the command exits with
:data:`~oasir.exit_codes.EXIT_DIAGNOSTICS` when anything was skipped.
"""

from __future__ import annotations

from typing import Optional

import typer

from oasir.exceptions import OasirError
from oasir.exit_codes import EXIT_DIAGNOSTICS
from oasir.models import SchemaIR
from oasir.output import debug, error, print_json, warning


def load_ir(
    source: str,
    timeout: Optional[float] = None,
    media_type: Optional[str] = None,
) -> SchemaIR:
    """Resolve settings, load *source*, and parse it.

    Shared by ``parse`` and the ``inspect`` sub-commands.

    Raises:
        typer.Exit: With the error's exit code when settings are invalid or
            the document cannot be loaded.
    """
    from oasir.config import resolve_settings
    from oasir.parser import parse_schema

    try:
        settings = resolve_settings(cli_timeout=timeout, cli_media_type=media_type)
        debug(f"Loading {source} (media type {settings.media_type})")
        return parse_schema(source, settings)
    except OasirError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def report_diagnostics(ir: SchemaIR) -> None:
    """Print each diagnostic of *ir* as a warning on stderr."""
    for diagnostic in ir.diagnostics:
        warning(str(diagnostic))


def parse_command(
    source: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds for remote documents."
    ),
    media_type: Optional[str] = typer.Option(
        None, "--media-type", help="Media type whose schemas type bodies."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero when entries were skipped."
    ),
) -> None:
    """Resolve an OpenAPI document and print its IR as JSON.

    Example::

        oasir parse openapi.yaml > ir.json
        oasir parse https://example.com/openapi.json --strict
    """
    ir = load_ir(source, timeout=timeout, media_type=media_type)
    report_diagnostics(ir)
    print_json(ir.to_dict())

    if strict and ir.diagnostics:
        error(f"{len(ir.diagnostics)} entries could not be resolved")
        raise typer.Exit(code=EXIT_DIAGNOSTICS)
