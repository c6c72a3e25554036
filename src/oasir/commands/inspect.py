"""Inspect commands -- examine the resolved IR of a document.

Provides the ``oasir inspect`` sub-command group with read-only views of
what the resolver produced: models, the properties of one model, endpoints,
and diagnostics. Output is a table (Rich in a terminal, tab-separated when
piped, JSON with the root ``--json`` flag).
"""

from __future__ import annotations

from typing import Optional

import typer

from oasir.commands.parse import load_ir
from oasir.output import error, info, print_table


inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("models")
def inspect_models(
    source: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    media_type: Optional[str] = typer.Option(
        None, "--media-type", help="Media type whose schemas type bodies."
    ),
) -> None:
    """List all models with their property counts.

    Example::

        oasir inspect models openapi.json
    """
    ir = load_ir(source, media_type=media_type)
    if not ir.models:
        info("No models defined in this document.")
        return

    rows: list[list[str]] = []
    for model in ir.models:
        rows.append([
            model.name,
            str(len(model.properties)),
            (model.description or "-")[:60],
        ])
    print_table(
        ["Model", "Properties", "Description"],
        rows,
        title=f"{ir.info.title} -- Models ({len(rows)})",
    )


@inspect_app.command("model")
def inspect_model(
    source: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    name: str = typer.Argument(..., help="Model name."),
    media_type: Optional[str] = typer.Option(
        None, "--media-type", help="Media type whose schemas type bodies."
    ),
) -> None:
    """Show the resolved properties of one model.

    Example::

        oasir inspect model openapi.json Pet
    """
    ir = load_ir(source, media_type=media_type)
    model = ir.model(name)
    if model is None:
        error(f"No model named '{name}'")
        raise typer.Exit(code=1)

    rows = [
        [
            prop.name,
            prop.resolved_type.display(),
            "Yes" if prop.is_required else "",
            (prop.description or "-")[:60],
        ]
        for prop in model.properties
    ]
    print_table(
        ["Property", "Type", "Required", "Description"], rows, title=model.name
    )


@inspect_app.command("endpoints")
def inspect_endpoints(
    source: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    media_type: Optional[str] = typer.Option(
        None, "--media-type", help="Media type whose schemas type bodies."
    ),
) -> None:
    """List all endpoints with their body and response types.

    Example::

        oasir inspect endpoints openapi.json
    """
    ir = load_ir(source, media_type=media_type)

    rows: list[list[str]] = []
    for endpoint in ir.endpoints:
        body = endpoint.request_body.resolved_type.display() if endpoint.request_body else "-"
        responses = ", ".join(
            f"{code}: {response.resolved_type.display()}"
            for code, response in endpoint.responses.items()
        )
        rows.append([
            endpoint.method.value,
            endpoint.path,
            endpoint.operation_id or "-",
            body,
            responses or "-",
        ])
    print_table(
        ["Method", "Path", "Operation", "Body", "Responses"],
        rows,
        title=f"{ir.info.title} -- Endpoints ({len(rows)})",
    )


@inspect_app.command("diagnostics")
def inspect_diagnostics(
    source: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    media_type: Optional[str] = typer.Option(
        None, "--media-type", help="Media type whose schemas type bodies."
    ),
) -> None:
    """List every entry the resolver skipped or degraded, and why.

    Example::

        oasir inspect diagnostics openapi.json
    """
    ir = load_ir(source, media_type=media_type)
    if not ir.diagnostics:
        info("No diagnostics. Every entry resolved cleanly.")
        return

    rows = [
        [diagnostic.kind.value, diagnostic.subject, diagnostic.message]
        for diagnostic in ir.diagnostics
    ]
    print_table(
        ["Kind", "Subject", "Message"], rows, title=f"Diagnostics ({len(rows)})"
    )
