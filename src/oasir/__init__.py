"""oasir -- Resolve OpenAPI 3.x documents into a code-generation IR.

This package reads an OpenAPI document (JSON or YAML, local file or
remote URL) and produces a language-neutral intermediate representation of
its data models and operations. Every JSON Schema fragment is mapped to a
single :class:`~oasir.models.TypeRef` with one nullability flag, so that a
downstream code generator never has to interpret ``anyOf``, type arrays, or
the several competing nullability conventions itself.

Typical usage::

    from oasir.parser import parse_schema

    ir = parse_schema("https://petstore3.swagger.io/api/v3/openapi.json")
    for model in ir.models:
        print(model.name, [p.name for p in model.properties])

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic IR models and parser settings.
    config: Settings resolution and XDG data directory.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading and schema resolution.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
