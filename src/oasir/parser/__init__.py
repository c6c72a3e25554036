"""OpenAPI schema resolution -- load a document and resolve it into the IR.

This sub-package turns a raw OpenAPI 3.x document (JSON or YAML, local file or
remote URL) into a :class:`~oasir.models.SchemaIR` that a code generator can
consume.

Typical usage::

    from oasir.parser import load_spec, parse

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    ir = parse(raw)
    for diagnostic in ir.diagnostics:
        print(diagnostic)

Sub-modules, leaf first:

* :mod:`~oasir.parser.refs` -- ``$ref`` interpretation and one-hop
  dereferencing of reusable components.
* :mod:`~oasir.parser.types` -- The type resolver: schema fragment to
  :class:`~oasir.models.TypeRef`.
* :mod:`~oasir.parser.schemas` -- Property and model resolution.
* :mod:`~oasir.parser.operations` -- Parameter, request body, response and
  endpoint resolution.
* :mod:`~oasir.parser.document` -- The root resolver, collecting per-entry
  failures as diagnostics.
* :mod:`~oasir.parser.loader` -- I/O layer (URL, file, stdin).
"""

from oasir.parser.document import parse, parse_schema
from oasir.parser.loader import load_spec, validate_openapi_version
from oasir.parser.types import resolve_type

__all__ = ["load_spec", "validate_openapi_version", "parse", "parse_schema", "resolve_type"]
