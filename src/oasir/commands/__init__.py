"""Built-in CLI commands for oasir.

This package groups the Typer command modules registered on the root app:

* :mod:`~oasir.commands.parse` -- resolve a document and print its IR as
  JSON (a plain callback registered as ``oasir parse``).
* :mod:`~oasir.commands.inspect` -- table views of models, endpoints and
  diagnostics (the ``oasir inspect`` sub-application).
"""
