"""structdoc -- Turn OpenAPI 3.x / Swagger 2.x documents into structured documentation.

This package walks an API description and produces a renderer-ready tree:
sections (one per tag) containing modules (one per inferred operation
intent) containing endpoint descriptors with resolved schemas and
synthesized request, success and error examples.

Typical workflow::

    structdoc build openapi.yaml -o docs.json   # documentation model as JSON
    structdoc inspect sections openapi.yaml     # quick overview table

Or from Python::

    from structdoc.documentation import build_documentation

    doc = build_documentation(document)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    documentation: Top-level build and serialization.
    config: Config file loading with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
