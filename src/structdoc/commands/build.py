"""Build command -- transform a document into the documentation model.

``structdoc build SOURCE`` loads a local JSON/YAML document (or stdin with
``-``), runs the full transformation and prints the camelCase JSON a
renderer consumes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from structdoc.models import Documentation
from structdoc.output import debug, emit_data, error, success, warning


def load_documentation(source: str, config_path: Optional[str] = None) -> Documentation:
    """Load *source*, resolve the config and build the documentation.

    Shared by ``build`` and the ``inspect`` commands.

    Raises:
        typer.Exit: With the error's exit code when the document or the
            config cannot be loaded.
    """
    from structdoc.config import resolve_config
    from structdoc.documentation import build_documentation
    from structdoc.exceptions import StructdocError
    from structdoc.parser.loader import load_document

    try:
        config = resolve_config(config_path)
        debug(f"Loading document from {source}")
        document = load_document(source)
    except StructdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    return build_documentation(document, config)


def build_command(
    source: str = typer.Argument(help="Path to an OpenAPI/Swagger document, or '-' for stdin."),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to a structdoc.json config file."
    ),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the JSON to this file instead of stdout."
    ),
) -> None:
    """Build the documentation model and print it as JSON.

    Example::

        structdoc build openapi.yaml
        structdoc build openapi.json -o docs.json
        cat openapi.yaml | structdoc build -
    """
    from structdoc.documentation import documentation_to_dict

    doc = load_documentation(source, config_path)
    endpoints = sum(len(m.endpoints) for s in doc.sections for m in s.modules)
    if endpoints == 0:
        warning(f"No endpoints found in {source}")

    emit_data(documentation_to_dict(doc), output_file)

    if output_file is not None:
        success(
            f"Wrote {len(doc.sections)} sections ({endpoints} endpoints) to {output_file}"
        )
