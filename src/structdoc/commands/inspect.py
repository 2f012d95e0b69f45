"""Inspect commands -- summarise the generated documentation tree.

Provides the ``structdoc inspect`` sub-command group with read-only views
of a transformed document: its sections and modules, every endpoint with
its placement, and the general document info.  Tables adapt to the active
output format (Rich, plain TSV or JSON).
"""

from __future__ import annotations

from typing import Optional

import typer

from structdoc.commands.build import load_documentation
from structdoc.output import print_table

inspect_app = typer.Typer(no_args_is_help=True)

_SOURCE_HELP = "Path to an OpenAPI/Swagger document, or '-' for stdin."
_CONFIG_HELP = "Path to a structdoc.json config file."


@inspect_app.command("sections")
def inspect_sections(
    source: str = typer.Argument(help=_SOURCE_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """List sections with their module and endpoint counts.

    Example::

        structdoc inspect sections openapi.yaml
    """
    doc = load_documentation(source, config_path)

    headers = ["Section", "ID", "Modules", "Endpoints"]
    rows: list[list[str]] = []
    for section in doc.sections:
        rows.append([
            section.name,
            section.id,
            str(len(section.modules)),
            str(sum(len(m.endpoints) for m in section.modules)),
        ])

    print_table(headers, rows, title=f"{doc.title} -- Sections ({len(rows)})")


@inspect_app.command("endpoints")
def inspect_endpoints(
    source: str = typer.Argument(help=_SOURCE_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """List every endpoint with the section and module it landed in.

    An operation with several tags appears once per tag.

    Example::

        structdoc inspect endpoints openapi.yaml --plain
    """
    doc = load_documentation(source, config_path)

    headers = ["Method", "Path", "Section", "Module", "Success", "Errors", "Auth"]
    rows: list[list[str]] = []
    for section in doc.sections:
        for module in section.modules:
            for endpoint in module.endpoints:
                rows.append([
                    endpoint.method,
                    endpoint.path,
                    section.name,
                    module.name,
                    str(endpoint.success_status),
                    ",".join(str(e.status) for e in endpoint.error_responses) or "-",
                    "Yes" if endpoint.requires_auth else "",
                ])

    print_table(headers, rows, title=f"{doc.title} -- Endpoints ({len(rows)})")


@inspect_app.command("info")
def inspect_info(
    source: str = typer.Argument(help=_SOURCE_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Show title, version, document format, servers and tags.

    Example::

        structdoc inspect info openapi.yaml
    """
    doc = load_documentation(source, config_path)

    rows = [
        ["Title", doc.title],
        ["Version", doc.version],
        ["Format", doc.spec_version or "unknown"],
        ["Description", doc.description or "-"],
        ["Servers", ", ".join(s.url for s in doc.servers) or "-"],
        ["Tags", ", ".join(doc.tags) or "-"],
        ["Sections", str(len(doc.sections))],
    ]
    print_table(["Field", "Value"], rows, title="Document Info")
