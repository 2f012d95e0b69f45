"""Config commands -- view and create the structdoc config file.

Provides the ``structdoc config`` sub-command group.  ``show`` prints the
effective :class:`~structdoc.models.DocsConfig` after precedence
resolution; ``init`` writes a default ``structdoc.json``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from structdoc.output import emit_data, error, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to a structdoc.json config file."
    ),
) -> None:
    """Show the effective configuration.

    Example::

        structdoc config show
        STRUCTDOC_CONFIG=docs.json structdoc config show
    """
    from structdoc.config import find_config_path, resolve_config
    from structdoc.exceptions import ConfigError

    try:
        config = resolve_config(config_path)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    path = find_config_path(config_path)
    info(f"Config file: {path if path is not None else '(defaults)'}")
    emit_data(config.model_dump(mode="json"))


@config_app.command("init")
def config_init(
    path: Path = typer.Option(
        Path("structdoc.json"), "--path", help="Where to write the config file."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a config file holding the default settings.

    Example::

        structdoc config init
        structdoc config init --path docs/structdoc.json --force
    """
    from structdoc.config import init_config
    from structdoc.exceptions import StructdocError

    try:
        init_config(path, force=force)
    except StructdocError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Wrote default configuration to {path}")
