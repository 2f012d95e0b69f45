"""Typer application and CLI entry point for structdoc.

This module wires the top-level Typer application, registers the built-in
sub-commands (``build``, ``inspect``, ``config``) and configures logging
and output from the global flags.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  It installs a SIGINT handler, invokes the Typer app and
maps :class:`~structdoc.exceptions.StructdocError` to its exit code.

See Also:
    :mod:`structdoc.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from structdoc import __version__
from structdoc.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="structdoc",
    help="Turn OpenAPI 3.x / Swagger 2.x documents into structured documentation.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from structdoc.commands.build import build_command  # noqa: E402
from structdoc.commands.config import config_app  # noqa: E402
from structdoc.commands.inspect import inspect_app  # noqa: E402

app.command("build")(build_command)
app.add_typer(inspect_app, name="inspect", help="Inspect the generated documentation tree.")
app.add_typer(config_app, name="config", help="Configuration management.")

_LOG_HANDLER_NAME = "structdoc-cli"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"structdoc {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, no_color: bool) -> None:
    """Attach a Rich stderr handler to the ``structdoc`` logger.

    Recovered faults in the transformation (unresolvable references,
    reference cycles) are logged at WARNING; ``--verbose`` lowers the level
    to DEBUG to trace every extracted operation.
    """
    logger = logging.getLogger("structdoc")
    for handler in list(logger.handlers):
        if handler.get_name() == _LOG_HANDLER_NAME:
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
    )
    handler.set_name(_LOG_HANDLER_NAME)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~structdoc.output.OutputManager` and the
    logging handler from the CLI flags.
    """
    from structdoc.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    _configure_logging(verbose, output.format != OutputFormat.RICH or no_color)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``structdoc`` console script.

    Unhandled :class:`~structdoc.exceptions.StructdocError` instances cause
    a clean exit with the error's ``exit_code``.  Any other exception is
    reported on stderr and exits with a generic failure code.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from structdoc.exceptions import StructdocError
        from structdoc.output import error

        if isinstance(exc, StructdocError):
            error(str(exc))
            sys.exit(exc.exit_code)
        logging.getLogger(__name__).debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
