"""Typer application and CLI entry point for reqport.

This module wires together the top-level Typer application and registers
the built-in commands:

* ``parse`` -- shell command to request JSON.
* ``generate`` / ``targets`` -- request to curl command or client snippet.
* ``collection import|export`` -- collection documents.
* ``spec import`` -- API description documents.
* ``vars extract|check|resolve`` -- template variables.
* ``config show|set|reset`` -- global configuration.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`reqport.config`: Global configuration and environment loading.
    :mod:`reqport.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from reqport import __version__
from reqport.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="reqport",
    help="Convert HTTP requests between curl, collections, API specs, and code.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from reqport.commands.collection import collection_app  # noqa: E402
from reqport.commands.config import config_app  # noqa: E402
from reqport.commands.generate import generate_command, targets_command  # noqa: E402
from reqport.commands.shell import parse_command  # noqa: E402
from reqport.commands.spec import spec_app  # noqa: E402
from reqport.commands.variables import vars_app  # noqa: E402

app.command("parse")(parse_command)
app.command("generate")(generate_command)
app.command("targets")(targets_command)
app.add_typer(collection_app, name="collection", help="Collection import and export.")
app.add_typer(spec_app, name="spec", help="Import API description documents.")
app.add_typer(vars_app, name="vars", help="Inspect and resolve {{variables}}.")
app.add_typer(config_app, name="config", help="Configuration management.")

_log_handler: Optional[logging.Handler] = None


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"reqport {__version__}")
        raise typer.Exit()


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
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~reqport.output.OutputManager` from the
    CLI flags, falling back to ``output.format`` in the global config when
    neither ``--json`` nor ``--plain`` is given. With ``--verbose`` the
    engine's debug log records are shown on stderr.
    """
    from reqport.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    config_warning = None
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt, config_warning = _configured_format()

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    _configure_logging(output.log_handler() if verbose else None)

    if config_warning:
        output.warning(config_warning)


def _configured_format() -> tuple[Any, Optional[str]]:
    """Output format from the global config, plus a warning if it is unusable."""
    from reqport.config import load_global_config
    from reqport.exceptions import ConfigError
    from reqport.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format), None
    except ConfigError as exc:
        return OutputFormat.AUTO, str(exc)
    except ValueError:
        return OutputFormat.AUTO, "Ignoring unknown output.format in config."


def _configure_logging(handler: Optional[logging.Handler]) -> None:
    """Route ``reqport.*`` log records to *handler*, or silence them."""
    global _log_handler

    logger = logging.getLogger("reqport")
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
    _log_handler = handler

    if handler is None:
        logger.setLevel(logging.WARNING)
        return
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from reqport.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``reqport`` console script.

    :class:`~reqport.exceptions.ReqportError` instances that escape a
    command cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

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
        from reqport.exceptions import ReqportError
        from reqport.output import error

        if isinstance(exc, ReqportError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
