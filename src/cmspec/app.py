"""Typer application and CLI entry point for cmspec.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``generate``, ``inspect``, ``verify``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~cmspec.exceptions.CmspecError` instances escaping a command exit
with their own code; anything else is written to a crash log under the data
directory.

See Also:
    :mod:`cmspec.config`: Option resolution and the user config file.
    :mod:`cmspec.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from cmspec import __version__
from cmspec.commands.config import config_app
from cmspec.commands.generate import generate_command
from cmspec.commands.inspect import inspect_app
from cmspec.commands.verify import verify_command
from cmspec.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="cmspec",
    help="Generate OpenAPI 3 documents from headless-CMS content models.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.command("verify")(verify_command)
app.add_typer(inspect_app, name="inspect", help="Inspect a content model.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cmspec {__version__}")
        raise typer.Exit()


def _configured_format() -> str:
    """Return the user's preferred output format, or ``auto``."""
    from cmspec.config import load_user_config
    from cmspec.exceptions import ConfigError

    try:
        return load_user_config().output.format
    except ConfigError as exc:
        sys.stderr.write(f"Warning: {exc}; using automatic output format\n")
        return "auto"


@app.callback()
def main_callback(
    ctx: typer.Context,
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
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~cmspec.output.OutputManager` from CLI
    flags (falling back to the configured ``output.format``), routes the
    ``cmspec`` logger through Rich, and stores shared options in the Typer
    context so that sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and log records.
        force: Skip interactive confirmations.
    """
    from cmspec.output import OutputFormat, OutputManager, configure_logging, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(_configured_format())
        except ValueError:
            fmt = OutputFormat.AUTO

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    configure_logging(verbose=verbose, console=output.stderr_console)

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from cmspec.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``cmspec`` console script.

    Unhandled :class:`~cmspec.exceptions.CmspecError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

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
        from cmspec.exceptions import CmspecError
        from cmspec.output import error

        if isinstance(exc, CmspecError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
