"""Terminal output for the cmspec CLI.

stdout carries data only: the generated document, the ``inspect`` and
``verify`` tables, and the settings dump of ``config show``. Progress
notes, errors, next-step hints and log records all go to stderr, so
``cmspec generate model.json > openapi.json`` always leaves a clean file.

The root callback installs one :class:`OutputManager`; commands reach it
through the module-level helpers below. Generator and parser modules never
print. They log, and :func:`configure_logging` attaches the ``cmspec``
logger to the manager's stderr console.

Colour follows ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Notice(NamedTuple):
    prefix: str
    markup: str
    quiet_hides: bool


_NOTICES: dict[str, _Notice] = {
    "info": _Notice("", "{}", True),
    "success": _Notice("", "[green]{}[/green]", True),
    "suggest": _Notice("→ ", "[dim]→ {}[/dim]", True),
    "debug": _Notice("[debug] ", "[dim]\\[debug] {}[/dim]", True),
    "error": _Notice("Error: ", "[bold red]Error:[/bold red] {}", False),
}


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    """Turn ``AUTO`` into ``RICH`` or ``PLAIN``; explicit formats pass through."""
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _settings_rows(settings: Mapping[str, Any], prefix: str = "") -> Iterator[list[str]]:
    """Flatten nested settings into ``[dotted.key, value]`` rows.

    The dotted keys are the ones ``cmspec config set`` accepts. Empty
    mappings are kept as ``{}`` so every settable key is listed.
    """
    for key, value in settings.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping) and value:
            yield from _settings_rows(value, prefix=f"{dotted}.")
        elif isinstance(value, str):
            yield [dotted, value]
        else:
            yield [dotted, json.dumps(value, ensure_ascii=False)]


class OutputManager:
    """Routes CLI output to stdout (data) or stderr (diagnostics).

    Args:
        format: Rendering for stdout data; ``AUTO`` is resolved on creation.
        no_color: Disable colour and Rich markup.
        quiet: Hide info, success and suggestion notices. Errors still show.
        verbose: Show debug notices.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """Console bound to stderr; the log handler renders into it."""
        return self._stderr

    # -- stdout -------------------------------------------------------------

    def print_data(self, text: str) -> None:
        """Write *text* to stdout unformatted."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows as a Rich table, a JSON array of objects, or TSV.

        *title* is shown in Rich mode only; the other formats are meant to be
        parsed.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self._stdout.print(table)

    def print_settings(self, settings: Mapping[str, Any]) -> None:
        """Dump the user settings for ``config show``.

        JSON mode prints the nested mapping as is. Plain and Rich modes list
        one dotted key per row, as a ``Key``/``Value`` table.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(settings, indent=2, ensure_ascii=False))
            return
        self.print_table(["Key", "Value"], list(_settings_rows(settings)), title="Configuration")

    # -- stderr -------------------------------------------------------------

    def notify(self, kind: str, message: str) -> None:
        """Write a diagnostic of *kind* (a key of the notice table) to stderr."""
        notice = _NOTICES[kind]
        if notice.quiet_hides and self._quiet:
            return
        if kind == "debug" and not self._verbose:
            return
        if self._no_color:
            print(f"{notice.prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(notice.markup.format(escape(message)))

    def info(self, message: str) -> None:
        self.notify("info", message)

    def success(self, message: str) -> None:
        self.notify("success", message)

    def suggest(self, message: str) -> None:
        """Hint at the next command to run."""
        self.notify("suggest", message)

    def debug(self, message: str) -> None:
        self.notify("debug", message)

    def error(self, message: str) -> None:
        """Report a failure. Shown even with ``--quiet``."""
        self.notify("error", message)


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Send ``cmspec.*`` log records to stderr through a :class:`RichHandler`.

    Warnings (slug collisions, lenient options, odd output extensions) are
    always shown; ``verbose`` adds per-entity debug records. Calling again
    replaces the previous handler.
    """
    logger = logging.getLogger("cmspec")
    for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
        logger.removeHandler(handler)
    logger.addHandler(
        RichHandler(
            console=console or get_output().stderr_console,
            show_time=False,
            show_path=False,
        )
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests swap stdio between runs)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def print_settings(settings: Mapping[str, Any]) -> None:
    get_output().print_settings(settings)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)


def error(message: str) -> None:
    get_output().error(message)
