"""Terminal output for the ``gitlab-client`` CLI.

Data (groups, members, route decisions) is written to stdout and everything
else (status lines, errors, hints and ``--verbose`` traces) to stderr, so
``gitlab-client groups list --plain | cut -f2`` only ever sees data.

Three renderings are available, see :class:`OutputFormat`. ``auto`` picks
Rich tables when stdout is a colour-capable terminal and tab-separated
text otherwise. Colour is off when ``NO_COLOR`` is set, when ``TERM`` is
``dumb`` or with ``--no-color``.

The library layers (:mod:`gitlab_client.client`, :mod:`gitlab_client.http`)
only call :meth:`OutputManager.debug` on the global instance returned by
:func:`get_output`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from gitlab_client.http.route_planner import HttpHost


class OutputFormat(str, Enum):
    """How data written to stdout is rendered."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# level -> (plain prefix, Rich markup template, suppressed by --quiet)
_DIAGNOSTICS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "{}", True),
    "success": ("", "[green]{}[/green]", True),
    "suggest": ("→ ", "[dim]→ {}[/dim]", True),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] {}", False),
    "error": ("Error: ", "[bold red]Error:[/bold red] {}", False),
}


class OutputManager:
    """Writes data to stdout and diagnostics to stderr in one format.

    One instance is built by :func:`~gitlab_client.app.main_callback` from
    the global CLI flags and installed with :func:`set_output`.

    Args:
        format: Rendering for stdout data; ``AUTO`` is resolved here.
        no_color: Strip colour and markup from both streams.
        quiet: Drop ``info``, ``success`` and ``suggest`` messages.
        verbose: Show ``debug`` messages (requests and route decisions).
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
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Write one line of raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Render a JSON-like document (e.g. a dumped model).

        Plain mode prints ``key<TAB>value`` lines for a mapping and one line
        per item for a list.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(_to_json(data), "json", theme="monokai", word_wrap=True))
        elif isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                values = item.values() if isinstance(item, dict) else [item]
                self.print_data("\t".join(str(v) for v in values))
        else:
            self.print_data(str(data))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows of cells.

        JSON mode emits one object per row keyed by the headers; plain mode
        emits the header line followed by tab-separated rows. ``title`` is
        only shown by Rich tables.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        # Cells hold user text such as regex character classes, never markup.
        table = Table(
            title=escape(title) if title else None, show_header=True, header_style="bold cyan"
        )
        for header in headers:
            table.add_column(escape(header))
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self._stdout.print(table)

    def print_route(self, hostname: str, proxy: Optional[HttpHost]) -> None:
        """Render the route decision for *hostname*.

        Plain output is ``HOST<TAB>direct`` or
        ``HOST<TAB>proxy<TAB>PROXYHOST:PORT``.
        """
        via = f"{proxy.hostname}:{proxy.port}" if proxy is not None else None
        if self._format == OutputFormat.JSON:
            record = {"host": hostname, "route": "direct" if via is None else "proxy", "proxy": via}
            self.print_data(_to_json(record))
        elif self._format == OutputFormat.RICH:
            if via is None:
                self._stdout.print(f"{escape(hostname)}  [green]direct[/green]")
            else:
                self._stdout.print(f"{escape(hostname)}  [yellow]proxy[/yellow] {escape(via)}")
        elif via is None:
            self.print_data(f"{hostname}\tdirect")
        else:
            self.print_data(f"{hostname}\tproxy\t{via}")

    # --- stderr ---

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def suggest(self, message: str) -> None:
        """Print a next-step hint such as the command to run."""
        self._diagnostic("suggest", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        """Print an error; shown even with ``--quiet``."""
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        """Print a trace line, only with ``--verbose``."""
        if not self._verbose:
            return
        if self._no_color:
            print(f"[debug] {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    def _diagnostic(self, level: str, message: str) -> None:
        prefix, markup, quiet_drops = _DIAGNOSTICS[level]
        if quiet_drops and self._quiet:
            return
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(escape(message)))


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Return True when ``NO_COLOR`` is set (to any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the global instance (the streams it holds may be stale in tests)."""
    global _output
    _output = None


# --- Shortcuts on the global instance ---


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def error(message: str) -> None:
    get_output().error(message)
