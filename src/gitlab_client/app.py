"""Typer application and CLI entry point for gitlab_client.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``init``, ``auth``, ``groups``, ``route``,
``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from gitlab_client import __version__
from gitlab_client.commands.auth import auth_app
from gitlab_client.commands.config import config_app
from gitlab_client.commands.groups import groups_app
from gitlab_client.commands.init import init_command
from gitlab_client.commands.route import route_app
from gitlab_client.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="gitlab-client",
    help="Command-line client for the GitLab v3 API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("init")(init_command)
app.add_typer(auth_app, name="auth", help="Log in and manage the stored token.")
app.add_typer(groups_app, name="groups", help="Groups and group members.")
app.add_typer(route_app, name="route", help="Inspect proxy routing.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gitlab-client {__version__}")
        raise typer.Exit()


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
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="Server URL overriding the profile's (also GITLAB_CLIENT_URL)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show requests and route decisions."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~gitlab_client.output.OutputManager` from the
    CLI flags (falling back to the configured default format) and stores the
    shared options in ``ctx.obj``.
    """
    from gitlab_client.commands._shared import exit_on_error
    from gitlab_client.config import load_global_config
    from gitlab_client.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        with exit_on_error():
            configured = load_global_config().output.format
        try:
            fmt = OutputFormat(configured)
        except ValueError:
            fmt = OutputFormat.AUTO

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["url"] = url
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to disk and return the log file path."""
    from gitlab_client.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    header = f"gitlab-client {__version__}\nargv: {' '.join(sys.argv)}\n\n"
    log_path.write_text(header + traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``gitlab-client`` console script.

    :class:`~gitlab_client.exceptions.GitLabClientError` instances that
    escape a command cause a clean exit with the error's ``exit_code``.
    All other exceptions produce a crash log and a generic failure exit.
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
        from gitlab_client.exceptions import GitLabClientError
        from gitlab_client.output import error

        if isinstance(exc, GitLabClientError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
