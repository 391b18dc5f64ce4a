"""Init command -- create a profile for a GitLab server.

Implements the ``gitlab-client init`` top-level command: it records the
server URL, the optional forwarding proxy with its bypass patterns, and
where the private token comes from, then pins the new profile in a
project-local ``gitlab-client.json``.
"""

from __future__ import annotations

import json
import re
from typing import Optional

import typer

from gitlab_client.output import error, info, success, suggest


def init_command(
    name: str = typer.Option(..., "--name", "-n", help="Profile name."),
    url: str = typer.Option(..., "--url", "-u", help="GitLab server URL."),
    api_path: str = typer.Option("/api/v3", "--api-path", help="Path of the API root."),
    proxy: Optional[str] = typer.Option(
        None, "--proxy", help="Forwarding proxy as HOST:PORT or http://HOST:PORT."
    ),
    exclude: Optional[list[str]] = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Hostname pattern (regex, full match) that bypasses the proxy. Repeatable.",
    ),
    token_source: Optional[str] = typer.Option(
        None,
        "--token-source",
        help="Private token source: env:VAR, file:/path or prompt (default: stored at login).",
    ),
) -> None:
    """Create a profile for a GitLab server.

    Example::

        gitlab-client init --name work --url https://gitlab.example.com
        gitlab-client init -n work -u https://gitlab.corp \\
            --proxy proxy.corp:3128 -x 'localhost' -x '.*\\.corp'
    """
    from gitlab_client.config import profile_exists, project_config_path, save_profile
    from gitlab_client.models import Profile, ProxyConfig

    if exclude and not proxy:
        error("--exclude requires --proxy.")
        raise typer.Exit(code=2)

    proxy_config: Optional[ProxyConfig] = None
    if proxy:
        try:
            scheme, host, port = _parse_proxy(proxy)
            proxy_config = ProxyConfig(
                host=host, port=port, scheme=scheme, excluded_hostnames=exclude or []
            )
        except ValueError as exc:
            error(f"Invalid proxy settings: {exc}")
            raise typer.Exit(code=2) from None

    if profile_exists(name):
        info(f'Profile "{name}" already exists and will be overwritten.')

    profile = Profile(
        name=name,
        url=url,
        api_path=api_path,
        private_token_source=token_source,
        proxy=proxy_config,
    )
    save_profile(profile)

    project_config_path().write_text(json.dumps({"default_profile": name}, indent=2) + "\n")

    success(f'Profile "{name}" created.')
    if token_source is None:
        suggest("Log in: gitlab-client auth login")
    if proxy_config is not None:
        suggest("Check routing: gitlab-client route check <host>")


_PROXY_RE = re.compile(r"(?:(?P<scheme>[a-z][a-z0-9+.-]*)://)?(?P<host>[^:/]+):(?P<port>\d+)/?")


def _parse_proxy(value: str) -> tuple[str, str, int]:
    """Split ``[scheme://]host:port`` into its parts (scheme defaults to http)."""
    match = _PROXY_RE.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"expected HOST:PORT, got {value!r}")
    return match.group("scheme") or "http", match.group("host"), int(match.group("port"))
