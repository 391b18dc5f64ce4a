"""Route commands -- inspect the proxy settings of the active profile.

``gitlab-client route check HOST`` answers "would a request to HOST go
through the proxy?" using the same planner the HTTP client uses.
"""

from __future__ import annotations

import httpx
import typer

from gitlab_client.commands._shared import active_profile, exit_on_error
from gitlab_client.output import error, get_output, info


route_app = typer.Typer(no_args_is_help=True)


@route_app.command("show")
def route_show(ctx: typer.Context) -> None:
    """Show the proxy and the hostname patterns that bypass it."""
    profile = active_profile(ctx)
    if profile.proxy is None:
        info(f'Profile "{profile.name}" has no proxy; all hosts are reached directly.')
        return

    proxy = profile.proxy
    info(f"Proxy: {proxy.scheme}://{proxy.host}:{proxy.port}")
    get_output().print_table(
        ["#", "Excluded hostname pattern"],
        [[str(i), p] for i, p in enumerate(proxy.excluded_hostnames, 1)],
        title="Proxy bypass",
    )


@route_app.command("check")
def route_check(
    ctx: typer.Context,
    target: str = typer.Argument(help="Hostname or URL to plan a route for."),
) -> None:
    """Print whether TARGET is reached directly or through the proxy.

    Example::

        gitlab-client route check localhost
        gitlab-client route check https://gitlab.example.com
    """
    from gitlab_client.http import HttpHost, build_planner

    profile = active_profile(ctx)
    try:
        host = HttpHost.from_url(target if "://" in target else f"http://{target}")
    except httpx.InvalidURL as exc:
        error(f"Invalid host or URL {target!r}: {exc}")
        raise typer.Exit(code=2) from None

    planner = build_planner(profile)
    if planner is None:
        get_output().print_route(host.hostname, None)
        return

    with exit_on_error():
        route = planner.determine_route(host)
    get_output().print_route(host.hostname, route.proxy)
