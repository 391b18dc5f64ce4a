"""Helpers shared by the command modules: profile lookup and API sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from gitlab_client.exceptions import GitLabClientError
from gitlab_client.models import Profile
from gitlab_client.output import error, suggest


def _ctx_value(ctx: typer.Context, key: str, default=None):  # noqa: ANN001, ANN202
    return ctx.obj.get(key, default) if ctx.obj else default


def is_forced(ctx: typer.Context) -> bool:
    return bool(_ctx_value(ctx, "force", False))


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`GitLabClientError` and exit with its code."""
    try:
        yield
    except GitLabClientError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def active_profile(ctx: typer.Context) -> Profile:
    """Resolve the profile selected by ``--profile``, env or config files.

    ``--url`` (or ``GITLAB_CLIENT_URL``) replaces the profile's server URL.
    """
    from gitlab_client.config import resolve_config

    with exit_on_error():
        _, profile = resolve_config(
            cli_profile=_ctx_value(ctx, "profile"), cli_url=_ctx_value(ctx, "url")
        )
    if profile is None:
        error("No profile selected.")
        suggest("Create one: gitlab-client init --name <name> --url <url>")
        raise typer.Exit(code=2)
    return profile


@contextmanager
def api_session(profile: Profile, authenticated: bool = True):  # noqa: ANN201
    """Open a :class:`~gitlab_client.client.GitLabApiClient` for *profile*.

    With ``authenticated`` the profile's private token is resolved first
    and a missing token is reported as an error.
    """
    from gitlab_client.client import GitLabApiClient, SyncClient
    from gitlab_client.config import resolve_private_token

    with exit_on_error():
        token = resolve_private_token(profile) if authenticated else None
        if authenticated and token is None:
            error(f'Not logged in to "{profile.name}".')
            suggest("Log in: gitlab-client auth login")
            raise typer.Exit(code=3)
        with SyncClient(profile, private_token=token) as client:
            yield GitLabApiClient(client)
