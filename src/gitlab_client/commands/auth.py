"""Auth commands -- log in to GitLab and manage the stored private token.

Typical workflow::

    gitlab-client auth login --username jdoe   # prompts for the password
    gitlab-client auth status                  # who am I?
    gitlab-client auth logout
"""

from __future__ import annotations

from typing import Optional

import typer

from gitlab_client.commands._shared import active_profile, api_session, is_forced
from gitlab_client.exit_codes import EXIT_AUTH_FAILURE
from gitlab_client.output import error, get_output, info, success, suggest


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", prompt=True, help="Username or email."),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="Account password."
    ),
) -> None:
    """Log in with a password and store the session's private token.

    Example::

        gitlab-client auth login --username jdoe
    """
    from gitlab_client.auth.credential_store import CredentialEntry, CredentialStore

    profile = active_profile(ctx)
    with api_session(profile, authenticated=False) as api:
        session = api.get_session(username, password)

    if session.blocked:
        error(f'Account "{session.username}" is blocked; the token was not stored.')
        raise typer.Exit(code=EXIT_AUTH_FAILURE)

    CredentialStore(profile.name).save(
        CredentialEntry(private_token=session.private_token, username=session.username)
    )
    success(f'Logged in to "{profile.name}" as {session.username}.')
    if profile.private_token_source:
        suggest(
            f"This profile reads its token from {profile.private_token_source}; "
            "the stored token is only used without a token source."
        )


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Show the user the private token belongs to.

    Example::

        gitlab-client auth status
    """
    profile = active_profile(ctx)
    with api_session(profile) as api:
        user = api.get_current_user()

    get_output().print_table(
        ["Field", "Value"],
        [
            ["Profile", profile.name],
            ["Server", profile.url],
            ["Username", user.username],
            ["Name", user.name],
            ["Email", user.email],
            ["State", user.state],
            ["Admin", str(user.is_admin)],
        ],
        title="Session",
    )


@auth_app.command("logout")
def auth_logout(
    ctx: typer.Context,
    profile_name: Optional[str] = typer.Argument(
        None, help="Profile to log out of (default: the active profile)."
    ),
) -> None:
    """Delete the stored private token.

    Example::

        gitlab-client auth logout
        gitlab-client --force auth logout work
    """
    from gitlab_client.auth.credential_store import CredentialStore

    name = profile_name or active_profile(ctx).name
    store = CredentialStore(name)
    if store.load() is None:
        info(f'No stored token for "{name}".')
        return

    if not is_forced(ctx):
        if not typer.confirm(f'Remove the stored token for "{name}"?'):
            info("Cancelled.")
            raise typer.Exit()

    store.clear()
    success(f'Logged out of "{name}".')
