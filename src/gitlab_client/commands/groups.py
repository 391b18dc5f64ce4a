"""Group commands -- list groups, show one, and list its members."""

from __future__ import annotations

import typer

from gitlab_client.commands._shared import active_profile, api_session
from gitlab_client.output import get_output, info


groups_app = typer.Typer(no_args_is_help=True)


@groups_app.command("list")
def groups_list(ctx: typer.Context) -> None:
    """List the groups visible to the current user."""
    with api_session(active_profile(ctx)) as api:
        groups = api.get_groups()

    if not groups:
        info("No groups.")
        return
    get_output().print_table(
        ["ID", "Name", "Path"],
        [[str(g.id), g.name, g.path] for g in groups],
        title="Groups",
    )


@groups_app.command("show")
def groups_show(
    ctx: typer.Context,
    group_id: int = typer.Argument(help="Group id."),
) -> None:
    """Show a single group."""
    with api_session(active_profile(ctx)) as api:
        group = api.get_group(group_id)

    get_output().format_response(group.model_dump(mode="json"))


@groups_app.command("members")
def groups_members(
    ctx: typer.Context,
    group_id: int = typer.Argument(help="Group id."),
) -> None:
    """List a group's members with their access levels.

    Example::

        gitlab-client groups members 2
        gitlab-client --json groups members 2
    """
    with api_session(active_profile(ctx)) as api:
        members = api.get_group_members(group_id)

    if not members:
        info("No members.")
        return
    get_output().print_table(
        ["ID", "Username", "Name", "Access", "Active", "Since"],
        [
            [
                str(m.id),
                m.username,
                m.name,
                m.access_level.display_name,
                "yes" if m.is_active else "no",
                m.created_at.date().isoformat(),
            ]
            for m in members
        ],
        title=f"Members of {members[0].group_name}",
    )
