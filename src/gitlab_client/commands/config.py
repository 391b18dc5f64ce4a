"""Config commands -- view and modify global configuration.

Provides the ``gitlab-client config`` sub-command group for reading,
updating, and resetting :class:`~gitlab_client.models.GlobalConfig`, and
for listing the configured profiles.
"""

from __future__ import annotations

import typer

from gitlab_client.commands._shared import is_forced
from gitlab_client.output import error, format_response, get_output, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    from gitlab_client.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("profiles")
def config_profiles() -> None:
    """List configured profiles with their server and proxy."""
    from gitlab_client.config import list_profiles, load_profile
    from gitlab_client.exceptions import ConfigError

    names = list_profiles()
    if not names:
        info("No profiles configured.")
        return

    rows: list[list[str]] = []
    for name in names:
        try:
            profile = load_profile(name)
        except ConfigError:
            rows.append([name, "error", "-"])
            continue
        proxy = f"{profile.proxy.host}:{profile.proxy.port}" if profile.proxy else "-"
        rows.append([name, profile.url, proxy])
    get_output().print_table(["Profile", "URL", "Proxy"], rows, title="Profiles")


@config_app.command("remove-profile")
def config_remove_profile(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile to delete."),
) -> None:
    """Delete a profile and its stored private token.

    Example::

        gitlab-client --force config remove-profile old-server
    """
    from gitlab_client.auth.credential_store import CredentialStore
    from gitlab_client.commands._shared import exit_on_error
    from gitlab_client.config import delete_profile

    if not is_forced(ctx):
        if not typer.confirm(f'Delete profile "{name}"?'):
            info("Cancelled.")
            raise typer.Exit()

    with exit_on_error():
        delete_profile(name)
    CredentialStore(name).clear()
    success(f'Profile "{name}" removed.')


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the current value (bool or str)
    and the result is validated before saving.

    Example::

        gitlab-client config set default_profile work
        gitlab-client config set output.format json
    """
    from gitlab_client.config import load_global_config, save_global_config
    from gitlab_client.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults. Asks for confirmation unless ``--force``."""
    from gitlab_client.config import save_global_config
    from gitlab_client.models import GlobalConfig

    if not is_forced(ctx):
        if not typer.confirm("Reset all config to defaults?"):
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
