"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for gitlab_client:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.gitlab-client/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir`, :func:`get_profiles_dir`.
* **Global config** -- A single :class:`~gitlab_client.models.GlobalConfig`
  JSON file storing defaults (output format, default profile).
* **Profiles** -- One JSON file per GitLab server, each deserialised into a
  :class:`~gitlab_client.models.Profile` (server URL, proxy settings,
  token source).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.
* **Credential resolution** -- :func:`resolve_credential` reads private
  tokens from env vars, files, interactive prompts, or the credential store.

All file writes go through :func:`_atomic_write` (temp file, then rename).
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from gitlab_client.exceptions import ConfigError
from gitlab_client.models import GlobalConfig, Profile

_APP_NAME = "gitlab-client"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "gitlab-client.json"

ENV_PROFILE = "GITLAB_CLIENT_PROFILE"
ENV_URL = "GITLAB_CLIENT_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/gitlab-client/`` (default
    ``~/.config/gitlab-client/``). On macOS/Windows: ``~/.gitlab-client/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs, credentials), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/gitlab-client/`` (default
    ``~/.local/share/gitlab-client/``). On macOS/Windows:
    ``~/.gitlab-client/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/``, creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. When *mode* is
    given it is applied to the temp file before any content is written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when the file is missing.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all profile names, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate a profile from disk.

    Validation includes compiling the proxy's excluded hostname patterns,
    so a profile with a malformed pattern is rejected here.

    Raises:
        ConfigError: If the profile file does not exist, contains invalid
            JSON, or fails Pydantic validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    data = _read_json(path, f"profile '{name}'")
    try:
        return Profile.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Persist a profile atomically; the file name derives from ``profile.name``."""
    data = profile.model_dump(mode="json", exclude_none=True)
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    """Delete a profile's JSON file.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Project-local config ---


def project_config_path() -> Path:
    """Path of the project-local config file in the working directory."""
    return Path.cwd() / _PROJECT_CONFIG_FILENAME


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./gitlab-client.json``, or ``None`` if it does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON.
    """
    path = project_config_path()
    if not path.is_file():
        return None
    return _read_json(path, "project config")


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_url: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_profile``, ``cli_url``)
        2. Environment variables (``GITLAB_CLIENT_PROFILE``, ``GITLAB_CLIENT_URL``)
        3. Project config (``./gitlab-client.json``)
        4. User config (``~/.config/gitlab-client/config.json``)
        5. Defaults

    Returns:
        A tuple of ``(global_config, active_profile_or_None)``.
    """
    global_cfg = load_global_config()

    resolved_name: Optional[str] = global_cfg.default_profile
    project = load_project_config()
    if project is not None and project.get("default_profile"):
        resolved_name = project["default_profile"]
    env_profile = os.environ.get(ENV_PROFILE)
    if env_profile:
        resolved_name = env_profile
    if cli_profile is not None:
        resolved_name = cli_profile

    if resolved_name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            resolved_name = profiles[0]

    profile: Optional[Profile] = None
    if resolved_name is not None:
        profile = load_profile(resolved_name)

    if profile is not None:
        env_url = os.environ.get(ENV_URL)
        if cli_url is not None:
            profile.url = cli_url
        elif env_url:
            profile.url = env_url

    return global_cfg, profile


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts interactively (requires a TTY)
        - ``"store:PROFILE"`` -- the private token saved at login for PROFILE

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Private token: ")

    if source.startswith("store:"):
        profile_name = source[6:]
        from gitlab_client.auth.credential_store import CredentialStore

        entry = CredentialStore(profile_name).load()
        if entry is None:
            raise ConfigError(
                f"No stored token for profile '{profile_name}' (source: {source})"
            )
        return entry.private_token

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_private_token(profile: Profile) -> Optional[str]:
    """Return the private token for *profile*, or ``None`` if none is known.

    An explicit ``private_token_source`` must resolve; otherwise the token
    stored at login is used when present.
    """
    if profile.private_token_source:
        return resolve_credential(profile.private_token_source)
    from gitlab_client.auth.credential_store import CredentialStore

    entry = CredentialStore(profile.name).load()
    return entry.private_token if entry is not None else None
