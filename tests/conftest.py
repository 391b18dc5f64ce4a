"""Shared test fixtures for gitlab_client.

Provides isolated config environments, output state management, canned
profiles, and a CLI runner. Fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from gitlab_client.models import Profile, ProxyConfig, RequestConfig
from gitlab_client.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time; when
    CliRunner swaps those streams the cached references go stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile() -> Profile:
    """A profile for a GitLab server with no proxy."""
    return Profile(
        name="test",
        url="https://gitlab.example.com",
        request=RequestConfig(timeout=5, verify_ssl=False),
    )


@pytest.fixture
def proxied_profile() -> Profile:
    """A profile whose traffic goes through a proxy except for local hosts."""
    return Profile(
        name="proxied",
        url="https://gitlab.example.com",
        proxy=ProxyConfig(
            host="proxy.example.com",
            port=8080,
            excluded_hostnames=["localhost", r"10\.0\..*", r"internal\.corp"],
        ),
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, forces the
    XDG code path, clears GITLAB_CLIENT_* variables and changes the working
    directory to tmp_path.
    """
    monkeypatch.setattr("gitlab_client.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["GITLAB_CLIENT_PROFILE", "GITLAB_CLIENT_URL", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
