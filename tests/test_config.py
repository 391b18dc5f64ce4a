"""Tests for gitlab_client.config: XDG paths, atomic writes, profiles, precedence."""

from __future__ import annotations

import io
import json
import os
import stat
from pathlib import Path
from typing import Any

import pytest

from gitlab_client.auth.credential_store import CredentialEntry, CredentialStore
from gitlab_client.config import (
    _atomic_write,
    delete_profile,
    get_config_dir,
    get_data_dir,
    get_profiles_dir,
    list_profiles,
    load_global_config,
    load_profile,
    load_project_config,
    profile_exists,
    resolve_config,
    resolve_credential,
    resolve_private_token,
    save_global_config,
    save_profile,
)
from gitlab_client.exceptions import ConfigError
from gitlab_client.models import GlobalConfig, OutputConfig, Profile


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_profile(name: str = "test", url: str = "https://gitlab.example.com") -> Profile:
    return Profile(name=name, url=url)


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_xdg_config_dir(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "gitlab-client"
        assert get_config_dir().is_dir()

    def test_xdg_data_dir(self, isolated_config: Path) -> None:
        assert get_data_dir() == isolated_config / "data" / "gitlab-client"

    def test_profiles_dir(self, isolated_config: Path) -> None:
        assert get_profiles_dir() == get_config_dir() / "profiles"

    def test_non_xdg_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("gitlab_client.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".gitlab-client"
        assert get_data_dir() == tmp_path / ".gitlab-client" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text() == '{"a": 1}'

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_text("old")
        _atomic_write(target, "new")
        assert target.read_text() == "new"
        assert list(tmp_path.iterdir()) == [target]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.json"
        _atomic_write(target, "x", mode=0o600)
        assert stat.S_IMODE(target.stat().st_mode) == 0o600


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(default_profile="work", output=OutputConfig(format="json"))
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"auto_select_single_profile": "maybe"})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TestProfiles:
    def test_save_and_load(self, isolated_config: Path, proxied_profile: Profile) -> None:
        save_profile(proxied_profile)
        loaded = load_profile("proxied")
        assert loaded.url == proxied_profile.url
        assert loaded.proxy == proxied_profile.proxy

    def test_none_fields_are_not_written(self, isolated_config: Path) -> None:
        save_profile(_make_profile())
        data = json.loads((get_profiles_dir() / "test.json").read_text())
        assert "proxy" not in data
        assert "private_token_source" not in data

    def test_list_profiles_sorted(self, isolated_config: Path) -> None:
        for name in ["work", "home", "ci"]:
            save_profile(_make_profile(name))
        assert list_profiles() == ["ci", "home", "work"]

    def test_missing_profile(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_profile("nope")

    def test_malformed_pattern_rejected_on_load(self, isolated_config: Path) -> None:
        _write_json(
            get_profiles_dir() / "bad.json",
            {
                "name": "bad",
                "url": "https://gitlab.example.com",
                "proxy": {"host": "proxy", "excluded_hostnames": ["10\\.0\\.(.*"]},
            },
        )
        with pytest.raises(ConfigError, match="Invalid profile 'bad'"):
            load_profile("bad")

    def test_delete(self, isolated_config: Path) -> None:
        save_profile(_make_profile())
        assert profile_exists("test")
        delete_profile("test")
        assert not profile_exists("test")

    def test_delete_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            delete_profile("ghost")


# ---------------------------------------------------------------------------
# Project config and precedence
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loaded_from_cwd(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "gitlab-client.json", {"default_profile": "work"})
        assert load_project_config() == {"default_profile": "work"}

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "gitlab-client.json").write_text("[")
        with pytest.raises(ConfigError):
            load_project_config()


class TestResolveConfig:
    @pytest.fixture(autouse=True)
    def _profiles(self, isolated_config: Path) -> None:
        for name in ["global", "project", "env", "cli"]:
            save_profile(_make_profile(name, url=f"https://{name}.example.com"))

    def test_no_profile(self) -> None:
        _, profile = resolve_config()
        assert profile is None

    def test_global_default(self) -> None:
        save_global_config(GlobalConfig(default_profile="global"))
        _, profile = resolve_config()
        assert profile is not None and profile.name == "global"

    def test_project_beats_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_profile="global"))
        _write_json(isolated_config / "gitlab-client.json", {"default_profile": "project"})
        _, profile = resolve_config()
        assert profile.name == "project"

    def test_env_beats_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(isolated_config / "gitlab-client.json", {"default_profile": "project"})
        monkeypatch.setenv("GITLAB_CLIENT_PROFILE", "env")
        _, profile = resolve_config()
        assert profile.name == "env"

    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_CLIENT_PROFILE", "env")
        _, profile = resolve_config(cli_profile="cli")
        assert profile.name == "cli"

    def test_url_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_CLIENT_URL", "https://env-url.example.com")
        _, profile = resolve_config(cli_profile="cli")
        assert profile.url == "https://env-url.example.com"
        _, profile = resolve_config(cli_profile="cli", cli_url="https://flag.example.com")
        assert profile.url == "https://flag.example.com"

    def test_unknown_profile(self) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_profile="missing")


class TestAutoSelect:
    def test_single_profile_is_selected(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        _, profile = resolve_config()
        assert profile.name == "only"

    def test_disabled(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        save_global_config(GlobalConfig(auto_select_single_profile=False))
        _, profile = resolve_config()
        assert profile is None


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_TOKEN", "from-env")
        assert resolve_credential("env:GITLAB_TOKEN") == "from-env"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITLAB_TOKEN", raising=False)
        with pytest.raises(ConfigError, match="GITLAB_TOKEN"):
            resolve_credential("env:GITLAB_TOKEN")

    def test_file(self, tmp_path: Path) -> None:
        token_file = tmp_path / "token"
        token_file.write_text("from-file\n")
        assert resolve_credential(f"file:{token_file}") == "from-file"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_prompt_requires_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO())
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_store(self, isolated_config: Path) -> None:
        CredentialStore("work").save(CredentialEntry(private_token="stored"))
        assert resolve_credential("store:work") == "stored"

    def test_store_empty(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="No stored token"):
            resolve_credential("store:work")

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:secret")


class TestResolvePrivateToken:
    def test_explicit_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITLAB_TOKEN", "abc")
        profile = Profile(name="p", url="https://x", private_token_source="env:GITLAB_TOKEN")
        assert resolve_private_token(profile) == "abc"

    def test_falls_back_to_store(self, isolated_config: Path) -> None:
        CredentialStore("p").save(CredentialEntry(private_token="stored"))
        assert resolve_private_token(Profile(name="p", url="https://x")) == "stored"

    def test_none_when_unknown(self, isolated_config: Path) -> None:
        assert resolve_private_token(Profile(name="p", url="https://x")) is None

