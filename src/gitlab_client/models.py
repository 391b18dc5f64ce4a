"""Canonical Pydantic models shared across all gitlab_client modules.

The models fall into two groups:

**API resource models** -- read-only views of JSON documents returned by the
GitLab v3 API:
    :class:`GitLabAccessLevel`, :class:`GitLabSession`,
    :class:`GitLabUserInfo`, :class:`GitLabUser`, :class:`GitLabGroup`
    and :class:`GitLabGroupMemberInfo`.

    Each model declares the keys it requires. Building one from a document
    that lacks a required key raises :class:`pydantic.ValidationError` (a
    :class:`ValueError`), so a partially populated object never exists.
    Unknown keys are ignored.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`ProxyConfig`, :class:`OutputConfig`,
    :class:`GlobalConfig` and :class:`Profile`.
"""

from __future__ import annotations

import enum
import re
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- API resources ---


class GitLabAccessLevel(int, enum.Enum):
    """Permission tier of a group or project member.

    The values are the integers GitLab uses in the ``access_level`` field.
    """

    NONE = 0
    GUEST = 10
    REPORTER = 20
    DEVELOPER = 30
    MASTER = 40
    OWNER = 50

    @classmethod
    def from_value(cls, value: int) -> GitLabAccessLevel:
        """Look up the access level for an API integer.

        Raises:
            ValueError: If *value* is not a known access level.
        """
        return cls(value)

    @property
    def display_name(self) -> str:
        """Capitalised label, e.g. ``"Owner"``."""
        return self.name.capitalize()


class _ApiModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class GitLabSession(_ApiModel):
    """The session returned when logging in (``POST /session``).

    Carries the private token used to authenticate later requests.
    """

    id: int
    username: str
    email: str
    name: str
    private_token: str
    blocked: bool


class GitLabUserInfo(_ApiModel):
    """Fields common to every user-shaped API document."""

    id: int
    username: str
    email: str
    name: str
    state: str
    created_at: datetime

    @property
    def is_active(self) -> bool:
        """``True`` unless the account is blocked."""
        return self.state == "active"


class GitLabUser(GitLabUserInfo):
    """A user account (``GET /user``, ``GET /users``)."""

    is_admin: bool = False


class GitLabGroup(_ApiModel):
    """A group (``GET /groups/:id``)."""

    id: int
    name: str
    path: str

    def __str__(self) -> str:
        return self.name


class GitLabGroupMemberInfo(GitLabUserInfo):
    """A user's membership in a group (``GET /groups/:id/members``).

    The API document does not name the group, so ``group_name`` is
    supplied by the caller; see :meth:`from_json`.
    """

    access_level: GitLabAccessLevel
    group_name: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any], group_name: str) -> GitLabGroupMemberInfo:
        """Build a membership record from a member document and its group's name."""
        return cls.model_validate({**data, "group_name": group_name})


# --- Configuration ---

# Schemes httpx can talk to a forwarding proxy with.
PROXY_SCHEMES = ("http", "https")


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call in a profile."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ProxyConfig(BaseModel):
    """Forwarding proxy for a profile and the hostnames that bypass it.

    ``excluded_hostnames`` are regular expressions that must match a whole
    hostname. They are compiled when the config is validated, so a profile
    with a malformed pattern fails to load.

    Example::

        ProxyConfig(
            host="proxy.example.com",
            port=8080,
            excluded_hostnames=["localhost", r"10\\.0\\..*"],
        )
    """

    host: str
    port: int = Field(default=8080, description="Proxy port")
    scheme: str = Field(default="http", description="Scheme used to talk to the proxy")
    excluded_hostnames: list[str] = Field(
        default_factory=list,
        description="Hostname patterns (full match) that connect directly",
    )

    @field_validator("scheme")
    @classmethod
    def _check_scheme(cls, scheme: str) -> str:
        normalized = scheme.lower()
        if normalized not in PROXY_SCHEMES:
            allowed = ", ".join(PROXY_SCHEMES)
            raise ValueError(f"Unsupported proxy scheme {scheme!r} (expected one of: {allowed})")
        return normalized

    @field_validator("excluded_hostnames")
    @classmethod
    def _check_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid hostname pattern {pattern!r}: {exc}") from exc
        return patterns


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/gitlab-client/config.json``.

    Fields here have the lowest precedence; see
    :func:`~gitlab_client.config.resolve_config` for the full chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)


class Profile(BaseModel):
    """Connection settings for one GitLab server.

    Stored as JSON under the ``profiles/`` config directory and created with
    ``gitlab-client init``.

    ``private_token_source`` uses the formats understood by
    :func:`~gitlab_client.config.resolve_credential`. When it is unset the
    token stored by ``gitlab-client auth login`` is used.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    url: str = Field(description="Server URL, e.g. https://gitlab.example.com")
    api_path: str = Field(default="/api/v3", description="Path of the API root")
    private_token_source: Optional[str] = None
    proxy: Optional[ProxyConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)

    @property
    def api_url(self) -> str:
        """Base URL of the API, e.g. ``https://gitlab.example.com/api/v3``."""
        return self.url.rstrip("/") + "/" + self.api_path.strip("/")
