"""gitlab_client -- a client library and CLI for the GitLab v3 REST API.

The package maps GitLab API resources (sessions, users, groups and group
members) onto typed Pydantic models and talks to the server through
:mod:`httpx`. Outbound traffic can be routed through a forwarding proxy,
with hostnames matching a list of exclusion patterns reaching the server
directly (see :mod:`gitlab_client.http.route_planner`).

Typical workflow::

    gitlab-client init --name work --url https://gitlab.example.com
    gitlab-client auth login --username jdoe
    gitlab-client groups list

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for API resources and configuration.
    config: XDG-aware configuration and profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    http: Proxy route planning and the route-aware httpx transport.
    client: Low-level HTTP client and the typed GitLab API client.
"""

__version__ = "0.1.0"
