"""Exception hierarchy for gitlab_client.

All exceptions inherit from :class:`GitLabClientError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`gitlab_client.exit_codes`. The top-level handler in
:func:`gitlab_client.app.main` catches ``GitLabClientError`` and exits with
the matching code.

Two error families are deliberately left as their native types:
malformed exclusion patterns raise :class:`re.error` when a route planner
is constructed, and API documents missing required keys raise
:class:`pydantic.ValidationError` when a model is built.

Subclass hierarchy::

    GitLabClientError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- AuthError              (exit 3)
    +-- NotFoundError          (exit 4)
    +-- ServerError            (exit 5)
    +-- ConnectionError_       (exit 6)
    +-- RoutingError           (exit 7)
    |   +-- UnsupportedSchemeError
    +-- ConfigError            (exit 1)
"""

from gitlab_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_ROUTING_ERROR,
    EXIT_SERVER_ERROR,
)


class GitLabClientError(Exception):
    """Base exception for all gitlab_client errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(GitLabClientError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(GitLabClientError):
    """Raised when GitLab rejects the credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(GitLabClientError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(GitLabClientError):
    """Raised for HTTP error responses that are not auth or not-found errors,
    and for response bodies that do not have the expected JSON shape."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(GitLabClientError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class RoutingError(GitLabClientError):
    """Raised by a route planner when no route to a host can be determined."""

    exit_code = EXIT_ROUTING_ERROR


class UnsupportedSchemeError(RoutingError):
    """Raised when a target host uses a scheme with no known default port."""


class ConfigError(GitLabClientError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
