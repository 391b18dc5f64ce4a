"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~gitlab_client.exceptions.GitLabClientError` subclass.
Shell wrappers can inspect the exit code to tell failure classes apart
without parsing stderr.

Example::

    $ gitlab-client groups show 42
    $ echo $?
    4   # EXIT_NOT_FOUND -- no group with that id
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The GitLab server returned an error response."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_ROUTING_ERROR = 7
"""No route to the target host could be planned (e.g. unsupported scheme)."""
