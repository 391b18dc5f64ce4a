"""Synchronous HTTP client for the GitLab API.

:class:`SyncClient` wraps :class:`httpx.Client` and layers on:

- **Token injection** -- the profile's private token is sent in the
  ``PRIVATE-TOKEN`` header of every request.
- **Proxy routing** -- profiles with a proxy get a
  :class:`~gitlab_client.http.transport.RoutingTransport`, so hosts matching
  the proxy's exclusion patterns are reached directly.
- **Error mapping** -- HTTP error statuses and transport failures become
  :mod:`gitlab_client.exceptions` types. Failures are reported as they
  happen; nothing is retried.

See Also:
    :class:`~gitlab_client.client.api.GitLabApiClient` for the typed
    resource methods built on top of this client.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from gitlab_client.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from gitlab_client.http.transport import build_transport
from gitlab_client.models import Profile
from gitlab_client.output import get_output

PRIVATE_TOKEN_HEADER = "PRIVATE-TOKEN"


class SyncClient:
    """Synchronous HTTP client for GitLab API calls.

    Must be used as a context manager so that the underlying transport is
    opened and closed.

    Args:
        profile: Connection profile with the server URL, proxy and request
            settings.
        private_token: Token sent in the ``PRIVATE-TOKEN`` header. When
            ``None`` requests are sent unauthenticated (e.g. to log in).
        transport: Transport override; defaults to the profile's
            route-aware transport, or httpx's own when no proxy is set.

    Example::

        with SyncClient(profile, private_token=token) as client:
            response = client.get("/groups")
    """

    def __init__(
        self,
        profile: Profile,
        private_token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._profile = profile
        self._private_token = private_token
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def profile(self) -> Profile:
        return self._profile

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        config = self._profile.request
        transport = self._transport if self._transport is not None else build_transport(self._profile)
        self._client = httpx.Client(
            base_url=self._profile.api_url,
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=True,
            transport=transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        data: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request and map error responses to exceptions.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: Path relative to the API root, e.g. ``/groups/2``.
            params: Query parameters.
            headers: Extra request headers.
            json_body: JSON-serialisable body.
            data: Form-encoded body.

        Returns:
            The successful :class:`httpx.Response`.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other 4xx or 5xx.
            ConnectionError_: On network / timeout errors.
            RoutingError: If no route to the server can be planned.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        merged_headers: dict[str, str] = {"Accept": "application/json"}
        if self._private_token:
            merged_headers[PRIVATE_TOKEN_HEADER] = self._private_token
        merged_headers.update(headers or {})

        kwargs: dict[str, Any] = {"headers": merged_headers, "params": params}
        if data is not None:
            kwargs["data"] = data
        elif json_body is not None:
            kwargs["json"] = json_body

        get_output().debug(f"{method.upper()} {self._profile.api_url}{path}")
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Request to {self._profile.url} failed: {exc}") from exc

        self._map_response_error(response)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        # GitLab reports errors as {"message": ...}; fall back to the raw text.
        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = str(detail.get("message") or detail.get("error") or "")
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)
