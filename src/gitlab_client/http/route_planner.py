"""Route planning for outbound requests to the GitLab server.

A *route* says how a request reaches its target host: either directly or
through a forwarding proxy. This module defines three pieces:

- :class:`HttpHost` and :class:`Route` -- immutable values describing a
  network endpoint and a planned route to it.
- :class:`RoutePlanner` -- the abstract interface every routing policy
  implements.
- :class:`ProxyRoutePlanner` and :class:`PatternProxyRoutePlanner` -- the
  base policy that always goes through the configured proxy, and the
  policy that sends hosts matching a list of hostname patterns directly
  while delegating everything else to a base policy.

Planners hold only configuration fixed at construction, so a single
instance can be shared by any number of threads.

Example::

    planner = PatternProxyRoutePlanner(
        HttpHost("proxy.example.com", 8080),
        [r"localhost", r"10\\.0\\..*"],
    )
    planner.determine_route(HttpHost("localhost")).is_direct  # True

See Also:
    :class:`~gitlab_client.http.transport.RoutingTransport`, which turns a
    planned route into an actual connection.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

import httpx

from gitlab_client.exceptions import RoutingError, UnsupportedSchemeError

_DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

HostnamePattern = Union[str, "re.Pattern[str]"]


@dataclass(frozen=True)
class HttpHost:
    """A network endpoint: hostname, optional port and scheme.

    A ``port`` of ``None`` means "the default port for the scheme"; see
    :meth:`with_default_port`.
    """

    hostname: str
    port: Optional[int] = None
    scheme: str = "http"

    @classmethod
    def from_url(cls, url: Union[httpx.URL, str]) -> HttpHost:
        """Build a host from the authority part of *url*."""
        parsed = url if isinstance(url, httpx.URL) else httpx.URL(url)
        return cls(hostname=parsed.host, port=parsed.port, scheme=parsed.scheme or "http")

    def with_default_port(self) -> HttpHost:
        """Return a copy with the port filled in from the scheme.

        Raises:
            UnsupportedSchemeError: If the port is unset and the scheme has
                no known default port.
        """
        if self.port is not None:
            return self
        try:
            port = _DEFAULT_PORTS[self.scheme.lower()]
        except KeyError:
            raise UnsupportedSchemeError(f"Unsupported scheme: {self.scheme!r}") from None
        return HttpHost(self.hostname, port, self.scheme)

    def to_url(self) -> str:
        """Render the host as ``scheme://hostname[:port]``."""
        if self.port is None:
            return f"{self.scheme}://{self.hostname}"
        return f"{self.scheme}://{self.hostname}:{self.port}"

    def __str__(self) -> str:
        return self.to_url()


@dataclass(frozen=True)
class Route:
    """A planned route to ``target``, through ``proxy`` when one is set."""

    target: HttpHost
    proxy: Optional[HttpHost] = None

    @property
    def is_direct(self) -> bool:
        """``True`` when the route connects straight to the target."""
        return self.proxy is None

    def __str__(self) -> str:
        if self.proxy is None:
            return f"{self.target} (direct)"
        return f"{self.target} via {self.proxy}"


class RoutePlanner(ABC):
    """Abstract routing policy: map a request's target host to a route."""

    @abstractmethod
    def determine_route(
        self,
        host: HttpHost,
        request: Optional[httpx.Request] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Route:
        """Choose a route to *host*.

        Args:
            host: The target host of the outgoing request.
            request: The outgoing request, when one is available.
            context: Free-form per-call data for policies that need it.

        Returns:
            The route the request should take.

        Raises:
            RoutingError: If no route to the host can be determined.
        """
        ...


class ProxyRoutePlanner(RoutePlanner):
    """Base policy: every host is reached through a single forwarding proxy.

    Args:
        proxy: The forwarding proxy all traffic goes through.
    """

    def __init__(self, proxy: HttpHost) -> None:
        self._proxy = proxy

    @property
    def proxy(self) -> HttpHost:
        """The configured forwarding proxy."""
        return self._proxy

    def determine_route(
        self,
        host: HttpHost,
        request: Optional[httpx.Request] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Route:
        if not host.hostname:
            raise RoutingError("Target host has no hostname")
        return Route(target=host.with_default_port(), proxy=self._proxy)


class PatternProxyRoutePlanner(RoutePlanner):
    """Chooses whether to use a proxy based on hostname patterns.

    Hosts whose hostname *fully* matches one of ``excluded_hostnames`` get
    a direct route. Every other host is routed by ``delegate``, which
    defaults to a :class:`ProxyRoutePlanner` for ``proxy``; its result (or
    exception) is passed through unchanged.

    Patterns are matched with :meth:`re.Pattern.fullmatch`, so ``internal``
    only matches the hostname ``internal`` and never ``xinternal.corp``.

    Args:
        proxy: The forwarding proxy.
        excluded_hostnames: Regular expressions (strings or compiled
            patterns) for hostnames that bypass the proxy.
        delegate: Routing policy for hostnames that match no pattern.

    Raises:
        re.error: If one of the string patterns is not a valid regular
            expression.
    """

    def __init__(
        self,
        proxy: HttpHost,
        excluded_hostnames: Iterable[HostnamePattern] = (),
        delegate: Optional[RoutePlanner] = None,
    ) -> None:
        self._proxy = proxy
        self._excluded_hostnames: tuple[re.Pattern[str], ...] = tuple(
            pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
            for pattern in excluded_hostnames
        )
        self._delegate = delegate if delegate is not None else ProxyRoutePlanner(proxy)

    @property
    def proxy(self) -> HttpHost:
        """The configured forwarding proxy."""
        return self._proxy

    @property
    def excluded_hostnames(self) -> tuple[re.Pattern[str], ...]:
        """The patterns for hostnames that bypass the proxy, in configured order."""
        return self._excluded_hostnames

    @property
    def delegate(self) -> RoutePlanner:
        """The policy used for hostnames that match no pattern."""
        return self._delegate

    def is_excluded(self, hostname: str) -> bool:
        """Return ``True`` if *hostname* fully matches an excluded pattern."""
        return any(pattern.fullmatch(hostname) for pattern in self._excluded_hostnames)

    def determine_route(
        self,
        host: HttpHost,
        request: Optional[httpx.Request] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Route:
        if self.is_excluded(host.hostname):
            return Route(target=host)
        return self._delegate.determine_route(host, request, context)
