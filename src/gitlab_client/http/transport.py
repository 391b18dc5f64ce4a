"""Route-aware :mod:`httpx` transport.

:class:`RoutingTransport` asks a :class:`~gitlab_client.http.route_planner.RoutePlanner`
for a route before every request and hands the request to either a direct
transport or a transport bound to the route's proxy. Proxied transports
are created on first use, one per distinct proxy.

Example::

    planner = PatternProxyRoutePlanner(HttpHost("proxy", 3128), ["localhost"])
    with httpx.Client(transport=RoutingTransport(planner)) as client:
        client.get("http://localhost:8080/api/v3/user")   # direct
        client.get("https://gitlab.com/api/v3/user")      # via proxy:3128
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable, Optional

import httpx

from gitlab_client.http.route_planner import (
    HttpHost,
    PatternProxyRoutePlanner,
    RoutePlanner,
)
from gitlab_client.output import get_output

if TYPE_CHECKING:
    from gitlab_client.models import Profile

ProxyTransportFactory = Callable[[HttpHost], httpx.BaseTransport]


class RoutingTransport(httpx.BaseTransport):
    """Dispatch each request directly or through a proxy, as planned.

    Args:
        planner: The policy that decides each request's route.
        verify: SSL verification setting for the default transports.
        direct: Transport used for direct routes. Defaults to a plain
            :class:`httpx.HTTPTransport`.
        proxy_transport_factory: Builds the transport for a given proxy.
            Defaults to an :class:`httpx.HTTPTransport` with ``proxy`` set.
    """

    def __init__(
        self,
        planner: RoutePlanner,
        verify: bool = True,
        direct: Optional[httpx.BaseTransport] = None,
        proxy_transport_factory: Optional[ProxyTransportFactory] = None,
    ) -> None:
        self._planner = planner
        self._verify = verify
        self._direct = direct if direct is not None else httpx.HTTPTransport(verify=verify)
        self._proxy_transport_factory = proxy_transport_factory or self._default_proxy_transport
        self._proxied: dict[HttpHost, httpx.BaseTransport] = {}
        self._lock = threading.Lock()

    @property
    def planner(self) -> RoutePlanner:
        """The routing policy consulted for every request."""
        return self._planner

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        host = HttpHost.from_url(request.url)
        route = self._planner.determine_route(host, request, {})
        get_output().debug(f"Route: {route}")
        if route.proxy is None:
            return self._direct.handle_request(request)
        return self._transport_for(route.proxy).handle_request(request)

    def close(self) -> None:
        with self._lock:
            proxied = list(self._proxied.values())
            self._proxied.clear()
        for transport in proxied:
            transport.close()
        self._direct.close()

    def _transport_for(self, proxy: HttpHost) -> httpx.BaseTransport:
        with self._lock:
            transport = self._proxied.get(proxy)
            if transport is None:
                transport = self._proxy_transport_factory(proxy)
                self._proxied[proxy] = transport
            return transport

    def _default_proxy_transport(self, proxy: HttpHost) -> httpx.BaseTransport:
        return httpx.HTTPTransport(proxy=httpx.Proxy(proxy.to_url()), verify=self._verify)


def build_planner(profile: Profile) -> Optional[PatternProxyRoutePlanner]:
    """Build the route planner for *profile*, or ``None`` without a proxy."""
    if profile.proxy is None:
        return None
    proxy = HttpHost(profile.proxy.host, profile.proxy.port, profile.proxy.scheme)
    return PatternProxyRoutePlanner(proxy, profile.proxy.excluded_hostnames)


def build_transport(profile: Profile) -> Optional[RoutingTransport]:
    """Return a :class:`RoutingTransport` for *profile*'s proxy settings.

    Profiles without a proxy get ``None`` so that httpx uses its default
    transport.
    """
    planner = build_planner(profile)
    if planner is None:
        return None
    return RoutingTransport(planner, verify=profile.request.verify_ssl)
