"""Proxy route planning and the route-aware transport.

Classes:
    :class:`PatternProxyRoutePlanner` -- bypasses the proxy for hostnames
    matching a list of patterns.
    :class:`RoutingTransport` -- :mod:`httpx` transport that follows the
    planned routes.
"""

from gitlab_client.http.route_planner import (
    HttpHost,
    PatternProxyRoutePlanner,
    ProxyRoutePlanner,
    Route,
    RoutePlanner,
)
from gitlab_client.http.transport import RoutingTransport, build_planner, build_transport

__all__ = [
    "HttpHost",
    "PatternProxyRoutePlanner",
    "ProxyRoutePlanner",
    "Route",
    "RoutePlanner",
    "RoutingTransport",
    "build_planner",
    "build_transport",
]
