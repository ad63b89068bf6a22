"""Route proxy and routing provider transports."""

from campustwin.routing.provider import MapmyIndiaProvider, RoutingProvider
from campustwin.routing.proxy import RouteProxy, parse_route_request

__all__ = ["MapmyIndiaProvider", "RouteProxy", "RoutingProvider", "parse_route_request"]
