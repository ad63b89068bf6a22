"""Route proxy: validate a route request, call the provider, normalize the result."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from campustwin._constants import (
    ROUTE_COORDINATES_MESSAGE,
    ROUTE_NOT_FOUND_MESSAGE,
    ROUTE_REQUIRED_MESSAGE,
    ROUTE_UPSTREAM_MESSAGE,
)
from campustwin.exceptions import TwinNotFoundError, TwinUpstreamError, TwinValidationError
from campustwin.models.route import RouteRequest, RouteResult
from campustwin.routing.provider import RoutingProvider

_logger = logging.getLogger(__name__)


def parse_route_request(payload: RouteRequest | Mapping[str, Any] | Any) -> RouteRequest:
    """Validate a raw request body into a :class:`RouteRequest`.

    Raises
    ------
    TwinValidationError
        If ``start`` or ``end`` is missing, or lacks numeric ``lat``/``lng``.
    """
    if isinstance(payload, RouteRequest):
        return payload
    if not isinstance(payload, Mapping) or not payload.get("start") or not payload.get("end"):
        raise TwinValidationError(ROUTE_REQUIRED_MESSAGE)
    try:
        return RouteRequest.model_validate(payload)
    except PydanticValidationError as exc:
        raise TwinValidationError(ROUTE_COORDINATES_MESSAGE) from exc


class RouteProxy:
    """Stateless translator between route requests and a routing provider.

    A single route is requested; there is no retry, no caching and no
    alternative-route support.
    """

    def __init__(self, provider: RoutingProvider) -> None:
        self._provider = provider

    async def optimize_route(self, payload: RouteRequest | Mapping[str, Any]) -> RouteResult:
        """Return the provider's geometry for ``payload``.

        Raises
        ------
        TwinValidationError
            Bad request; raised before any provider call.
        TwinNotFoundError
            The provider returned no route geometry.
        TwinUpstreamError
            The provider call failed. The message is generic; detail is logged.
        """
        request = parse_route_request(payload)

        try:
            geometry = await self._provider.route(request.start, request.end)
        except Exception:
            _logger.error(
                "Routing provider call failed for %s -> %s",
                request.start.as_lng_lat(),
                request.end.as_lng_lat(),
                exc_info=True,
            )
            raise TwinUpstreamError(ROUTE_UPSTREAM_MESSAGE) from None

        if not geometry:
            _logger.info("No route between %s and %s", request.start.as_lng_lat(), request.end.as_lng_lat())
            raise TwinNotFoundError(ROUTE_NOT_FOUND_MESSAGE)

        try:
            return RouteResult(geometry=geometry)
        except PydanticValidationError:
            _logger.error("Routing provider returned malformed geometry", exc_info=True)
            raise TwinUpstreamError(ROUTE_UPSTREAM_MESSAGE) from None
