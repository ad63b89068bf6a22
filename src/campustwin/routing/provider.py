"""Routing provider transports."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from campustwin._constants import ROUTING_DIRECTIONS_PATH
from campustwin._redact import redact_secrets
from campustwin.config import TwinConfig
from campustwin.exceptions import TwinUpstreamError
from campustwin.models.location import LatLng

_logger = logging.getLogger(__name__)


class RoutingProvider(Protocol):
    """Structural provider interface used by the route proxy.

    Returns the first route's geometry, or ``None`` when the provider found
    no route. Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`MapmyIndiaProvider`) concrete.
    """

    async def route(self, start: LatLng, end: LatLng) -> dict[str, Any] | None:
        ...


class MapmyIndiaProvider:
    """MapmyIndia directions API client.

    The API key is a URL path segment; start and destination are passed as
    ``lng,lat`` query values.

    Usage::

        async with MapmyIndiaProvider(config) as provider:
            geometry = await provider.route(start, end)
    """

    def __init__(self, config: TwinConfig, http_session: aiohttp.ClientSession | None = None) -> None:
        self._config = config
        self._external_session = http_session is not None
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.routing_timeout)

    async def __aenter__(self) -> MapmyIndiaProvider:
        if self._http is None:
            self._http = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
            self._http = None

    def _require_http(self) -> aiohttp.ClientSession:
        if self._http is None:
            raise TwinUpstreamError("Provider not initialized. Use 'async with MapmyIndiaProvider(...)'")
        return self._http

    def _redact(self, text: str, *, limit: int | None = None) -> str:
        return redact_secrets(text, [self._config.mapmyindia_api_key], limit=limit)

    def build_params(self, start: LatLng, end: LatLng) -> dict[str, str]:
        return {
            "start": start.as_lng_lat(),
            "destination": end.as_lng_lat(),
            "alternatives": "false",
            "overview": "full",
            "geometries": "geojson",
        }

    async def route(self, start: LatLng, end: LatLng) -> dict[str, Any] | None:
        """Request a single route and return ``routes[0].geometry``.

        Raises
        ------
        TwinUpstreamError
            Missing API key, network failure or timeout, non-2xx status,
            or a response body that is not a routes payload.
        """
        api_key = self._config.mapmyindia_api_key
        endpoint = ROUTING_DIRECTIONS_PATH
        if not api_key:
            raise TwinUpstreamError("MAPMYINDIA_API_KEY is not configured", endpoint=endpoint)
        http = self._require_http()

        url = f"{self._config.routing_base_url.rstrip('/')}{endpoint}/{api_key}"
        params = self.build_params(start, end)
        _logger.debug("GET %s params=%s", self._redact(url), params)

        try:
            async with http.get(url, params=params, timeout=self._timeout) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise TwinUpstreamError(
                        f"HTTP {resp.status} from {endpoint}: {self._redact(text, limit=200)}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except TwinUpstreamError:
            raise
        except TimeoutError as exc:
            raise TwinUpstreamError(
                f"Request to {endpoint} timed out after {self._config.routing_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise TwinUpstreamError(
                f"Request to {endpoint} failed: {self._redact(str(exc))}",
                endpoint=endpoint,
            ) from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TwinUpstreamError(
                f"Invalid JSON from {endpoint}: {self._redact(text, limit=200)}",
                endpoint=endpoint,
            ) from exc

        routes = body.get("routes") if isinstance(body, dict) else None
        if not isinstance(routes, list):
            raise TwinUpstreamError(
                f"Missing 'routes' list from {endpoint}: {self._redact(text, limit=200)}",
                endpoint=endpoint,
            )
        if not routes or not isinstance(routes[0], dict):
            return None

        geometry = routes[0].get("geometry")
        if not geometry:
            return None
        if not isinstance(geometry, dict):
            raise TwinUpstreamError(
                f"Route geometry from {endpoint} is not GeoJSON: {str(geometry)[:64]}",
                endpoint=endpoint,
            )
        return geometry
