"""Async client for the campus twin HTTP facade."""

from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from campustwin._constants import DEFAULT_API_URL
from campustwin.exceptions import (
    TwinError,
    TwinNotFoundError,
    TwinTransportError,
    TwinUpstreamError,
    TwinValidationError,
)
from campustwin.models.entities import Building, Vehicle
from campustwin.models.location import LatLng
from campustwin.models.route import RouteRequest, RouteResult

_logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[TwinError]] = {
    400: TwinValidationError,
    404: TwinNotFoundError,
    500: TwinUpstreamError,
}


def _error_message(text: str, status: int) -> str:
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"HTTP {status}"


class TwinApiClient:
    """Client for ``/api/buildings``, ``/api/vehicles`` and ``/api/routes/optimize``.

    Usage::

        async with TwinApiClient("http://localhost:5002") as api:
            vehicles = await api.get_vehicles()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._external_session = session is not None
        self._http = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def __aenter__(self) -> TwinApiClient:
        if self._http is None:
            self._http = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
            self._http = None

    def _require_http(self) -> aiohttp.ClientSession:
        if self._http is None:
            raise TwinError("Client not initialized. Use 'async with TwinApiClient(...) as api:'")
        return self._http

    async def _request_json(self, method: str, path: str, *, payload: Any = None) -> Any:
        http = self._require_http()
        url = f"{self._base_url}{path}"
        _logger.debug("%s %s", method, url)

        try:
            async with http.request(method, url, json=payload, timeout=self._timeout) as resp:
                text = await resp.text()
                status = resp.status
        except TimeoutError as exc:
            raise TwinTransportError(f"Request to {path} timed out", endpoint=path) from exc
        except aiohttp.ClientError as exc:
            raise TwinTransportError(f"Request to {path} failed: {exc}", endpoint=path) from exc

        if not 200 <= status < 300:
            error_cls = _STATUS_ERRORS.get(status)
            message = _error_message(text, status)
            if error_cls is not None:
                raise error_cls(message)
            raise TwinTransportError(f"HTTP {status} from {path}: {message}", status_code=status, endpoint=path)

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TwinTransportError(f"Invalid JSON from {path}: {text[:200]}", endpoint=path) from exc

    async def get_buildings(self) -> list[Building]:
        endpoint = "/api/buildings"
        decoded = await self._request_json("GET", endpoint)
        if not isinstance(decoded, list):
            raise TwinTransportError(f"Expected a list from {endpoint}", endpoint=endpoint)
        try:
            return [Building.model_validate(item) for item in decoded]
        except PydanticValidationError as exc:
            raise TwinTransportError(f"Malformed building from {endpoint}", endpoint=endpoint) from exc

    async def get_vehicles(self) -> dict[str, Vehicle]:
        """Fetch the vehicle snapshot keyed by id.

        Records without an ``id`` take it from their mapping key.
        """
        endpoint = "/api/vehicles"
        decoded = await self._request_json("GET", endpoint)
        if not isinstance(decoded, dict) or not all(isinstance(item, dict) for item in decoded.values()):
            raise TwinTransportError(f"Expected an object of vehicles from {endpoint}", endpoint=endpoint)
        try:
            return {
                vehicle_id: Vehicle.model_validate({**item, "id": vehicle_id})
                for vehicle_id, item in decoded.items()
            }
        except PydanticValidationError as exc:
            raise TwinTransportError(f"Malformed vehicle from {endpoint}", endpoint=endpoint) from exc

    async def optimize_route(self, start: LatLng, end: LatLng) -> RouteResult:
        endpoint = "/api/routes/optimize"
        request = RouteRequest(start=start, end=end)
        decoded = await self._request_json("POST", endpoint, payload=request.to_wire())
        try:
            return RouteResult.model_validate(decoded)
        except PydanticValidationError as exc:
            raise TwinTransportError(f"Malformed route from {endpoint}", endpoint=endpoint) from exc
