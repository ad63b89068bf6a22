from __future__ import annotations

import logging
from typing import Any

import pytest

from campustwin.exceptions import TwinNotFoundError, TwinUpstreamError, TwinValidationError
from campustwin.models import LatLng, RouteRequest
from campustwin.routing import RouteProxy
from fakes import LIBRARY, MAIN_BUILDING, SEEDED_GEOMETRY, FakeRoutingProvider


@pytest.mark.asyncio
async def test_geometry_passes_through_unchanged(provider: FakeRoutingProvider) -> None:
    geometry = {"type": "LineString", "coordinates": [[77.1, 28.6], [77.2, 28.7], [77.3, 28.8]]}
    provider.geometry = geometry

    result = await RouteProxy(provider).optimize_route({"start": MAIN_BUILDING, "end": LIBRARY})

    assert result.geometry == geometry


@pytest.mark.asyncio
async def test_provider_receives_parsed_points(provider: FakeRoutingProvider) -> None:
    await RouteProxy(provider).optimize_route({"start": MAIN_BUILDING, "end": LIBRARY})

    assert provider.calls == [(LatLng(**MAIN_BUILDING), LatLng(**LIBRARY))]


@pytest.mark.asyncio
async def test_accepts_route_request_model(provider: FakeRoutingProvider) -> None:
    request = RouteRequest(start=LatLng(**MAIN_BUILDING), end=LatLng(**LIBRARY))
    result = await RouteProxy(provider).optimize_route(request)
    assert result.geometry == SEEDED_GEOMETRY


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"start": MAIN_BUILDING},
        {"end": LIBRARY},
        {"start": None, "end": LIBRARY},
        {"start": {}, "end": LIBRARY},
        ["not", "a", "mapping"],
    ],
)
async def test_missing_points_rejected_before_network(provider: FakeRoutingProvider, payload: Any) -> None:
    with pytest.raises(TwinValidationError, match="Start and end points are required"):
        await RouteProxy(provider).optimize_route(payload)
    assert provider.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start",
    [
        {"lat": "29.8649", "lng": 77.8966},
        {"lat": 29.8649},
        {"lng": 77.8966, "lat": None},
    ],
)
async def test_non_numeric_points_rejected_before_network(provider: FakeRoutingProvider, start: Any) -> None:
    with pytest.raises(TwinValidationError):
        await RouteProxy(provider).optimize_route({"start": start, "end": LIBRARY})
    assert provider.calls == []


@pytest.mark.asyncio
async def test_empty_routes_is_not_found(provider: FakeRoutingProvider) -> None:
    provider.geometry = None
    with pytest.raises(TwinNotFoundError, match="Route not found"):
        await RouteProxy(provider).optimize_route({"start": MAIN_BUILDING, "end": LIBRARY})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        RuntimeError("socket closed; key=SECRET-KEY"),
        TwinUpstreamError("HTTP 401 from /directions/v1: invalid key SECRET-KEY", status_code=401),
    ],
)
async def test_provider_failure_is_generic_upstream_error(
    provider: FakeRoutingProvider,
    error: Exception,
    caplog: pytest.LogCaptureFixture,
) -> None:
    provider.error = error

    with caplog.at_level(logging.ERROR, logger="campustwin.routing.proxy"):
        with pytest.raises(TwinUpstreamError) as excinfo:
            await RouteProxy(provider).optimize_route({"start": MAIN_BUILDING, "end": LIBRARY})

    assert "SECRET-KEY" not in str(excinfo.value)
    assert str(excinfo.value) == "Failed to fetch route from routing provider."
    assert excinfo.value.__cause__ is None
    # detail stays in the server log
    assert any(record.exc_info and record.exc_info[1] is error for record in caplog.records)


@pytest.mark.asyncio
async def test_malformed_geometry_is_upstream_error(provider: FakeRoutingProvider) -> None:
    provider.geometry = {"coordinates": "_p~iF~ps|U_ulLnnqC"}
    with pytest.raises(TwinUpstreamError):
        await RouteProxy(provider).optimize_route({"start": MAIN_BUILDING, "end": LIBRARY})
