"""End to end: TwinApiClient and CampusMapView against a live facade."""

from __future__ import annotations

import asyncio
import random

import pytest
from aiohttp import test_utils, web

from campustwin.exceptions import TwinNotFoundError, TwinTransportError, TwinUpstreamError, TwinValidationError
from campustwin.models import LatLng
from campustwin.routing import RouteProxy
from campustwin.server import create_app
from campustwin.simulator import VehicleMotionSimulator
from campustwin.state import EntityStore
from campustwin.sync import CampusMapView, InMemoryMapSurface, TwinApiClient
from fakes import FakeRoutingProvider

START = LatLng(lat=29.8649, lng=77.8966)
END = LatLng(lat=29.8660, lng=77.8970)


@pytest.mark.asyncio
async def test_client_reads_seeded_entities(store: EntityStore, provider: FakeRoutingProvider) -> None:
    async with test_utils.TestServer(create_app(store, proxy=RouteProxy(provider))) as server:
        async with TwinApiClient(str(server.make_url(""))) as api:
            buildings = await api.get_buildings()
            vehicles = await api.get_vehicles()

    assert [b.id for b in buildings] == ["b1", "b2", "b3"]
    assert [b.carbon_score for b in buildings] == [85, 60, 92]
    assert vehicles == store.get_vehicles()


@pytest.mark.asyncio
async def test_client_route_round_trip(store: EntityStore, provider: FakeRoutingProvider) -> None:
    async with test_utils.TestServer(create_app(store, proxy=RouteProxy(provider))) as server:
        async with TwinApiClient(str(server.make_url(""))) as api:
            result = await api.optimize_route(START, END)

    assert result.geometry == {"coordinates": [[77.8966, 29.8649], [77.8970, 29.8660]]}


@pytest.mark.asyncio
async def test_client_maps_error_statuses(store: EntityStore, provider: FakeRoutingProvider) -> None:
    async with test_utils.TestServer(create_app(store, proxy=RouteProxy(provider))) as server:
        async with TwinApiClient(str(server.make_url(""))) as api:
            provider.geometry = None
            with pytest.raises(TwinNotFoundError, match="Route not found."):
                await api.optimize_route(START, END)

            provider.error = RuntimeError("boom")
            with pytest.raises(TwinUpstreamError, match="Failed to fetch route"):
                await api.optimize_route(START, END)

            with pytest.raises(TwinValidationError):
                await api._request_json("POST", "/api/routes/optimize", payload={})  # noqa: SLF001


@pytest.mark.asyncio
async def test_client_wraps_unreachable_facade() -> None:
    async with TwinApiClient("http://127.0.0.1:9", timeout=2.0) as api:
        with pytest.raises(TwinTransportError):
            await api.get_vehicles()


@pytest.mark.asyncio
async def test_client_rejects_malformed_vehicle_payload() -> None:
    async def vehicles(_request: web.Request) -> web.Response:
        return web.json_response({"v1": {"name": "Shuttle 1", "location": {"lat": "north", "lng": 77.0}}})

    app = web.Application()
    app.router.add_get("/api/vehicles", vehicles)
    async with test_utils.TestServer(app) as server:
        async with TwinApiClient(str(server.make_url(""))) as api:
            with pytest.raises(TwinTransportError):
                await api.get_vehicles()


@pytest.mark.asyncio
async def test_view_tracks_simulated_vehicles(store: EntityStore, provider: FakeRoutingProvider) -> None:
    simulator = VehicleMotionSimulator(store, interval=0.02, rng=random.Random(11))
    app = create_app(store, proxy=RouteProxy(provider), simulator=simulator)
    surface = InMemoryMapSurface(ready=True)

    async with test_utils.TestServer(app) as server:
        async with TwinApiClient(str(server.make_url(""))) as api:
            view = CampusMapView(api, surface, poll_interval=0.02)
            await view.start()
            try:
                await asyncio.sleep(0.2)
                assert await view.optimize_route() is True
            finally:
                await view.stop()

    assert simulator.ticks >= 1
    assert set(view.vehicle_layer.bindings) == {"v1", "v2"}
    assert len(surface.markers) == 5
    assert len(surface.polylines) == 1
    assert surface.alerts == []
