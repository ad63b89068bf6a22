"""Bootstrap and route round trip of the client view."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from campustwin.exceptions import TwinTransportError, TwinUpstreamError
from campustwin.models import Building, LatLng, RouteResult, Vehicle
from campustwin.state import EntityStore
from campustwin.sync import CampusMapView, InMemoryMapSurface
from fakes import SEEDED_GEOMETRY


@dataclass
class FakeApi:
    """Stands in for :class:`TwinApiClient`, serving from an entity store."""

    store: EntityStore
    calls: list[str] = field(default_factory=list)
    route_error: Exception | None = None
    buildings_error: Exception | None = None
    geometry: dict[str, Any] = field(default_factory=lambda: dict(SEEDED_GEOMETRY))

    async def get_buildings(self) -> list[Building]:
        self.calls.append("buildings")
        if self.buildings_error is not None:
            raise self.buildings_error
        return list(self.store.get_buildings())

    async def get_vehicles(self) -> dict[str, Vehicle]:
        self.calls.append("vehicles")
        return self.store.get_vehicles()

    async def optimize_route(self, start: LatLng, end: LatLng) -> RouteResult:
        self.calls.append("route")
        if self.route_error is not None:
            raise self.route_error
        return RouteResult(geometry=self.geometry)


def _view(api: FakeApi, surface: InMemoryMapSurface) -> CampusMapView:
    return CampusMapView(api, surface, poll_interval=0.01)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_fetch_waits_for_surface_ready(store: EntityStore) -> None:
    api = FakeApi(store)
    surface = InMemoryMapSurface()
    view = _view(api, surface)

    starting = asyncio.create_task(view.start())
    await asyncio.sleep(0.02)
    assert api.calls == []
    assert not starting.done()

    surface.mark_ready()
    await asyncio.wait_for(starting, timeout=1.0)
    try:
        assert api.calls[:2] == ["buildings", "vehicles"]
        assert set(view.building_layer.bindings) == {"b1", "b2", "b3"}
        assert set(view.vehicle_layer.bindings) == {"v1", "v2"}
        assert view.sync_loop.running
    finally:
        await view.stop()
    assert not view.sync_loop.running


@pytest.mark.asyncio
async def test_building_markers_show_carbon_score(store: EntityStore) -> None:
    surface = InMemoryMapSurface(ready=True)
    view = _view(FakeApi(store), surface)
    await view.start()
    await view.stop()

    handle = view.building_layer.bindings["b3"].handle
    assert "rgba(255, 0, 0, 0.92)" in surface.markers[handle].icon_html
    assert surface.click(handle) == "<h6>Hostel A</h6><p>Carbon Score: 92</p>"


@pytest.mark.asyncio
async def test_vehicle_markers_follow_store(store: EntityStore) -> None:
    surface = InMemoryMapSurface(ready=True)
    view = _view(FakeApi(store), surface)
    await view.start()
    handle = view.vehicle_layer.bindings["v1"].handle
    try:
        moved = store.apply_vehicle_delta("v1", 0.0005, 0.0005)
        await asyncio.sleep(0.1)
    finally:
        await view.stop()

    assert view.vehicle_layer.bindings["v1"].handle == handle
    assert surface.markers[handle].position == moved.location


@pytest.mark.asyncio
async def test_failed_building_fetch_still_starts_sync(store: EntityStore) -> None:
    api = FakeApi(store, buildings_error=TwinTransportError("connection refused"))
    view = _view(api, InMemoryMapSurface(ready=True))
    await view.start()
    try:
        assert view.building_layer.bindings == {}
        assert set(view.vehicle_layer.bindings) == {"v1", "v2"}
        assert view.sync_loop.running
    finally:
        await view.stop()


@pytest.mark.asyncio
async def test_optimize_route_draws_polyline(store: EntityStore) -> None:
    surface = InMemoryMapSurface(ready=True)
    view = _view(FakeApi(store), surface)
    await view.start()
    await view.stop()

    assert await view.optimize_route() is True

    (polyline,) = surface.polylines.values()
    assert polyline.path == [LatLng(lat=29.8649, lng=77.8966), LatLng(lat=29.8660, lng=77.8970)]
    assert polyline.style["strokeColor"] == "#007cbf"
    assert surface.alerts == []


@pytest.mark.asyncio
async def test_optimize_route_failure_alerts(store: EntityStore) -> None:
    surface = InMemoryMapSurface(ready=True)
    api = FakeApi(store, route_error=TwinUpstreamError("Failed to fetch route from routing provider."))
    view = _view(api, surface)
    await view.start()
    await view.stop()

    assert await view.optimize_route() is False
    assert surface.alerts == ["Could not generate route."]
    assert surface.polylines == {}


@pytest.mark.asyncio
async def test_optimize_route_unknown_buildings_alerts(store: EntityStore) -> None:
    surface = InMemoryMapSurface(ready=True)
    api = FakeApi(store)
    view = _view(api, surface)
    await view.start()
    await view.stop()

    assert await view.optimize_route("b1", "b404") is False
    assert surface.alerts == ["Could not find start/end buildings!"]
    assert "route" not in api.calls


@pytest.mark.asyncio
async def test_stop_during_start_leaves_nothing_running(store: EntityStore) -> None:
    gate = asyncio.Event()

    class GatedApi(FakeApi):
        async def get_buildings(self) -> list[Building]:
            await gate.wait()
            return await super().get_buildings()

    api = GatedApi(store)
    surface = InMemoryMapSurface(ready=True)
    view = _view(api, surface)

    starting = asyncio.create_task(view.start())
    await asyncio.sleep(0.02)
    await view.stop()
    gate.set()
    await asyncio.wait_for(starting, timeout=1.0)
    await asyncio.sleep(0.05)

    assert not view.sync_loop.running
    assert "vehicles" not in api.calls
    assert view.vehicle_layer.bindings == {}
    assert surface.markers == {}


@pytest.mark.asyncio
async def test_stop_before_surface_ready(store: EntityStore) -> None:
    api = FakeApi(store)
    surface = InMemoryMapSurface()
    view = _view(api, surface)

    starting = asyncio.create_task(view.start())
    await asyncio.sleep(0.02)
    await view.stop()
    surface.mark_ready()
    await asyncio.wait_for(starting, timeout=1.0)

    assert not view.sync_loop.running
    assert api.calls == []
