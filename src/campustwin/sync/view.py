"""Client bootstrap: render surface ready, first fetch, then recurring sync."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from campustwin._constants import DEFAULT_TICK_INTERVAL, ROUTE_POLYLINE_STYLE
from campustwin.exceptions import TwinError
from campustwin.models.entities import Building, Vehicle
from campustwin.sync.api import TwinApiClient
from campustwin.sync.loop import VehicleSyncLoop
from campustwin.sync.markers import BuildingMarkerLayer, VehicleMarkerLayer
from campustwin.sync.surface import MapSurface

_logger = logging.getLogger(__name__)

ROUTE_ENDPOINTS_MISSING_ALERT = "Could not find start/end buildings!"
ROUTE_FAILED_ALERT = "Could not generate route."


class CampusMapView:
    """Live campus map driven by the twin facade.

    Usage::

        async with TwinApiClient(url) as api:
            view = CampusMapView(api, surface)
            await view.start()
            ...
            await view.stop()
    """

    def __init__(
        self,
        api: TwinApiClient,
        surface: MapSurface,
        *,
        poll_interval: float = DEFAULT_TICK_INTERVAL,
        retire_after_misses: int = 1,
    ) -> None:
        self._api = api
        self._surface = surface
        self.buildings: dict[str, Building] = {}
        self.building_layer = BuildingMarkerLayer(surface)
        self.vehicle_layer = VehicleMarkerLayer(surface, retire_after_misses=retire_after_misses)
        self.sync_loop = VehicleSyncLoop(api.get_vehicles, self._on_vehicles, interval=poll_interval)
        self._closed = False

    def _on_vehicles(self, vehicles: Mapping[str, Vehicle]) -> None:
        self.vehicle_layer.reconcile(vehicles)

    async def start(self) -> None:
        """Wait for the surface, draw buildings and the first vehicle snapshot, start polling.

        If :meth:`stop` is called while this is still waiting, it returns
        without polling or starting the loop.
        """
        await self._surface.wait_until_ready()
        if self._closed:
            return
        _logger.info("Map surface ready")

        buildings: list[Building] | None = None
        try:
            buildings = await self._api.get_buildings()
        except TwinError:
            _logger.error("Failed to fetch buildings", exc_info=True)
        if self._closed:
            return
        if buildings is not None:
            self.buildings = {building.id: building for building in buildings}
            self.building_layer.render(buildings)

        await self.sync_loop.poll_once()
        if self._closed:
            return
        self.sync_loop.start()

    async def stop(self) -> None:
        self._closed = True
        await self.sync_loop.stop()

    async def optimize_route(self, start_id: str = "b1", end_id: str = "b2") -> bool:
        """Draw the optimized route between two buildings.

        Failures are reported through :meth:`MapSurface.alert`; returns
        whether a polyline was drawn.
        """
        start = self.buildings.get(start_id)
        end = self.buildings.get(end_id)
        if start is None or end is None:
            self._surface.alert(ROUTE_ENDPOINTS_MISSING_ALERT)
            return False

        try:
            result = await self._api.optimize_route(start.location, end.location)
        except TwinError:
            _logger.error("Route optimization failed", exc_info=True)
            self._surface.alert(ROUTE_FAILED_ALERT)
            return False

        self._surface.add_polyline(result.path(), style=ROUTE_POLYLINE_STYLE)
        return True
