"""Client side of the state-synchronization protocol."""

from campustwin.sync.api import TwinApiClient
from campustwin.sync.loop import VehicleSyncLoop
from campustwin.sync.markers import BuildingMarkerLayer, MarkerBinding, ReconcileResult, VehicleMarkerLayer
from campustwin.sync.surface import InMemoryMapSurface, MapSurface
from campustwin.sync.view import CampusMapView

__all__ = [
    "BuildingMarkerLayer",
    "CampusMapView",
    "InMemoryMapSurface",
    "MapSurface",
    "MarkerBinding",
    "ReconcileResult",
    "TwinApiClient",
    "VehicleMarkerLayer",
    "VehicleSyncLoop",
]
