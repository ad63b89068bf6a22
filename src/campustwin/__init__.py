"""campustwin - campus digital twin backend and live map sync client."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("campus-twin")
except PackageNotFoundError:
    __version__ = "0+local"
from campustwin.config import TwinConfig
from campustwin.exceptions import (
    TwinConfigError,
    TwinError,
    TwinNotFoundError,
    TwinTransportError,
    TwinUpstreamError,
    TwinValidationError,
)
from campustwin.models import Building, LatLng, RouteRequest, RouteResult, Vehicle
from campustwin.routing import MapmyIndiaProvider, RouteProxy, RoutingProvider
from campustwin.server import build_app, create_app, run_server
from campustwin.simulator import VehicleMotionSimulator
from campustwin.state import EntityStore, VehicleDelta
from campustwin.sync import (
    CampusMapView,
    InMemoryMapSurface,
    MapSurface,
    TwinApiClient,
    VehicleMarkerLayer,
    VehicleSyncLoop,
)

__all__ = [
    "__version__",
    "Building",
    "CampusMapView",
    "EntityStore",
    "InMemoryMapSurface",
    "LatLng",
    "MapSurface",
    "MapmyIndiaProvider",
    "RouteProxy",
    "RouteRequest",
    "RouteResult",
    "RoutingProvider",
    "TwinApiClient",
    "TwinConfig",
    "TwinConfigError",
    "TwinError",
    "TwinNotFoundError",
    "TwinTransportError",
    "TwinUpstreamError",
    "TwinValidationError",
    "Vehicle",
    "VehicleDelta",
    "VehicleMarkerLayer",
    "VehicleMotionSimulator",
    "VehicleSyncLoop",
    "build_app",
    "create_app",
    "run_server",
]
