"""Data models for campus twin records and route requests."""

from campustwin.models._base import TwinBaseModel
from campustwin.models.entities import Building, Vehicle
from campustwin.models.location import LatLng
from campustwin.models.route import RouteRequest, RouteResult

__all__ = [
    "Building",
    "LatLng",
    "RouteRequest",
    "RouteResult",
    "TwinBaseModel",
    "Vehicle",
]
