"""Route request and result models.

These models provide the "validate → normalize → execute" flow used by
:class:`campustwin.routing.proxy.RouteProxy`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import field_validator

from campustwin.models._base import TwinBaseModel
from campustwin.models.location import LatLng, is_finite_number


class RouteRequest(TwinBaseModel):
    """Start and end of a requested route."""

    start: LatLng
    end: LatLng


class RouteResult(TwinBaseModel):
    """A single route as returned by the routing provider.

    ``geometry`` is the provider's GeoJSON-like object and is passed through
    unchanged. Its ``coordinates`` are ``[lng, lat]`` pairs.
    """

    geometry: dict[str, Any]

    @field_validator("geometry")
    @classmethod
    def _require_coordinates(cls, value: dict[str, Any]) -> dict[str, Any]:
        coordinates = value.get("coordinates")
        if not isinstance(coordinates, Sequence) or isinstance(coordinates, (str, bytes)):
            raise ValueError("geometry.coordinates must be a list of [lng, lat] pairs")
        for position in coordinates:
            if (
                not isinstance(position, Sequence)
                or isinstance(position, (str, bytes))
                or len(position) < 2
                or not all(is_finite_number(v) for v in position[:2])
            ):
                raise ValueError(f"invalid coordinate pair: {position!r}")
        return value

    @property
    def coordinates(self) -> list[list[float]]:
        return [list(position) for position in self.geometry["coordinates"]]

    def path(self) -> list[LatLng]:
        """Coordinates as positions, swapping the provider's lng/lat order back."""
        return [LatLng(lat=position[1], lng=position[0]) for position in self.geometry["coordinates"]]
