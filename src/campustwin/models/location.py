"""Geographic position model."""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from campustwin.models._base import TwinBaseModel


def is_finite_number(value: Any) -> bool:
    """True for real ints and floats that fit a finite float; bools excluded."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large to convert to float
        return False


class LatLng(TwinBaseModel):
    """A WGS84 position.

    Parameters
    ----------
    lat : float
        Latitude in degrees. Also accepted as ``latitude``.
    lng : float
        Longitude in degrees. Also accepted as ``lon`` or ``longitude``.
    """

    lat: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("lng", "lon", "longitude"))

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> Any:
        # Strings and bools would otherwise be coerced in lax mode.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a number")
        if not is_finite_number(value):
            raise ValueError("must be finite")
        return value

    def as_lng_lat(self) -> str:
        """Provider coordinate string; longitude comes first."""
        return f"{self.lng},{self.lat}"

    def offset(self, d_lat: float, d_lng: float) -> LatLng:
        return LatLng(lat=self.lat + d_lat, lng=self.lng + d_lng)
