"""Building and vehicle records held by the entity store."""

from __future__ import annotations

from pydantic import Field, field_validator

from campustwin.models._base import TwinBaseModel
from campustwin.models.location import LatLng


def _non_empty(value: str, name: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(f"{name} must be non-empty")
    return text


class Building(TwinBaseModel):
    """A campus building with its carbon score.

    Parameters
    ----------
    id : str
        Unique building id (e.g. ``"b1"``).
    name : str
        Display name.
    location : LatLng
        Marker position.
    carbon_score : int
        Carbon footprint score in ``[0, 100]``; wire name ``carbonScore``.
    """

    id: str
    name: str
    location: LatLng
    carbon_score: int = Field(ge=0, le=100)

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, value: str) -> str:
        return _non_empty(value, "id")

    @property
    def carbon_intensity(self) -> float:
        """Marker color intensity in ``[0, 1]``."""
        return self.carbon_score / 100


class Vehicle(TwinBaseModel):
    """A tracked campus vehicle."""

    id: str
    name: str
    location: LatLng

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, value: str) -> str:
        return _non_empty(value, "id")

    def moved(self, d_lat: float, d_lng: float) -> Vehicle:
        """Return a copy of this vehicle displaced by the given offsets."""
        return self.model_copy(update={"location": self.location.offset(d_lat, d_lng)})
