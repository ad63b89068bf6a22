"""Normalized mutation events.

Every writer (today only the motion simulator) describes its change as a
:class:`VehicleDelta`. Only the state/store layer applies them.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VehicleDelta(BaseModel):
    """A displacement to apply to one vehicle's position."""

    model_config = ConfigDict(frozen=True)

    vehicle_id: str = Field(..., description="Vehicle id")
    d_lat: float = 0.0
    d_lng: float = 0.0

    @field_validator("vehicle_id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id

    @field_validator("d_lat", "d_lng")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("delta must be finite")
        return value
