"""Demo campus seed data, in wire format."""

from __future__ import annotations

from typing import Any

DEMO_BUILDINGS: tuple[dict[str, Any], ...] = (
    {"id": "b1", "name": "Main Building", "location": {"lat": 29.8649, "lng": 77.8966}, "carbonScore": 85},
    {"id": "b2", "name": "Library", "location": {"lat": 29.8660, "lng": 77.8970}, "carbonScore": 60},
    {"id": "b3", "name": "Hostel A", "location": {"lat": 29.8675, "lng": 77.8950}, "carbonScore": 92},
)

DEMO_VEHICLES: tuple[dict[str, Any], ...] = (
    {"id": "v1", "name": "Shuttle 1", "location": {"lat": 29.8655, "lng": 77.8960}},
    {"id": "v2", "name": "Maintenance Van", "location": {"lat": 29.8670, "lng": 77.8955}},
)
