"""In-memory entity store.

This is the only component allowed to change building or vehicle records.
Records are frozen models: a vehicle move replaces the record with a single
dict assignment, so a reader on the event loop sees either the old or the
new position, never a mix.
"""

from __future__ import annotations

from collections.abc import Iterable

from campustwin.exceptions import TwinNotFoundError
from campustwin.models.entities import Building, Vehicle
from campustwin.state.events import VehicleDelta
from campustwin.state.seed import DEMO_BUILDINGS, DEMO_VEHICLES


class EntityStore:
    """Holder of the campus buildings and vehicles.

    Buildings are fixed at construction. Vehicles keep their identity for
    the store's lifetime; only their location changes.
    """

    def __init__(
        self,
        *,
        buildings: Iterable[Building] = (),
        vehicles: Iterable[Vehicle] = (),
    ) -> None:
        self._buildings: tuple[Building, ...] = tuple(buildings)
        building_ids = [b.id for b in self._buildings]
        if len(set(building_ids)) != len(building_ids):
            raise ValueError("building ids must be unique")

        self._vehicles: dict[str, Vehicle] = {}
        for vehicle in vehicles:
            if vehicle.id in self._vehicles:
                raise ValueError(f"duplicate vehicle id {vehicle.id!r}")
            self._vehicles[vehicle.id] = vehicle

    @classmethod
    def with_demo_data(cls) -> EntityStore:
        """Store seeded with the three demo buildings and two vehicles."""
        return cls(
            buildings=[Building.model_validate(item) for item in DEMO_BUILDINGS],
            vehicles=[Vehicle.model_validate(item) for item in DEMO_VEHICLES],
        )

    def get_buildings(self) -> tuple[Building, ...]:
        return self._buildings

    def get_vehicles(self) -> dict[str, Vehicle]:
        """Snapshot of all vehicles keyed by id.

        The returned dict is new on every call; later moves do not change it.
        """
        return dict(self._vehicles)

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise TwinNotFoundError(f"Unknown vehicle {vehicle_id!r}")
        return vehicle

    def vehicle_ids(self) -> list[str]:
        return list(self._vehicles)

    def apply_vehicle_delta(self, vehicle_id: str, d_lat: float, d_lng: float) -> Vehicle:
        """Move a vehicle by the given offsets and return the new record.

        Raises
        ------
        TwinNotFoundError
            If *vehicle_id* is not tracked.
        """
        moved = self.get_vehicle(vehicle_id).moved(d_lat, d_lng)
        self._vehicles[vehicle_id] = moved
        return moved

    def apply(self, delta: VehicleDelta) -> Vehicle:
        """Apply a normalized delta event."""
        return self.apply_vehicle_delta(delta.vehicle_id, delta.d_lat, delta.d_lng)
