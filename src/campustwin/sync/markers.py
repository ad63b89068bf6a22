"""Marker bindings and reconciliation against a :class:`MapSurface`."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from campustwin._constants import VEHICLE_ICON_HTML, building_popup_html, carbon_marker_html
from campustwin.models.entities import Building, Vehicle
from campustwin.models.location import LatLng
from campustwin.sync.surface import MapSurface

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MarkerBinding:
    """Link between an entity id and its render handle.

    Holds no entity data beyond the last rendered position.
    """

    entity_id: str
    handle: Any
    position: LatLng
    missed: int = 0


@dataclass(slots=True)
class ReconcileResult:
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    retired: list[str] = field(default_factory=list)


class VehicleMarkerLayer:
    """Keeps exactly one marker binding per known vehicle id.

    Parameters
    ----------
    surface : MapSurface
        Render surface receiving marker calls.
    retire_after_misses : int
        Consecutive snapshots a vehicle may be absent from before its
        marker is removed. ``1`` retires on the first absence.
    """

    def __init__(self, surface: MapSurface, *, retire_after_misses: int = 1) -> None:
        if retire_after_misses < 1:
            raise ValueError("retire_after_misses must be at least 1")
        self._surface = surface
        self._retire_after_misses = retire_after_misses
        self._bindings: dict[str, MarkerBinding] = {}

    @property
    def bindings(self) -> Mapping[str, MarkerBinding]:
        return self._bindings

    def reconcile(self, vehicles: Mapping[str, Vehicle]) -> ReconcileResult:
        """Align bindings with a fresh vehicle snapshot.

        Known ids move their existing marker in place, new ids get a marker,
        and ids missing for ``retire_after_misses`` snapshots are retired.
        """
        result = ReconcileResult()

        for vehicle_id, vehicle in vehicles.items():
            position = vehicle.location
            binding = self._bindings.get(vehicle_id)
            if binding is not None:
                binding.missed = 0
                if binding.position != position:
                    self._surface.update_marker(binding.handle, position)
                    binding.position = position
                result.updated.append(vehicle_id)
            else:
                handle = self._surface.add_marker(position, icon_html=VEHICLE_ICON_HTML)
                self._bindings[vehicle_id] = MarkerBinding(entity_id=vehicle_id, handle=handle, position=position)
                result.created.append(vehicle_id)

        for vehicle_id in [vid for vid in self._bindings if vid not in vehicles]:
            binding = self._bindings[vehicle_id]
            binding.missed += 1
            if binding.missed >= self._retire_after_misses:
                self._surface.remove_marker(binding.handle)
                del self._bindings[vehicle_id]
                result.retired.append(vehicle_id)

        if result.created or result.retired:
            _logger.debug("Vehicle markers: created=%s retired=%s", result.created, result.retired)
        return result

    def clear(self) -> None:
        """Remove every vehicle marker from the surface."""
        for binding in self._bindings.values():
            self._surface.remove_marker(binding.handle)
        self._bindings.clear()


class BuildingMarkerLayer:
    """Static building markers, created once per building id."""

    def __init__(self, surface: MapSurface) -> None:
        self._surface = surface
        self._bindings: dict[str, MarkerBinding] = {}

    @property
    def bindings(self) -> Mapping[str, MarkerBinding]:
        return self._bindings

    def render(self, buildings: Iterable[Building]) -> list[str]:
        """Add markers for buildings not yet rendered; returns the new ids."""
        created: list[str] = []
        for building in buildings:
            if building.id in self._bindings:
                continue
            handle = self._surface.add_marker(building.location, icon_html=carbon_marker_html(building.carbon_score))
            self._surface.bind_popup(handle, building_popup_html(building.name, building.carbon_score))
            self._bindings[building.id] = MarkerBinding(entity_id=building.id, handle=handle, position=building.location)
            created.append(building.id)
        return created
