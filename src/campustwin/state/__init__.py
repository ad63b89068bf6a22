"""State/store layer.

This package is the single source of truth for building and vehicle
records on the server.
"""

from campustwin.state.events import VehicleDelta
from campustwin.state.store import EntityStore

__all__ = ["EntityStore", "VehicleDelta"]
