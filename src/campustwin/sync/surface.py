"""Map render surface capability interface and a headless implementation."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from campustwin.models.location import LatLng

_logger = logging.getLogger(__name__)


class MapSurface(Protocol):
    """The subset of a vendor map SDK the client relies on.

    Marker handles are opaque; the surface decides what they are.
    """

    async def wait_until_ready(self) -> None:
        """Return once the map and its style are loaded."""
        ...

    def add_marker(self, position: LatLng, *, icon_html: str) -> Any:
        ...

    def update_marker(self, handle: Any, position: LatLng) -> None:
        ...

    def remove_marker(self, handle: Any) -> None:
        ...

    def bind_popup(self, handle: Any, content: str) -> None:
        """Open *content* in an info popup when the marker is clicked."""
        ...

    def add_polyline(self, path: Sequence[LatLng], *, style: Mapping[str, Any]) -> Any:
        ...

    def alert(self, message: str) -> None:
        """Show a user-facing message."""
        ...


@dataclass(slots=True)
class RenderedMarker:
    position: LatLng
    icon_html: str
    popup: str | None = None


@dataclass(slots=True)
class RenderedPolyline:
    path: list[LatLng]
    style: dict[str, Any] = field(default_factory=dict)


class InMemoryMapSurface:
    """Headless :class:`MapSurface` keeping rendered objects in dictionaries.

    Used by the ``watch`` command and by tests. Handles are increasing ints.
    """

    def __init__(self, *, ready: bool = False) -> None:
        self._ready = asyncio.Event()
        if ready:
            self._ready.set()
        self._handles = itertools.count(1)
        self.markers: dict[int, RenderedMarker] = {}
        self.polylines: dict[int, RenderedPolyline] = {}
        self.alerts: list[str] = []
        self.opened_popups: list[str] = []

    def mark_ready(self) -> None:
        """Signal the load event."""
        self._ready.set()

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    def add_marker(self, position: LatLng, *, icon_html: str) -> int:
        handle = next(self._handles)
        self.markers[handle] = RenderedMarker(position=position, icon_html=icon_html)
        _logger.debug("marker %d added at %s", handle, position.as_lng_lat())
        return handle

    def update_marker(self, handle: int, position: LatLng) -> None:
        self.markers[handle].position = position
        _logger.debug("marker %d moved to %s", handle, position.as_lng_lat())

    def remove_marker(self, handle: int) -> None:
        self.markers.pop(handle, None)
        _logger.debug("marker %d removed", handle)

    def bind_popup(self, handle: int, content: str) -> None:
        self.markers[handle].popup = content

    def click(self, handle: int) -> str | None:
        """Simulate a marker click; returns the popup content it opened."""
        popup = self.markers[handle].popup
        if popup is not None:
            self.opened_popups.append(popup)
        return popup

    def add_polyline(self, path: Sequence[LatLng], *, style: Mapping[str, Any]) -> int:
        handle = next(self._handles)
        self.polylines[handle] = RenderedPolyline(path=list(path), style=dict(style))
        _logger.debug("polyline %d added with %d points", handle, len(path))
        return handle

    def alert(self, message: str) -> None:
        self.alerts.append(message)
        _logger.warning("alert: %s", message)
