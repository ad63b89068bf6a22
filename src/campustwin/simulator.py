"""Random-walk vehicle motion simulator."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random

from campustwin._constants import DEFAULT_MAX_OFFSET, DEFAULT_TICK_INTERVAL
from campustwin.state.events import VehicleDelta
from campustwin.state.store import EntityStore

_logger = logging.getLogger(__name__)


class VehicleMotionSimulator:
    """Perturb every vehicle in an :class:`EntityStore` on a fixed interval.

    Each tick draws an independent uniform offset in
    ``[-max_offset, max_offset]`` per vehicle and per axis. There is no
    velocity, boundary or collision model.

    Usage::

        simulator = VehicleMotionSimulator(store)
        simulator.start()
        ...
        await simulator.stop()
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        interval: float = DEFAULT_TICK_INTERVAL,
        max_offset: float = DEFAULT_MAX_OFFSET,
        rng: random.Random | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        if max_offset < 0:
            raise ValueError("max_offset must not be negative")
        self._store = store
        self._interval = interval
        self._max_offset = max_offset
        self._rng = rng or random.Random()
        self._task: asyncio.Task[None] | None = None
        self._ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def max_offset(self) -> float:
        return self._max_offset

    def tick(self) -> None:
        """Move every vehicle once. Never suspends."""
        for vehicle_id in self._store.vehicle_ids():
            delta = VehicleDelta(
                vehicle_id=vehicle_id,
                d_lat=self._rng.uniform(-self._max_offset, self._max_offset),
                d_lng=self._rng.uniform(-self._max_offset, self._max_offset),
            )
            self._store.apply(delta)
        self._ticks += 1
        _logger.debug("Updated vehicle positions (tick %d)", self._ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception:
                _logger.exception("Vehicle simulator tick failed")

    def start(self) -> None:
        """Schedule the tick loop on the running event loop (no-op if running)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="vehicle-motion-simulator")
        _logger.info("Vehicle simulator started (interval=%.2fs)", self._interval)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        _logger.info("Vehicle simulator stopped after %d ticks", self._ticks)
