"""Cancellable vehicle polling loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Mapping

from campustwin._constants import DEFAULT_TICK_INTERVAL
from campustwin.models.entities import Vehicle

_logger = logging.getLogger(__name__)

VehicleFetcher = Callable[[], Awaitable[Mapping[str, Vehicle]]]
VehicleApplier = Callable[[Mapping[str, Vehicle]], object]


class VehicleSyncLoop:
    """Poll a vehicle snapshot on a fixed interval and hand it to ``apply``.

    * At most one fetch is in flight; a timer tick that finds one running is
      skipped rather than queued.
    * Fetches are numbered and a result older than the last applied one is
      dropped, so an out-of-order completion cannot roll positions back.
    * :meth:`stop` cancels the timer and the in-flight fetch; nothing is
      applied afterwards.
    * A failed fetch is logged and the previous positions stay in place.
    """

    def __init__(
        self,
        fetch: VehicleFetcher,
        apply: VehicleApplier,
        *,
        interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch = fetch
        self._apply = apply
        self._interval = interval
        self._timer: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[bool] | None = None
        self._issued = 0
        self._applied = 0
        self._stopped = False
        self.skipped_ticks = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def applied_sequence(self) -> int:
        """Sequence number of the most recent snapshot handed to ``apply``."""
        return self._applied

    async def poll_once(self) -> bool:
        """Fetch and apply one snapshot now. Returns whether it was applied."""
        self._issued += 1
        sequence = self._issued
        try:
            vehicles = await self._fetch()
        except Exception:
            self.failures += 1
            _logger.warning("Vehicle poll %d failed; keeping last known positions", sequence, exc_info=True)
            return False

        if self._stopped:
            return False
        if sequence < self._applied:
            _logger.debug("Dropping stale vehicle snapshot %d (applied %d)", sequence, self._applied)
            return False
        self._applied = sequence
        self._apply(vehicles)
        return True

    def _tick(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self.skipped_ticks += 1
            _logger.debug("Vehicle poll still in flight; skipping tick")
            return
        self._inflight = asyncio.get_running_loop().create_task(self.poll_once())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._tick()

    def start(self) -> None:
        """Start the timer on the running event loop (no-op if running)."""
        if self.running:
            return
        self._stopped = False
        self._timer = asyncio.get_running_loop().create_task(self._run(), name="vehicle-sync-loop")

    async def stop(self) -> None:
        """Cancel the timer and any in-flight fetch, and wait for both to finish."""
        self._stopped = True
        tasks = [task for task in (self._timer, self._inflight) if task is not None]
        self._timer = None
        self._inflight = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
