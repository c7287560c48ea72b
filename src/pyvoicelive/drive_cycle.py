"""Drive-cycle simulation of vehicle speed and battery drain.

The core only depends on the :class:`DriveCycle` protocol. The default
:class:`FederalTestProcedureCycle` is a coarse piecewise-linear rendition of
the FTP urban cycle (505 s cold start + 864 s transient phase), good enough
to make the speed and battery gauges move realistically.
"""

from __future__ import annotations

import asyncio
import bisect
import contextlib
import logging
import time
from collections.abc import Callable
from typing import Protocol

from pyvoicelive._constants import (
    DEFAULT_DRIVE_TICK_INTERVAL,
    FTP_CYCLE_DURATION,
    RANGE_KM_PER_BATTERY_PERCENT,
)
from pyvoicelive.models.vehicle import VehicleState
from pyvoicelive.state.events import UpdateSource
from pyvoicelive.state.store import VehicleStateStore

_logger = logging.getLogger(__name__)


class DriveCycle(Protocol):
    """Pure speed profile + consumption curve."""

    @property
    def duration(self) -> float: ...

    def speed_at(self, position: float) -> float:
        """Target speed (km/h) at *position* seconds into the cycle."""
        ...

    def consumption_for(self, speed: float) -> float:
        """Battery drain (percentage points) for one tick at *speed*."""
        ...


# (seconds, km/h) waypoints; linear interpolation in between.
_FTP_WAYPOINTS: tuple[tuple[float, float], ...] = (
    # Cold start phase
    (0, 0.0),
    (20, 0.0),
    (48, 47.5),
    (85, 48.3),
    (125, 0.0),
    (163, 0.0),
    (190, 91.2),
    (300, 88.0),
    (340, 38.0),
    (360, 0.0),
    (390, 0.0),
    (420, 40.2),
    (460, 35.4),
    (505, 0.0),
    # Transient phase
    (525, 0.0),
    (560, 41.8),
    (610, 30.6),
    (640, 0.0),
    (700, 0.0),
    (745, 56.3),
    (800, 43.5),
    (835, 0.0),
    (900, 0.0),
    (940, 40.2),
    (1010, 51.5),
    (1060, 0.0),
    (1110, 0.0),
    (1150, 37.0),
    (1200, 45.1),
    (1250, 24.1),
    (1290, 0.0),
    (1369, 0.0),
)


class FederalTestProcedureCycle:
    """Default drive cycle used by the demo."""

    IDLE_DRAIN: float = 0.0005
    DRAIN_PER_KMH: float = 0.00004
    DRAIN_PER_KMH2: float = 0.0000004

    def __init__(self, waypoints: tuple[tuple[float, float], ...] = _FTP_WAYPOINTS) -> None:
        self._times = [t for t, _ in waypoints]
        self._speeds = [v for _, v in waypoints]

    @property
    def duration(self) -> float:
        return float(FTP_CYCLE_DURATION)

    def speed_at(self, position: float) -> float:
        if position <= self._times[0]:
            return self._speeds[0]
        if position >= self._times[-1]:
            return self._speeds[-1]
        idx = bisect.bisect_right(self._times, position)
        t0, t1 = self._times[idx - 1], self._times[idx]
        v0, v1 = self._speeds[idx - 1], self._speeds[idx]
        return round(v0 + (v1 - v0) * (position - t0) / (t1 - t0), 1)

    def consumption_for(self, speed: float) -> float:
        speed = max(0.0, speed)
        return self.IDLE_DRAIN + self.DRAIN_PER_KMH * speed + self.DRAIN_PER_KMH2 * speed * speed


def apply_drive_tick(state: VehicleState, cycle: DriveCycle, now: float) -> VehicleState:
    """Advance *state* by one tick at wall-clock time *now* (epoch seconds)."""
    position = now % cycle.duration
    speed = max(0.0, cycle.speed_at(position))
    battery = max(0.0, state.battery - cycle.consumption_for(speed))
    battery = min(100.0, round(battery, 2))
    return state.evolve(
        speed=speed,
        battery=battery,
        battery_range=round(battery * RANGE_KM_PER_BATTERY_PERCENT),
    )


class DriveCycleTicker:
    """Applies :func:`apply_drive_tick` to a store at a steady cadence."""

    def __init__(
        self,
        store: VehicleStateStore,
        *,
        cycle: DriveCycle | None = None,
        interval: float = DEFAULT_DRIVE_TICK_INTERVAL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._store = store
        self._cycle: DriveCycle = cycle if cycle is not None else FederalTestProcedureCycle()
        self._interval = interval
        self._clock = clock
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> None:
        next_state = apply_drive_tick(self._store.snapshot, self._cycle, self._clock())
        self._store.replace(next_state, source=UpdateSource.DRIVE_CYCLE)

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                _logger.warning("Drive-cycle tick failed", exc_info=True)
            await asyncio.sleep(self._interval)
