from __future__ import annotations

import asyncio

import pytest

from pyvoicelive.drive_cycle import DriveCycleTicker, FederalTestProcedureCycle, apply_drive_tick
from pyvoicelive.models.vehicle import VehicleState
from pyvoicelive.state.events import StateUpdate, UpdateSource
from pyvoicelive.state.store import VehicleStateStore


class _ConstantCycle:
    """Fixed speed and a large, round drain so results are easy to check."""

    def __init__(self, speed: float = 50.0, drain: float = 1.0) -> None:
        self._speed = speed
        self._drain = drain

    @property
    def duration(self) -> float:
        return 100.0

    def speed_at(self, position: float) -> float:
        return self._speed

    def consumption_for(self, speed: float) -> float:
        return self._drain


def test_tick_applies_speed_and_drain() -> None:
    state = apply_drive_tick(VehicleState(battery=80.0), _ConstantCycle(), now=1234.0)

    assert state.speed == 50.0
    assert state.battery == 79.0
    assert state.battery_range == round(79.0 * 3.1)


def test_battery_clamps_to_zero() -> None:
    state = apply_drive_tick(VehicleState(battery=0.4), _ConstantCycle(drain=1.0), now=0.0)

    assert state.battery == 0.0
    assert state.battery_range == 0

    again = apply_drive_tick(state, _ConstantCycle(drain=1.0), now=1.0)
    assert again.battery == 0.0


def test_negative_cycle_speed_is_floored() -> None:
    state = apply_drive_tick(VehicleState(), _ConstantCycle(speed=-5.0, drain=0.0), now=0.0)
    assert state.speed == 0.0


def test_range_tracks_battery() -> None:
    cycle = FederalTestProcedureCycle()
    state = VehicleState(battery=100.0)
    for second in range(0, 600, 7):
        state = apply_drive_tick(state, cycle, now=float(second))
        assert state.battery_range == round(state.battery * 3.1)
        assert 0.0 <= state.battery <= 100.0


class TestFederalTestProcedureCycle:
    def test_duration(self) -> None:
        assert FederalTestProcedureCycle().duration == 1369.0

    def test_starts_and_ends_stopped(self) -> None:
        cycle = FederalTestProcedureCycle()
        assert cycle.speed_at(0) == 0.0
        assert cycle.speed_at(cycle.duration) == 0.0
        assert cycle.speed_at(-10) == 0.0

    def test_waypoint_and_interpolation(self) -> None:
        cycle = FederalTestProcedureCycle()
        assert cycle.speed_at(48) == 47.5
        assert cycle.speed_at(245) == pytest.approx(89.6)

    def test_speeds_never_negative(self) -> None:
        cycle = FederalTestProcedureCycle()
        assert all(cycle.speed_at(float(t)) >= 0 for t in range(0, 1370))

    def test_consumption_grows_with_speed(self) -> None:
        cycle = FederalTestProcedureCycle()
        assert cycle.consumption_for(0) > 0
        assert cycle.consumption_for(90) > cycle.consumption_for(30) > cycle.consumption_for(0)


def test_ticker_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        DriveCycleTicker(VehicleStateStore(), interval=0)


def test_ticker_tick_commits_drive_cycle_update() -> None:
    store = VehicleStateStore()
    updates: list[StateUpdate] = []
    store.subscribe(updates.append)

    ticker = DriveCycleTicker(store, cycle=_ConstantCycle(), clock=lambda: 10.0)
    ticker.tick()

    assert len(updates) == 1
    assert updates[0].source is UpdateSource.DRIVE_CYCLE
    assert store.snapshot.speed == 50.0


@pytest.mark.asyncio
async def test_ticker_start_stop() -> None:
    store = VehicleStateStore()
    ticker = DriveCycleTicker(store, cycle=_ConstantCycle(), interval=0.01)

    ticker.start()
    ticker.start()
    assert ticker.is_running
    await asyncio.sleep(0.05)
    await ticker.stop()
    await ticker.stop()

    assert not ticker.is_running
    assert store.revision >= 1
    assert store.snapshot.battery < 80.0
