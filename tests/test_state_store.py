from __future__ import annotations

from datetime import UTC, datetime

import pytest

from pyvoicelive.exceptions import InvalidArgumentError
from pyvoicelive.models.vehicle import VehicleState
from pyvoicelive.state.events import StateUpdate, UpdateSource
from pyvoicelive.state.store import VehicleStateStore


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def test_replace_commits_and_notifies() -> None:
    store = VehicleStateStore(clock=_dt)
    updates: list[StateUpdate] = []
    store.subscribe(updates.append)

    previous = store.snapshot
    update = store.replace(previous.evolve(lights="on"), source=UpdateSource.TOOL)

    assert update is not None
    assert store.snapshot.lights == "on"
    assert store.revision == 1
    assert updates == [update]
    assert update.previous is previous
    assert update.source is UpdateSource.TOOL
    assert update.observed_at == _dt()
    assert update.changed_fields == {"lights": "on"}


def test_replace_with_equal_state_is_noop() -> None:
    store = VehicleStateStore()
    updates: list[StateUpdate] = []
    store.subscribe(updates.append)

    assert store.replace(VehicleState(), source=UpdateSource.DRIVE_CYCLE) is None
    assert store.revision == 0
    assert updates == []


def test_unsubscribe_stops_notifications() -> None:
    store = VehicleStateStore()
    updates: list[StateUpdate] = []
    unsubscribe = store.subscribe(updates.append)
    unsubscribe()
    unsubscribe()

    store.replace(store.snapshot.evolve(windows="open"), source=UpdateSource.TOOL)
    assert updates == []


def test_failing_listener_does_not_block_commit() -> None:
    store = VehicleStateStore()
    seen: list[StateUpdate] = []

    def _boom(update: StateUpdate) -> None:
        raise RuntimeError("listener broke")

    store.subscribe(_boom)
    store.subscribe(seen.append)
    store.replace(store.snapshot.evolve(speed=30.0), source=UpdateSource.DRIVE_CYCLE)

    assert store.snapshot.speed == 30.0
    assert len(seen) == 1


def test_apply_override_uses_user_source() -> None:
    store = VehicleStateStore()
    update = store.apply_override(media_type="audiobook", media_volume=20)

    assert update is not None
    assert update.source is UpdateSource.USER
    assert store.snapshot.media_type == "audiobook"
    assert store.snapshot.media_volume == 20


def test_invalid_override_leaves_snapshot_untouched() -> None:
    store = VehicleStateStore()
    before = store.snapshot

    with pytest.raises(InvalidArgumentError):
        store.apply_override(media_volume=150, lights="on")

    assert store.snapshot is before
    assert store.revision == 0


def test_unknown_override_field_rejected() -> None:
    store = VehicleStateStore()
    with pytest.raises(InvalidArgumentError):
        store.apply_override(warp_drive=True)


@pytest.mark.parametrize(
    "changes",
    [
        {"battery": 101.0},
        {"battery": -0.1},
        {"speed": -1.0},
        {"battery_range": -5},
        {"navigation_distance": -1.0},
    ],
)
def test_vehicle_state_bounds(changes: dict) -> None:
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        VehicleState().evolve(**changes)
