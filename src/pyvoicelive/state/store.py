"""In-memory owner of the current vehicle snapshot.

Snapshots are immutable; every write validates a complete new snapshot and
swaps it in, so readers never observe a half-applied change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from pyvoicelive.exceptions import InvalidArgumentError
from pyvoicelive.models.vehicle import VehicleState
from pyvoicelive.state.events import StateUpdate, UpdateSource

_logger = logging.getLogger(__name__)

StateListener = Callable[[StateUpdate], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VehicleStateStore:
    """Single-writer store for :class:`VehicleState`."""

    def __init__(
        self,
        initial: VehicleState | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._state = initial if initial is not None else VehicleState()
        self._clock = clock
        self._listeners: list[StateListener] = []
        self._revision = 0

    @property
    def snapshot(self) -> VehicleState:
        """Current snapshot (read-only)."""
        return self._state

    @property
    def revision(self) -> int:
        """Number of committed changes so far."""
        return self._revision

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def replace(self, state: VehicleState, *, source: UpdateSource) -> StateUpdate | None:
        """Swap in *state*; returns the update, or ``None`` when nothing changed."""
        previous = self._state
        if state == previous:
            return None
        self._state = state
        self._revision += 1
        update = StateUpdate(source=source, previous=previous, current=state, observed_at=self._clock())
        self._notify(update)
        return update

    def apply_override(self, **changes: Any) -> StateUpdate | None:
        """Apply a direct user change (e.g. media type, volume, navigation toggle).

        Raises :class:`InvalidArgumentError` and leaves the snapshot untouched
        when the merged state is invalid.
        """
        try:
            candidate = self._state.evolve(**changes)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid vehicle override: {exc.error_count()} error(s)") from exc
        return self.replace(candidate, source=UpdateSource.USER)

    def _notify(self, update: StateUpdate) -> None:
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                _logger.debug("State listener failed", exc_info=True)
