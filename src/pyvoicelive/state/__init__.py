"""State/store layer.

This package is the single owner of the current :class:`VehicleState`
snapshot. Tool results, user overrides and drive-cycle ticks all reach the
state through :class:`VehicleStateStore`.
"""

from pyvoicelive.state.events import StateUpdate, UpdateSource
from pyvoicelive.state.store import VehicleStateStore

__all__ = ["StateUpdate", "UpdateSource", "VehicleStateStore"]
