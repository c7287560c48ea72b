"""State-change notifications emitted by the store."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyvoicelive.models.vehicle import VehicleState


class UpdateSource(StrEnum):
    TOOL = "tool"
    USER = "user"
    DRIVE_CYCLE = "drive_cycle"


class StateUpdate(BaseModel):
    """A committed snapshot swap."""

    model_config = ConfigDict(frozen=True)

    source: UpdateSource
    previous: VehicleState
    current: VehicleState
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def changed_fields(self) -> dict[str, Any]:
        before = self.previous.model_dump()
        return {key: value for key, value in self.current.model_dump().items() if before.get(key) != value}
