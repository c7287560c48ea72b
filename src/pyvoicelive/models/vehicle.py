"""Simulated vehicle state."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class LightsState(enum.StrEnum):
    OFF = "off"
    ON = "on"
    AUTO = "auto"


class WindowState(enum.StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    VENTED = "vented"


class MusicState(enum.StrEnum):
    OFF = "off"
    ON = "on"


class MediaType(enum.StrEnum):
    RADIO = "radio"
    MUSIC = "music"
    PODCAST = "podcast"
    AUDIOBOOK = "audiobook"


NAVIGATION_NOT_SET = "Not set"


class VehicleState(BaseModel):
    """Immutable snapshot of the simulated car.

    New snapshots are produced with :meth:`evolve`, which re-validates the
    merged values so a rejected change never yields a partially updated
    state.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    speed: float = Field(default=0.0, ge=0)
    """Current speed in km/h."""
    battery: float = Field(default=80.0, ge=0, le=100)
    """State of charge in percent."""
    battery_range: int = Field(default=245, ge=0)
    """Estimated range in km."""
    temperature: float = Field(default=22.0, ge=0)
    """Cabin temperature setpoint in °C."""
    lights: LightsState = LightsState.OFF
    windows: WindowState = WindowState.CLOSED
    music: MusicState = MusicState.OFF
    radio_station: str = "FM 101.5"
    radio_playing: bool = True
    media_type: MediaType = MediaType.RADIO
    media_volume: int = Field(default=70, ge=0, le=100)
    navigation_active: bool = False
    navigation_destination: str = NAVIGATION_NOT_SET
    navigation_distance: float | None = Field(default=None, ge=0)
    """Remaining distance in km, ``None`` when no route is set."""

    def evolve(self, **changes: object) -> VehicleState:
        """Return a validated copy with *changes* applied.

        Raises :class:`pydantic.ValidationError` when the merged state is invalid.
        """
        return type(self).model_validate({**self.model_dump(), **changes})

    def as_payload(self) -> dict[str, object]:
        """JSON-friendly view used in tool results."""
        return self.model_dump(mode="json")
