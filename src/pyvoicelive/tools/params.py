"""Typed parameter models for the car-assistant tools.

Each tool is a :class:`ToolParams` subclass. The model doubles as:

* the JSON parameter schema declared to the remote service
  (:meth:`ToolParams.declaration`), and
* the validator for the arguments the model sends back
  (``model_validate``), so the declared and executed tool sets can't
  drift apart.

Validation is strict for numbers and strings: ``"50"`` is not a volume.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from pyvoicelive.models.session_config import ToolDeclaration
from pyvoicelive.models.vehicle import NAVIGATION_NOT_SET, VehicleState


def _strip_titles(schema: Any) -> Any:
    """Drop pydantic's auto-generated ``title`` keys; the service doesn't need them."""
    if isinstance(schema, dict):
        return {key: _strip_titles(value) for key, value in schema.items() if key != "title"}
    if isinstance(schema, list):
        return [_strip_titles(item) for item in schema]
    return schema


class ToolParams(BaseModel):
    """Base class for tool parameter models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    tool_name: ClassVar[str]
    description: ClassVar[str]
    read_only: ClassVar[bool] = False

    @classmethod
    def declaration(cls) -> ToolDeclaration:
        schema = _strip_titles(cls.model_json_schema())
        schema.setdefault("properties", {})
        return ToolDeclaration(name=cls.tool_name, description=cls.description, parameters=schema)

    def changes(self, state: VehicleState) -> dict[str, Any]:
        """Vehicle-state fields to update; empty for read-only tools."""
        return {}


class GetVehicleStatus(ToolParams):
    tool_name: ClassVar[str] = "getVehicleStatus"
    description: ClassVar[str] = (
        "Get the current vehicle status: speed, battery, range, climate, lights, windows, media and navigation."
    )
    read_only: ClassVar[bool] = True


class SetLights(ToolParams):
    tool_name: ClassVar[str] = "setLights"
    description: ClassVar[str] = "Turn the headlights on or off, or put them in automatic mode."

    state: Literal["on", "off", "auto"] = Field(description="Desired headlight mode.")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"lights": self.state}


class SetWindows(ToolParams):
    tool_name: ClassVar[str] = "setWindows"
    description: ClassVar[str] = "Open, close or vent the windows."

    state: Literal["open", "closed", "vented"] = Field(description="Desired window position.")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"windows": self.state}


class SetTemperature(ToolParams):
    tool_name: ClassVar[str] = "setTemperature"
    description: ClassVar[str] = "Set the cabin climate temperature in degrees Celsius."

    TEMP_MIN_C: ClassVar[float] = 16.0
    TEMP_MAX_C: ClassVar[float] = 30.0

    temperature: float = Field(ge=TEMP_MIN_C, le=TEMP_MAX_C, strict=True, description="Target temperature (°C).")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"temperature": self.temperature}


class PlayMedia(ToolParams):
    tool_name: ClassVar[str] = "playMedia"
    description: ClassVar[str] = "Start playing a media source."

    media: Literal["radio", "music", "podcast", "audiobook"] = Field(description="Media source to play.")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"media_type": self.media, "music": "on", "radio_playing": self.media == "radio"}


class StopMedia(ToolParams):
    tool_name: ClassVar[str] = "stopMedia"
    description: ClassVar[str] = "Stop media playback."

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"music": "off", "radio_playing": False}


class SetVolume(ToolParams):
    tool_name: ClassVar[str] = "setVolume"
    description: ClassVar[str] = "Set the media volume in percent."

    volume: int = Field(ge=0, le=100, strict=True, description="Volume from 0 to 100.")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"media_volume": self.volume}


class SetRadioStation(ToolParams):
    tool_name: ClassVar[str] = "setRadioStation"
    description: ClassVar[str] = "Tune the radio to a station and start playing it."

    station: str = Field(min_length=1, max_length=64, strict=True, description="Station name, e.g. 'FM 98.7'.")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {"radio_station": self.station, "media_type": "radio", "radio_playing": True, "music": "on"}


class StartNavigation(ToolParams):
    tool_name: ClassVar[str] = "startNavigation"
    description: ClassVar[str] = "Start route guidance to a destination."

    destination: str = Field(min_length=1, max_length=200, strict=True, description="Destination name or address.")
    distance_km: float | None = Field(default=None, ge=0, strict=True, description="Route distance in km, if known.")

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {
            "navigation_active": True,
            "navigation_destination": self.destination,
            "navigation_distance": self.distance_km,
        }


class StopNavigation(ToolParams):
    tool_name: ClassVar[str] = "stopNavigation"
    description: ClassVar[str] = "Cancel route guidance."

    def changes(self, state: VehicleState) -> dict[str, Any]:
        return {
            "navigation_active": False,
            "navigation_destination": NAVIGATION_NOT_SET,
            "navigation_distance": None,
        }


CAR_TOOLS: tuple[type[ToolParams], ...] = (
    GetVehicleStatus,
    SetLights,
    SetWindows,
    SetTemperature,
    PlayMedia,
    StopMedia,
    SetVolume,
    SetRadioStation,
    StartNavigation,
    StopNavigation,
)
