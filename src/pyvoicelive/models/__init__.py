"""Data models for the realtime session, vehicle state and telemetry."""

from pyvoicelive.models._base import LatencyMs, TokenCount, WireModel, coerce_latency, coerce_token_count
from pyvoicelive.models.events import (
    FunctionCallArgumentsDone,
    InboundEventType,
    OutboundEventType,
    ServerError,
    ToolCallRequest,
    ToolCallResult,
)
from pyvoicelive.models.session_config import SessionConfig, ToolDeclaration, TurnDetection
from pyvoicelive.models.telemetry import LatencyStats, Metrics, TokenCounters, UsageSample
from pyvoicelive.models.vehicle import (
    NAVIGATION_NOT_SET,
    LightsState,
    MediaType,
    MusicState,
    VehicleState,
    WindowState,
)

__all__ = [
    "FunctionCallArgumentsDone",
    "InboundEventType",
    "LatencyMs",
    "LatencyStats",
    "LightsState",
    "MediaType",
    "Metrics",
    "MusicState",
    "NAVIGATION_NOT_SET",
    "OutboundEventType",
    "ServerError",
    "SessionConfig",
    "TokenCount",
    "TokenCounters",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDeclaration",
    "TurnDetection",
    "UsageSample",
    "VehicleState",
    "WindowState",
    "WireModel",
    "coerce_latency",
    "coerce_token_count",
]
