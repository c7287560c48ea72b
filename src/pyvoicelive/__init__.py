"""pyvoicelive - Async realtime voice-session client with a simulated car assistant."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvoicelive")
except PackageNotFoundError:
    __version__ = "0+local"
from pyvoicelive.audit import AuditLog, LogCategory, LogEntry
from pyvoicelive.config import VoiceLiveConfig
from pyvoicelive.controller import NotificationKind, SessionController, SessionNotification, SessionState
from pyvoicelive.drive_cycle import DriveCycle, DriveCycleTicker, FederalTestProcedureCycle, apply_drive_tick
from pyvoicelive.exceptions import (
    ArgumentParseError,
    ChannelClosedError,
    ChannelError,
    ConfigParseError,
    ConfigurationError,
    ConnectionTimeoutError,
    InvalidArgumentError,
    RemoteServiceError,
    ToolError,
    UnknownToolError,
    VoiceLiveError,
)
from pyvoicelive.models import (
    Metrics,
    SessionConfig,
    ToolCallRequest,
    ToolCallResult,
    ToolDeclaration,
    TurnDetection,
    UsageSample,
    VehicleState,
)
from pyvoicelive.state import StateUpdate, UpdateSource, VehicleStateStore
from pyvoicelive.telemetry import TelemetryAggregator, calculator_params, calculator_url, statistics_params
from pyvoicelive.tools import ToolDispatcher

__all__ = [
    "__version__",
    "ArgumentParseError",
    "AuditLog",
    "ChannelClosedError",
    "ChannelError",
    "ConfigParseError",
    "ConfigurationError",
    "ConnectionTimeoutError",
    "DriveCycle",
    "DriveCycleTicker",
    "FederalTestProcedureCycle",
    "InvalidArgumentError",
    "LogCategory",
    "LogEntry",
    "Metrics",
    "NotificationKind",
    "RemoteServiceError",
    "SessionConfig",
    "SessionController",
    "SessionNotification",
    "SessionState",
    "StateUpdate",
    "TelemetryAggregator",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDeclaration",
    "ToolDispatcher",
    "ToolError",
    "TurnDetection",
    "UnknownToolError",
    "UpdateSource",
    "UsageSample",
    "VehicleState",
    "VehicleStateStore",
    "VoiceLiveConfig",
    "VoiceLiveError",
    "apply_drive_tick",
    "calculator_params",
    "calculator_url",
    "statistics_params",
]
