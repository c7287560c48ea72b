"""Custom exception hierarchy for pyvoicelive."""

from __future__ import annotations


class VoiceLiveError(Exception):
    """Base exception for all pyvoicelive errors."""


class ConfigurationError(VoiceLiveError):
    """Missing or invalid connection configuration (endpoint, API key, ...)."""


class ConfigParseError(VoiceLiveError):
    """A session configuration document could not be parsed or validated.

    The previously valid configuration stays in effect; callers decide
    whether to surface the error.
    """

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class ChannelError(VoiceLiveError):
    """Streaming channel failure (connect, send, receive or remote close)."""

    def __init__(self, message: str, *, close_code: int | None = None) -> None:
        self.close_code = close_code
        super().__init__(message)


class ChannelClosedError(ChannelError):
    """Attempted to send while the session is not connected."""


class ConnectionTimeoutError(ChannelError):
    """Channel establishment did not complete within the configured timeout."""

    def __init__(self, message: str, *, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(message)


class ToolError(VoiceLiveError):
    """Base class for tool-call failures.

    Tool errors never escape the session controller; they are converted
    into structured error results returned to the remote model.
    """

    #: Machine-readable code placed in the error payload.
    code: str = "tool_error"

    def __init__(self, message: str, *, tool_name: str = "") -> None:
        self.tool_name = tool_name
        super().__init__(message)


class ArgumentParseError(ToolError):
    """Function-call arguments were not a valid JSON object."""

    code = "argument_parse_error"


class InvalidArgumentError(ToolError):
    """Arguments failed validation against the tool's parameter schema."""

    code = "invalid_arguments"


class UnknownToolError(ToolError):
    """The remote model called a tool that is not declared."""

    code = "unknown_tool"


class RemoteServiceError(VoiceLiveError):
    """The service reported an ``error`` event; the session stays open."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        self.code = code
        super().__init__(message)
