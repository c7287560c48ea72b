"""Realtime protocol event models and tool-call request/result records."""

from __future__ import annotations

import enum
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyvoicelive.exceptions import ArgumentParseError
from pyvoicelive.models._base import WireModel, dig


class InboundEventType(enum.StrEnum):
    """Server event ``type`` values the session controller acts on."""

    SESSION_CREATED = "session.created"
    SESSION_UPDATED = "session.updated"
    FUNCTION_CALL_ARGUMENTS_DONE = "response.function_call_arguments.done"
    RESPONSE_DONE = "response.done"
    ERROR = "error"


class OutboundEventType(enum.StrEnum):
    """Client event ``type`` values sent over the channel."""

    SESSION_UPDATE = "session.update"
    CONVERSATION_ITEM_CREATE = "conversation.item.create"
    RESPONSE_CREATE = "response.create"


class FunctionCallArgumentsDone(WireModel):
    """``response.function_call_arguments.done`` event."""

    type: str = InboundEventType.FUNCTION_CALL_ARGUMENTS_DONE.value
    call_id: str = ""
    name: str = ""
    arguments: Any = ""
    response_id: str | None = None
    item_id: str | None = None


class ServerError(WireModel):
    """``error`` event; the interesting fields live under ``error``."""

    type: str = InboundEventType.ERROR.value
    error: dict[str, Any] = Field(default_factory=dict)

    @property
    def message(self) -> str:
        text = dig(self.error, "message")
        return str(text) if text else "Unknown server error"

    @property
    def code(self) -> str | None:
        code = dig(self.error, "code")
        return str(code) if code is not None else None


class ToolCallRequest(BaseModel):
    """A completed function call issued by the remote model."""

    model_config = ConfigDict(frozen=True)

    call_id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(cls, event: FunctionCallArgumentsDone) -> ToolCallRequest:
        """Decode the JSON-encoded ``arguments`` string of *event*.

        Raises :class:`ArgumentParseError` when the arguments are not a JSON object.
        An empty string is treated as "no arguments"; an already decoded
        object is accepted as-is.
        """
        if isinstance(event.arguments, dict):
            return cls(call_id=event.call_id, name=event.name, arguments=event.arguments)
        if not isinstance(event.arguments, str):
            raise ArgumentParseError(
                f"Arguments for {event.name!r} must be a JSON object, got {type(event.arguments).__name__}",
                tool_name=event.name,
            )
        text = event.arguments.strip()
        if not text:
            return cls(call_id=event.call_id, name=event.name)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ArgumentParseError(
                f"Arguments for {event.name!r} are not valid JSON: {exc.msg}",
                tool_name=event.name,
            ) from exc
        if not isinstance(parsed, dict):
            raise ArgumentParseError(
                f"Arguments for {event.name!r} must be a JSON object, got {type(parsed).__name__}",
                tool_name=event.name,
            )
        return cls(call_id=event.call_id, name=event.name, arguments=parsed)


class ToolCallResult(BaseModel):
    """Result of one tool call, keyed by the originating ``call_id``."""

    model_config = ConfigDict(frozen=True)

    call_id: str
    success: bool
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> list[dict[str, Any]]:
        """Client events that hand the result back and ask for a follow-up response."""
        return [
            {
                "type": OutboundEventType.CONVERSATION_ITEM_CREATE.value,
                "item": {
                    "type": "function_call_output",
                    "call_id": self.call_id,
                    "output": json.dumps(self.payload, separators=(",", ":")),
                },
            },
            {"type": OutboundEventType.RESPONSE_CREATE.value},
        ]
