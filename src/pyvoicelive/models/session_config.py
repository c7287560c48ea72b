"""Session configuration document sent with ``session.update``.

The document is what users edit as raw JSON. :meth:`SessionConfig.parse`
turns text into a validated, immutable configuration or raises
:class:`~pyvoicelive.exceptions.ConfigParseError`; it never mutates an
existing configuration, so callers can keep the previous one on failure.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pyvoicelive.exceptions import ConfigParseError

DEFAULT_INSTRUCTIONS = "You are a helpful car assistant. Help the user with their vehicle."
DEFAULT_VOICE = "en-US-Ava:DragonHDLatestNeural"


def _format_errors(exc: ValidationError) -> list[str]:
    return [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]


class _SessionModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        validate_default=True,
    )


class TurnDetection(_SessionModel):
    """Server-side voice activity detection parameters."""

    type: str = "server_vad"
    threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    prefix_padding_ms: int = Field(default=300, ge=0)
    silence_duration_ms: int = Field(default=500, ge=0)


class ToolDeclaration(_SessionModel):
    """A function the remote model may call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["function"] = "function"
    name: str = Field(min_length=1)
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


class SessionConfig(_SessionModel):
    """Realtime session document.

    Unknown top-level keys are preserved (``extra="allow"``) so any field the
    service understands can be passed through a raw document override.
    """

    modalities: tuple[str, ...] = ("text", "audio")
    instructions: str = DEFAULT_INSTRUCTIONS
    voice: str = DEFAULT_VOICE
    input_audio_format: str = "pcm16"
    output_audio_format: str = "pcm16"
    turn_detection: TurnDetection = Field(default_factory=TurnDetection)
    input_audio_echo_cancellation: dict[str, Any] | None = Field(
        default_factory=lambda: {"type": "server_echo_cancellation"}
    )
    input_audio_noise_reduction: dict[str, Any] | None = Field(
        default_factory=lambda: {"type": "azure_deep_noise_suppression"}
    )
    input_audio_transcription: dict[str, Any] | None = Field(default_factory=lambda: {"model": "whisper-1"})
    tools: tuple[ToolDeclaration, ...] = ()

    @field_validator("tools")
    @classmethod
    def _unique_tool_names(cls, value: tuple[ToolDeclaration, ...]) -> tuple[ToolDeclaration, ...]:
        seen: set[str] = set()
        for tool in value:
            if tool.name in seen:
                raise ValueError(f"duplicate tool name {tool.name!r}")
            seen.add(tool.name)
        return value

    # ------------------------------------------------------------------
    # Parsing / serialisation
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> SessionConfig:
        """Parse a raw JSON document.

        Raises :class:`ConfigParseError` for invalid JSON, a non-object
        document, or values that fail validation.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigParseError(f"Session configuration is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigParseError(f"Session configuration must be a JSON object, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigParseError("Session configuration failed validation", errors=_format_errors(exc)) from exc

    def to_json(self, *, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent)

    def to_wire(self) -> dict[str, Any]:
        """Body of the ``session`` field in a ``session.update`` event."""
        return self.model_dump(mode="json", exclude_none=True)

    # ------------------------------------------------------------------
    # Field-level overrides
    # ------------------------------------------------------------------

    def with_tools(self, tools: tuple[ToolDeclaration, ...] | list[ToolDeclaration]) -> SessionConfig:
        return self._replace(tools=[tool.model_dump() for tool in tools])

    def with_overrides(
        self,
        *,
        voice: str | None = None,
        instructions: str | None = None,
        threshold: float | None = None,
    ) -> SessionConfig:
        """Return a copy with individual fields replaced.

        Raises :class:`ConfigParseError` when a value is out of range.
        """
        changes: dict[str, Any] = {}
        if voice is not None:
            changes["voice"] = voice
        if instructions is not None:
            changes["instructions"] = instructions
        if threshold is not None:
            changes["turn_detection"] = {**self.turn_detection.model_dump(), "threshold": threshold}
        return self._replace(**changes)

    def _replace(self, **changes: Any) -> SessionConfig:
        try:
            return type(self).model_validate({**self.model_dump(), **changes})
        except ValidationError as exc:
            raise ConfigParseError("Session configuration override rejected", errors=_format_errors(exc)) from exc
