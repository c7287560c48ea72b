"""Usage samples and cumulative session metrics."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyvoicelive.models._base import LatencyMs, TokenCount, coerce_token_count, dig


def _first_count(usage: Mapping[str, Any], *paths: tuple[str, ...]) -> int:
    """Return the first non-zero count found along *paths* (``or``-chain semantics)."""
    for path in paths:
        count = coerce_token_count(dig(usage, *path))
        if count:
            return count
    return 0


class UsageSample(BaseModel):
    """Token usage and latency reported for one completed turn."""

    model_config = ConfigDict(frozen=True)

    input_text: TokenCount = 0
    input_audio: TokenCount = 0
    output_text: TokenCount = 0
    output_audio: TokenCount = 0
    cached: TokenCount = 0
    """Combined cache count (creation, falling back to read)."""
    cached_text: TokenCount = 0
    cached_audio: TokenCount = 0
    total: TokenCount = 0
    latency_ms: LatencyMs = None

    @classmethod
    def from_usage(cls, usage: Any, *, latency: Any = None) -> UsageSample:
        """Build a sample from a ``response.usage`` block.

        Accepts both the ``input_tokens: {text, audio}`` shape and the
        ``input_tokens: <int>, input_token_details: {...}`` shape.
        Missing or malformed fields degrade to ``0``.
        """
        if not isinstance(usage, Mapping):
            usage = {}
        return cls(
            input_text=_first_count(usage, ("input_tokens", "text"), ("input_token_details", "text_tokens")),
            input_audio=_first_count(usage, ("input_tokens", "audio"), ("input_token_details", "audio_tokens")),
            output_text=_first_count(usage, ("output_tokens", "text"), ("output_token_details", "text_tokens")),
            output_audio=_first_count(usage, ("output_tokens", "audio"), ("output_token_details", "audio_tokens")),
            cached=_first_count(usage, ("cache_creation_input_tokens",), ("cache_read_input_tokens",)),
            cached_text=_first_count(usage, ("input_token_details", "cached_tokens_details", "text_tokens")),
            cached_audio=_first_count(usage, ("input_token_details", "cached_tokens_details", "audio_tokens")),
            total=usage.get("total_tokens"),
            latency_ms=latency,
        )

    @classmethod
    def from_response_done(cls, event: Mapping[str, Any]) -> UsageSample | None:
        """Extract a sample from a ``response.done`` event, or ``None`` without usage."""
        usage = dig(event, "response", "usage")
        if not isinstance(usage, Mapping):
            return None
        return cls.from_usage(usage, latency=event.get("latency"))


class TokenCounters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    input_text: int = 0
    input_audio: int = 0
    output_text: int = 0
    output_audio: int = 0
    cached: int = 0
    cached_text: int = 0
    cached_audio: int = 0
    total: int = 0


class LatencyStats(BaseModel):
    model_config = ConfigDict(extra="forbid")

    values: list[float] = Field(default_factory=list)
    min: float = 0
    avg: int = 0
    max: float = 0
    p90: float = 0


class Metrics(BaseModel):
    """Cumulative usage for the lifetime of the process."""

    model_config = ConfigDict(extra="forbid")

    tokens: TokenCounters = Field(default_factory=TokenCounters)
    latency: LatencyStats = Field(default_factory=LatencyStats)
    turns: int = 0
