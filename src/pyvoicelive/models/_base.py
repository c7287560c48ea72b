"""Base model and value coercion helpers for realtime protocol payloads.

Every inbound protocol model inherits from :class:`WireModel` which
provides:

* ``extra="ignore"`` so new server fields never break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used.
* A ``raw`` dict that captures the original payload.

Token counts use the :data:`TokenCount` annotated type which degrades
anything that is not a non-negative number to ``0``; usage telemetry must
never be able to fail a turn.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator


def coerce_token_count(value: Any) -> int:
    """Convert *value* to a non-negative ``int``; anything else becomes ``0``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, int(value))


def coerce_latency(value: Any) -> float | None:
    """Return a usable latency in milliseconds, or ``None`` when absent/invalid."""
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value < 0:
        return None
    return value


TokenCount = Annotated[int, BeforeValidator(coerce_token_count)]
"""Annotated type that degrades missing/malformed token counts to zero."""

LatencyMs = Annotated[float | None, BeforeValidator(coerce_latency)]
"""Annotated type for an optional, non-negative latency sample."""


def dig(payload: Any, *path: str) -> Any:
    """Walk nested mappings along *path*; return ``None`` when any hop is missing."""
    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


class WireModel(BaseModel):
    """Base for inbound realtime protocol models.

    Handles:
    * ``None`` values → dropped so the field default is used instead
    * Stashes the original event dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original event dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicitly supplied raw= (kwargs construction).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
