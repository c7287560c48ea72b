"""Helpers for safe debug logging.

Realtime frames carry API keys in connection headers and large base64 audio
chunks in ``delta`` / ``audio`` fields. :func:`redact_for_log` masks the
former and collapses the latter to their length before a frame reaches a
DEBUG log.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MAX_DEPTH = 20

_SECRET_KEYS: frozenset[str] = frozenset({"api-key", "api_key", "apikey", "authorization", "token"})
_AUDIO_KEYS: frozenset[str] = frozenset({"audio", "delta"})


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}…<truncated>"


def _redact_entry(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS:
        return "<redacted>"
    if lowered in _AUDIO_KEYS and isinstance(value, str):
        return f"<{len(value)} chars>"
    return redact_for_log(value, max_string=max_string, _depth=depth)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _shorten(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {str(k): _redact_entry(str(k), v, max_string, _depth + 1) for k, v in value.items()}
    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
