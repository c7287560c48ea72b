"""Read-only projections of :class:`Metrics` for the external cost calculator.

Cache-hit percentages divide the per-modality cached counters
(``cached_text`` / ``cached_audio``) by the matching input counter. The
combined ``cached`` counter is not split by modality and is not used here.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from pyvoicelive._constants import CALCULATOR_URL
from pyvoicelive.models.telemetry import Metrics
from pyvoicelive.telemetry.aggregator import round_half_up


def cache_rate(cached: int, total_input: int) -> float:
    """Cached share of *total_input* in percent (``0.0`` when there was no input)."""
    if total_input <= 0:
        return 0.0
    return cached / total_input * 100


def calculator_params(metrics: Metrics, *, model: str) -> dict[str, str]:
    """Query parameters for the session-summary export."""
    tokens = metrics.tokens
    return {
        "dau": "1",
        "turns": str(metrics.turns),
        "inputAudio": str(tokens.input_audio),
        "outputAudio": str(tokens.output_audio),
        "inputText": str(tokens.input_text),
        "model": model,
        "avatar": "none",
        "textCache": str(round_half_up(cache_rate(tokens.cached_text, tokens.input_text))),
        "audioCache": str(round_half_up(cache_rate(tokens.cached_audio, tokens.input_audio))),
        "tts": "neural",
    }


def statistics_params(metrics: Metrics) -> dict[str, str]:
    """Query parameters for the detailed statistics export."""
    tokens = metrics.tokens
    return {
        "input_text_tokens": str(tokens.input_text),
        "input_audio_tokens": str(tokens.input_audio),
        "output_text_tokens": str(tokens.output_text),
        "output_audio_tokens": str(tokens.output_audio),
        "text_cache_rate": f"{cache_rate(tokens.cached_text, tokens.input_text):.1f}",
        "audio_cache_rate": f"{cache_rate(tokens.cached_audio, tokens.input_audio):.1f}",
    }


def calculator_url(params: dict[str, Any], *, base_url: str = CALCULATOR_URL) -> str:
    return f"{base_url}?{urlencode(params)}"
