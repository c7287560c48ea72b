from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from pyvoicelive.models.telemetry import Metrics, TokenCounters
from pyvoicelive.telemetry.export import cache_rate, calculator_params, calculator_url, statistics_params


def _metrics() -> Metrics:
    return Metrics(
        tokens=TokenCounters(
            input_text=200,
            input_audio=400,
            output_text=50,
            output_audio=600,
            cached=300,
            cached_text=50,
            cached_audio=100,
            total=1250,
        ),
        turns=4,
    )


def test_cache_rate_zero_input() -> None:
    assert cache_rate(10, 0) == 0.0


def test_calculator_params_use_per_modality_cache() -> None:
    params = calculator_params(_metrics(), model="gpt-4o-realtime-preview")
    assert params["turns"] == "4"
    assert params["inputAudio"] == "400"
    assert params["outputAudio"] == "600"
    assert params["inputText"] == "200"
    assert params["model"] == "gpt-4o-realtime-preview"
    # cached_text / input_text, cached_audio / input_audio (not the combined counter)
    assert params["textCache"] == "25"
    assert params["audioCache"] == "25"
    assert params["dau"] == "1"
    assert params["tts"] == "neural"


def test_statistics_params_one_decimal() -> None:
    metrics = _metrics()
    metrics.tokens.cached_text = 1
    metrics.tokens.input_text = 3
    params = statistics_params(metrics)
    assert params["text_cache_rate"] == "33.3"
    assert params["audio_cache_rate"] == "25.0"
    assert params["output_text_tokens"] == "50"


def test_statistics_params_empty_metrics() -> None:
    params = statistics_params(Metrics())
    assert params["text_cache_rate"] == "0.0"
    assert params["audio_cache_rate"] == "0.0"


def test_calculator_url_encodes_params() -> None:
    url = calculator_url({"model": "gpt-4o", "turns": "2"}, base_url="https://example.test/calc/")
    parts = urlsplit(url)
    assert parts.netloc == "example.test"
    assert parse_qs(parts.query) == {"model": ["gpt-4o"], "turns": ["2"]}
