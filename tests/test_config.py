from __future__ import annotations

import pytest

from pyvoicelive.config import VoiceLiveConfig
from pyvoicelive.exceptions import ConfigParseError, ConfigurationError

_ENV_KEYS = (
    "VOICELIVE_ENDPOINT",
    "VOICELIVE_API_KEY",
    "VOICELIVE_API_VERSION",
    "VOICELIVE_MODEL_CATEGORY",
    "VOICELIVE_MODEL",
    "VOICELIVE_CONNECT_TIMEOUT",
    "VOICELIVE_DRIVE_TICK_INTERVAL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.mark.parametrize(
    ("endpoint", "expected_prefix"),
    [
        ("https://res.example.com", "wss://res.example.com/voice-live/realtime?"),
        ("https://res.example.com/", "wss://res.example.com/voice-live/realtime?"),
        ("http://localhost:8080", "ws://localhost:8080/voice-live/realtime?"),
        ("res.example.com", "wss://res.example.com/voice-live/realtime?"),
        ("wss://res.example.com", "wss://res.example.com/voice-live/realtime?"),
    ],
)
def test_realtime_url(endpoint: str, expected_prefix: str) -> None:
    url = VoiceLiveConfig(endpoint=endpoint, api_key="k").realtime_url()
    assert url.startswith(expected_prefix)
    assert url.endswith("api-version=2025-10-01&model=gpt-4o-realtime-preview")


def test_headers_carry_api_key() -> None:
    assert VoiceLiveConfig(endpoint="e", api_key="secret").headers() == {"api-key": "secret"}


@pytest.mark.parametrize(
    ("endpoint", "api_key", "missing"),
    [
        ("", "k", "endpoint"),
        ("https://res.example.com", "", "api_key"),
        ("   ", "k", "endpoint"),
    ],
)
def test_validate_connection_requires_endpoint_and_key(endpoint: str, api_key: str, missing: str) -> None:
    with pytest.raises(ConfigurationError, match=missing):
        VoiceLiveConfig(endpoint=endpoint, api_key=api_key).validate_connection()


def test_from_env(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("VOICELIVE_ENDPOINT", "https://res.example.com")
    clean_env.setenv("VOICELIVE_API_KEY", "from-env")
    clean_env.setenv("VOICELIVE_CONNECT_TIMEOUT", "3.5")

    config = VoiceLiveConfig.from_env(api_key="explicit")

    assert config.endpoint == "https://res.example.com"
    assert config.api_key == "explicit"
    assert config.connect_timeout == 3.5
    assert config.model_category == "LLM Realtime"


def test_from_env_category_implies_default_model(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("VOICELIVE_MODEL_CATEGORY", "ASR+LLM+TTS")
    config = VoiceLiveConfig.from_env()
    assert config.model == "gpt-4o"


def test_from_env_unknown_category(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("VOICELIVE_MODEL_CATEGORY", "Telepathy")
    with pytest.raises(ConfigurationError):
        VoiceLiveConfig.from_env()


def test_model_category_switch_resets_model() -> None:
    config = VoiceLiveConfig().with_model_category("LLM+TTS")
    assert config.model_category == "LLM+TTS"
    assert config.model == "gpt-4o-realtime-preview"

    config = config.with_model("phi-4-multimodal")
    assert config.model == "phi-4-multimodal"


def test_model_must_belong_to_category() -> None:
    with pytest.raises(ConfigurationError):
        VoiceLiveConfig().with_model("phi-4")
    with pytest.raises(ConfigurationError):
        VoiceLiveConfig().with_model_category("Telepathy")


def test_with_session_json_keeps_previous_on_failure() -> None:
    config = VoiceLiveConfig().with_session_overrides(voice="en-US-Custom")

    with pytest.raises(ConfigParseError):
        config.with_session_json("{not json")

    assert config.session.voice == "en-US-Custom"

    updated = config.with_session_json('{"voice": "en-GB-Other", "instructions": "Be brief."}')
    assert updated.session.voice == "en-GB-Other"
    assert updated.session.instructions == "Be brief."
    assert config.session.voice == "en-US-Custom"


@pytest.mark.parametrize("env_key", ["VOICELIVE_CONNECT_TIMEOUT", "VOICELIVE_DRIVE_TICK_INTERVAL"])
def test_from_env_rejects_non_numeric_seconds(clean_env: pytest.MonkeyPatch, env_key: str) -> None:
    clean_env.setenv(env_key, "soon")
    with pytest.raises(ConfigurationError, match=env_key):
        VoiceLiveConfig.from_env()


def test_from_env_explicit_seconds_skip_env(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("VOICELIVE_CONNECT_TIMEOUT", "soon")
    config = VoiceLiveConfig.from_env(connect_timeout=2.0)
    assert config.connect_timeout == 2.0
