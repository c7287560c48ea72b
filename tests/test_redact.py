from __future__ import annotations

from pyvoicelive._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "type": "session.update",
        "api-key": "secret",
        "headers": {"Authorization": "Bearer abc", "api_key": "k2"},
        "session": {"voice": "en-US-Ava:DragonHDLatestNeural"},
    }

    redacted = redact_for_log(payload)
    assert redacted["api-key"] == "<redacted>"
    assert redacted["headers"]["Authorization"] == "<redacted>"
    assert redacted["headers"]["api_key"] == "<redacted>"
    assert redacted["session"]["voice"] == "en-US-Ava:DragonHDLatestNeural"
    # Input is not modified.
    assert payload["api-key"] == "secret"


def test_redact_for_log_shortens_audio_chunks() -> None:
    redacted = redact_for_log({"type": "response.audio.delta", "delta": "A" * 4000, "item_id": "item_1"})
    assert redacted["delta"] == "<4000 chars>"
    assert redacted["item_id"] == "item_1"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_handles_sequences() -> None:
    redacted = redact_for_log([{"token": "t"}, 3, None, b"\x00\x01"])
    assert redacted == [{"token": "<redacted>"}, 3, None, "<bytes:2b>"]


def test_redact_for_log_caps_depth() -> None:
    nested: dict = {}
    current = nested
    for _ in range(30):
        current["next"] = {}
        current = current["next"]

    redacted = redact_for_log(nested)
    for _ in range(21):
        redacted = redacted["next"]
    assert redacted == "<max-depth>"
