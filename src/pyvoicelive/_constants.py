"""Internal constants shared across the library."""

DEFAULT_API_VERSION = "2025-10-01"
REALTIME_PATH = "/voice-live/realtime"
API_KEY_HEADER = "api-key"
DEFAULT_CONNECT_TIMEOUT = 15.0

# ------------------------------------------------------------------
# Model categories  (category → allowed models, first is the default)
# ------------------------------------------------------------------

MODEL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "LLM Realtime": (
        "gpt-4o-realtime-preview",
        "gpt-4o-mini-realtime-preview",
    ),
    "LLM+TTS": (
        "gpt-4o-realtime-preview",
        "gpt-4o-mini-realtime-preview",
        "phi-4-multimodal",
    ),
    "ASR+LLM+TTS": (
        "gpt-4o",
        "gpt-4.1",
        "gpt-4.5",
        "gpt-4o-mini",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "phi-4",
    ),
}
DEFAULT_MODEL_CATEGORY = "LLM Realtime"
DEFAULT_MODEL = MODEL_CATEGORIES[DEFAULT_MODEL_CATEGORY][0]


def default_model_for(category: str) -> str:
    """Return the default model for a model category.

    Raises :class:`ValueError` for unknown categories.
    """
    models = MODEL_CATEGORIES.get(category)
    if not models:
        raise ValueError(f"model category must be one of {tuple(MODEL_CATEGORIES)}, got {category!r}")
    return models[0]


# ------------------------------------------------------------------
# Drive-cycle simulation
# ------------------------------------------------------------------

# Federal Test Procedure: 505 s cold start + 864 s transient phase.
FTP_COLD_START_SECONDS = 505
FTP_TRANSIENT_SECONDS = 864
FTP_CYCLE_DURATION = FTP_COLD_START_SECONDS + FTP_TRANSIENT_SECONDS
DEFAULT_DRIVE_TICK_INTERVAL = 0.5
RANGE_KM_PER_BATTERY_PERCENT = 3.1  # ~310 km at 100 %

# ------------------------------------------------------------------
# Metrics export
# ------------------------------------------------------------------

CALCULATOR_URL = "https://novaaidesigner.github.io/azure-voice-live-calculator/"
