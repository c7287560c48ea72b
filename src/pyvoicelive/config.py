"""Client configuration for pyvoicelive."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from urllib.parse import urlencode, urlsplit

from pyvoicelive._constants import (
    API_KEY_HEADER,
    DEFAULT_API_VERSION,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DRIVE_TICK_INTERVAL,
    DEFAULT_MODEL,
    DEFAULT_MODEL_CATEGORY,
    MODEL_CATEGORIES,
    REALTIME_PATH,
    default_model_for,
)
from pyvoicelive.exceptions import ConfigurationError
from pyvoicelive.models.session_config import SessionConfig


@dataclasses.dataclass(frozen=True)
class VoiceLiveConfig:
    """Connection configuration.

    Parameters
    ----------
    endpoint : str
        Resource endpoint, e.g. ``"https://my-resource.cognitiveservices.azure.com"``.
        ``https``/``http`` schemes are mapped to ``wss``/``ws``.
    api_key : str
        Resource API key, sent as the ``api-key`` header.
    api_version : str
        Realtime API version query parameter.
    model_category : str
        One of ``"LLM Realtime"``, ``"LLM+TTS"``, ``"ASR+LLM+TTS"``.
    model : str
        Model identifier sent as the ``model`` query parameter.
    session : SessionConfig
        Session document sent with ``session.update`` after connecting.
    connect_timeout : float
        Seconds to wait for the channel handshake before giving up.
    drive_tick_interval : float
        Seconds between drive-cycle simulation ticks.
    """

    endpoint: str = ""
    api_key: str = ""
    api_version: str = DEFAULT_API_VERSION
    model_category: str = DEFAULT_MODEL_CATEGORY
    model: str = DEFAULT_MODEL
    session: SessionConfig = dataclasses.field(default_factory=SessionConfig)
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    drive_tick_interval: float = DEFAULT_DRIVE_TICK_INTERVAL

    def validate_connection(self) -> None:
        """Raise :class:`ConfigurationError` when required connection fields are empty."""
        missing = [name for name in ("endpoint", "api_key") if not getattr(self, name).strip()]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    def realtime_url(self) -> str:
        """WebSocket URL of the realtime endpoint."""
        raw = self.endpoint.strip().rstrip("/")
        if "://" not in raw:
            raw = f"https://{raw}"
        parts = urlsplit(raw)
        scheme = {"https": "wss", "http": "ws"}.get(parts.scheme, parts.scheme)
        query = urlencode({"api-version": self.api_version, "model": self.model})
        return f"{scheme}://{parts.netloc}{parts.path}{REALTIME_PATH}?{query}"

    def headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key}

    # ------------------------------------------------------------------
    # Overrides (each returns a new config; self is never modified)
    # ------------------------------------------------------------------

    def with_model_category(self, category: str) -> VoiceLiveConfig:
        """Switch category and reset the model to the category default."""
        try:
            model = default_model_for(category)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return dataclasses.replace(self, model_category=category, model=model)

    def with_model(self, model: str) -> VoiceLiveConfig:
        allowed = MODEL_CATEGORIES.get(self.model_category, ())
        if model not in allowed:
            raise ConfigurationError(f"Model {model!r} is not available for category {self.model_category!r}")
        return dataclasses.replace(self, model=model)

    def with_session_json(self, text: str) -> VoiceLiveConfig:
        """Replace the whole session document from raw JSON.

        Raises :class:`~pyvoicelive.exceptions.ConfigParseError`; the current
        configuration remains valid and unchanged.
        """
        return dataclasses.replace(self, session=SessionConfig.parse(text))

    def with_session_overrides(
        self,
        *,
        voice: str | None = None,
        instructions: str | None = None,
        threshold: float | None = None,
    ) -> VoiceLiveConfig:
        session = self.session.with_overrides(voice=voice, instructions=instructions, threshold=threshold)
        return dataclasses.replace(self, session=session)

    @classmethod
    def from_env(cls, **overrides: Any) -> VoiceLiveConfig:
        """Create configuration from environment variables.

        Reads ``VOICELIVE_ENDPOINT``, ``VOICELIVE_API_KEY`` and optional
        ``VOICELIVE_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        VoiceLiveConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VOICELIVE_ENDPOINT": "endpoint",
            "VOICELIVE_API_KEY": "api_key",
            "VOICELIVE_API_VERSION": "api_version",
            "VOICELIVE_MODEL_CATEGORY": "model_category",
            "VOICELIVE_MODEL": "model",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # A category without an explicit model implies the category default.
        if "model_category" in config_kwargs and "model" not in config_kwargs:
            try:
                config_kwargs["model"] = default_model_for(config_kwargs["model_category"])
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc

        _ENV_SECONDS_MAP = {
            "VOICELIVE_CONNECT_TIMEOUT": "connect_timeout",
            "VOICELIVE_DRIVE_TICK_INTERVAL": "drive_tick_interval",
        }
        for env_key, field_name in _ENV_SECONDS_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise ConfigurationError(f"{env_key} must be a number of seconds, got {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
