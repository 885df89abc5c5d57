"""Centralised, env-driven configuration using pydantic-settings.

Bad values never raise: every tunable silently degrades to its default so
the service stays available with a safe configuration.
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_PORT = "3000"
DEFAULT_MAX_CHAR_PROCESS = 1000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DETECTOR_BACKEND = "lingua"


class Settings(BaseSettings):
    """All tunables are loaded from environment variables (or .env file)."""

    # ── Listener ────────────────────────────────────────────────────────────
    port: str = Field(default=DEFAULT_PORT, alias="PORT")

    # ── Request cost bound (code points fed to the detector) ───────────────
    max_char_process: int = Field(
        default=DEFAULT_MAX_CHAR_PROCESS, alias="MAX_CHAR_PROCESS"
    )

    # ── Detection backend ───────────────────────────────────────────────────
    detector_backend: str = Field(
        default=DEFAULT_DETECTOR_BACKEND, alias="DETECTOR_BACKEND"
    )

    # ── Logging ─────────────────────────────────────────────────────────────
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="LOG_LEVEL")
    detection_log_path: str = Field(default="", alias="DETECTION_LOG_PATH")

    model_config = {
        "env_file": ".env",
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("port", mode="before")
    @classmethod
    def _normalise_port(cls, value: object) -> str:
        port = str(value).strip() if value is not None else ""
        if not port:
            port = DEFAULT_PORT
        if not port.startswith(":"):
            port = ":" + port
        return port

    @field_validator("max_char_process", mode="before")
    @classmethod
    def _positive_or_default(cls, value: object) -> int:
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_MAX_CHAR_PROCESS
        return parsed if parsed > 0 else DEFAULT_MAX_CHAR_PROCESS

    @field_validator("detector_backend", mode="before")
    @classmethod
    def _lower_backend(cls, value: object) -> str:
        backend = str(value or "").strip().lower()
        return backend or DEFAULT_DETECTOR_BACKEND

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_level_or_default(cls, value: object) -> str:
        level = str(value or "").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            return DEFAULT_LOG_LEVEL
        return level

    @property
    def bind_port(self) -> int:
        """Return the TCP port for the listener.

        Raises ``ValueError`` when ``PORT`` is not numeric; the lifecycle
        manager treats that as a fatal startup error.
        """
        return int(self.port.lstrip(":"))


def load_settings() -> Settings:
    """Resolve settings from the environment.  Called once at startup."""
    return Settings()
