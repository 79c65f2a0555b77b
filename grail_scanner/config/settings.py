"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from grail_scanner.config.constants import (
    DEFAULT_MAX_TOOL_ROUNDS,
    DEFAULT_SELF_CORRECTION_THRESHOLD,
    MediaResolution,
    ThinkingLevel,
)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Grail Scanner"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-pro-preview"
    thinking_level: ThinkingLevel = ThinkingLevel.HIGH
    media_resolution: MediaResolution = MediaResolution.HIGH
    gemini_timeout_ms: int = 120_000

    # Authentication loop
    max_retries: int = 2
    self_correction_threshold: float = DEFAULT_SELF_CORRECTION_THRESHOLD
    max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS

    # Uploads
    max_image_bytes: int = 10 * 1024 * 1024

    # CORS
    allowed_origins: list[str] = ["*"]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @field_validator("thinking_level", "media_resolution", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_loop_bounds(self) -> "Settings":
        if not 0.0 <= self.self_correction_threshold <= 1.0:
            raise ValueError(
                f"self_correction_threshold must be within [0, 1], got {self.self_correction_threshold}"
            )
        if self.max_tool_rounds <= 0:
            raise ValueError(f"max_tool_rounds must be positive, got {self.max_tool_rounds}")
        for field_name in ("gemini_timeout_ms", "max_image_bytes"):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*'], consider restricting in production"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def is_gemini_configured(settings: Settings | None = None) -> bool:
    """Check whether a Gemini credential is available."""
    return bool((settings or get_settings()).gemini_api_key)
