"""Authentication request, progress, and result models."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from grail_scanner.config.constants import (
    TOTAL_SCAN_STEPS,
    ConfidenceLevel,
    ItemCategory,
    MediaResolution,
    ScanStatus,
    ThinkingLevel,
)
from grail_scanner.config.settings import Settings
from grail_scanner.services.forensics.models import (
    BrandPatternResult,
    DateForensicsResult,
    MarketSearchResult,
    RNLookupResult,
    ToolResult,
)


def get_confidence_level(score: int) -> ConfidenceLevel:
    """Map a 0-100 confidence score to its level."""
    if score >= 90:
        return ConfidenceLevel.VERY_HIGH
    if score >= 75:
        return ConfidenceLevel.HIGH
    if score >= 55:
        return ConfidenceLevel.MODERATE
    if score >= 35:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.UNCERTAIN


def clamp_confidence(value: Any) -> int:
    return max(0, min(100, int(value)))


class AuthenticationConfig(BaseModel):
    """Configuration snapshot for one authentication run."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", repr=False)
    model: str
    thinking_level: ThinkingLevel = ThinkingLevel.HIGH
    media_resolution: MediaResolution = MediaResolution.HIGH
    max_retries: int = 2
    """Reserved; the authentication loop does not retry on its own."""

    self_correction_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    max_tool_rounds: int = Field(default=8, gt=0)
    timeout_ms: int = Field(default=120_000, gt=0)

    @classmethod
    def from_settings(
        cls, settings: Settings, overrides: Mapping[str, Any] | None = None
    ) -> "AuthenticationConfig":
        """Merge per-call overrides (``None`` values ignored) onto the settings defaults."""
        values: dict[str, Any] = {
            "api_key": settings.gemini_api_key,
            "model": settings.gemini_model,
            "thinking_level": settings.thinking_level,
            "media_resolution": settings.media_resolution,
            "max_retries": settings.max_retries,
            "self_correction_threshold": settings.self_correction_threshold,
            "max_tool_rounds": settings.max_tool_rounds,
            "timeout_ms": settings.gemini_timeout_ms,
        }
        values.update({k: v for k, v in (overrides or {}).items() if v is not None})
        return cls(**values)


class ScanProgress(BaseModel):
    """Status snapshot emitted while a scan runs."""

    model_config = ConfigDict(frozen=True)

    status: ScanStatus
    message: str
    step: int
    total_steps: int = TOTAL_SCAN_STEPS
    tool_name: str | None = None
    tool_result: str | None = None


class BrandEra(BaseModel):
    """Brand and era identification."""

    model_config = ConfigDict(frozen=True)

    brand: str
    era: str
    year_range: tuple[int, int]
    confidence: float
    markers: list[str] = Field(default_factory=list)


class AuthenticationResult(BaseModel):
    """Complete authentication report. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    is_authentic: bool
    confidence: int
    category: ItemCategory = ItemCategory.UNKNOWN
    brand_era: BrandEra
    rn_lookup: RNLookupResult | None = None
    brand_pattern: BrandPatternResult
    date_forensics: DateForensicsResult
    market_data: MarketSearchResult
    reasoning: str
    red_flags: list[str] = Field(default_factory=list)
    verified_markers: list[str] = Field(default_factory=list)
    thinking_output: str | None = None
    tool_results: list[ToolResult] = Field(default_factory=list)
    self_corrected: bool = False
    timestamp: int
    """Epoch milliseconds at creation."""

    processing_time: int
    """Milliseconds since the run started."""

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> int:
        return clamp_confidence(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def confidence_level(self) -> ConfidenceLevel:
        return get_confidence_level(self.confidence)
