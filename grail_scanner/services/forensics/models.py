"""Forensic tool models: tool calls and the four tool result shapes."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from grail_scanner.config.constants import DemandLevel, MarketTrend, RNStatus


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    args: dict[str, str] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def coerce_args(cls, v: Any) -> dict[str, str]:
        """Model-issued arguments may be numbers or booleans; tools only read strings."""
        if not v:
            return {}
        return {str(k): "" if value is None else str(value) for k, value in dict(v).items()}


class RNLookupResult(BaseModel):
    """RN/WPL registration lookup."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rn_lookup"] = "rn_lookup"
    rn_number: str
    company_name: str
    registration_year: int | None = None
    calculated_year: int | None = None
    status: RNStatus
    formula: str


class BrandPatternResult(BaseModel):
    """Brand pattern verification."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["brand_patterns"] = "brand_patterns"
    brand: str
    era: str
    authenticity_score: int = Field(ge=0, le=100)
    matched_patterns: list[str] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    details: str = ""


class DateForensicsResult(BaseModel):
    """Construction dating estimate."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["date_forensics"] = "date_forensics"
    estimated_era: str
    year_range: tuple[int, int]
    confidence: float = Field(ge=0.0, le=1.0)
    evidence: list[str] = Field(default_factory=list)
    construction_details: list[str] = Field(default_factory=list)
    material_analysis: str = ""


class EstimatedValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: int
    mid: int
    high: int
    currency: str = "USD"


class ComparableSale(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    price: int
    platform: str
    date: str
    condition: str


class MarketSearchResult(BaseModel):
    """Market price estimate with comparable sales."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["market_search"] = "market_search"
    estimated_value: EstimatedValue
    comparable_sales: list[ComparableSale] = Field(default_factory=list)
    market_trend: MarketTrend = MarketTrend.STABLE
    demand_level: DemandLevel = DemandLevel.MODERATE


AnyToolResult = Union[RNLookupResult, BrandPatternResult, DateForensicsResult, MarketSearchResult]

ToolResult = Annotated[AnyToolResult, Field(discriminator="kind")]
