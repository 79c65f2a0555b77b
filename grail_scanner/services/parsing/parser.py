"""
Structured extraction of an authentication report from the model's free text.

Extraction is best-effort: every field has a documented default, so the
result is always fully populated even when the model ignores the requested
output format.
"""

import logging
import re
import time
from collections.abc import Sequence

from grail_scanner.config.constants import DemandLevel, ItemCategory, MarketTrend
from grail_scanner.orchestrator.models import AuthenticationResult, BrandEra, clamp_confidence
from grail_scanner.services.forensics.models import (
    AnyToolResult,
    BrandPatternResult,
    DateForensicsResult,
    EstimatedValue,
    MarketSearchResult,
    RNLookupResult,
)
from grail_scanner.utils.text_processing import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 50
DEFAULT_BRAND = "Unknown"
DEFAULT_ERA = "Unknown era"
DEFAULT_YEAR_RANGE = (1970, 2000)
DETAILS_PREVIEW_CHARS = 500
BRAND_ERA_MARKER_LIMIT = 5

_CONFIDENCE_PATTERNS = (
    re.compile(r"confidence[:\s]*(\d{1,3})%", re.IGNORECASE),
    re.compile(r"(\d{1,3})%\s*confident", re.IGNORECASE),
    re.compile(r"score[:\s]*(\d{1,3})", re.IGNORECASE),
)

_POSITIVE = re.compile(r"\b(authentic|genuine|real|verified|legitimate)\b", re.IGNORECASE)
_NEGATIVE = re.compile(
    r"\b(not authentic|not genuine|fake|counterfeit|replica|reproduction)\b", re.IGNORECASE
)

_BRAND = re.compile(r"brand[:\s]*([A-Za-z\s&]+?)(?:\n|,|\.|;)", re.IGNORECASE)

_ERA_LABELLED = re.compile(
    r"(?:era|period|decade|year)[:\s]*([0-9]{4}s?(?:\s*[-–]\s*[0-9]{4}s?)?)", re.IGNORECASE
)
_ERA_QUALIFIED = re.compile(r"(?:early|mid|late)\s+[0-9]{4}s", re.IGNORECASE)
_YEAR_RANGE = re.compile(r"(\d{4})\s*[-–]\s*(\d{4})")

_CATEGORY = re.compile(r"category[:\s]*([A-Za-z]+)", re.IGNORECASE)

_RED_FLAG_SECTION = re.compile(r"red flags?[:\s]*(.*?)(?:\n\s*\n|\Z)", re.IGNORECASE | re.DOTALL)
_MARKER_SECTION = re.compile(
    r"(?:verified|authentication)\s*markers?[:\s]*(.*?)(?:\n\s*\n|\Z)", re.IGNORECASE | re.DOTALL
)
_BULLET = re.compile(r"^[ \t]*[-•*][ \t]*(.+?)[ \t]*$", re.MULTILINE)

_PRICE_RANGE = re.compile(r"\$(\d+(?:,\d{3})*)\s*[-–]\s*\$(\d+(?:,\d{3})*)")


def find_confidence(text: str) -> int | None:
    """First confidence pattern that matches, clamped to [0, 100]; None when absent."""
    for pattern in _CONFIDENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            return clamp_confidence(match.group(1))
    return None


def extract_confidence(text: str) -> int:
    confidence = find_confidence(text)
    return DEFAULT_CONFIDENCE if confidence is None else confidence


def extract_is_authentic(text: str) -> bool:
    """Positive verdict anywhere and no negative term anywhere in the text.

    The check is document-wide: a single "replica" mentioned in passing
    overrides any number of positive statements.
    """
    return bool(_POSITIVE.search(text)) and not _NEGATIVE.search(text)


def extract_brand(text: str) -> str:
    match = _BRAND.search(text)
    brand = match.group(1).strip() if match else ""
    return brand or DEFAULT_BRAND


def extract_era(text: str) -> str:
    """Labelled era value, else an "early/mid/late YYYYs" phrase, else a bare year range."""
    match = _ERA_LABELLED.search(text)
    if match:
        return match.group(1).strip()
    match = _ERA_QUALIFIED.search(text) or _YEAR_RANGE.search(text)
    if match:
        return match.group(0).strip()
    return DEFAULT_ERA


def extract_year_range(text: str) -> tuple[int, int]:
    match = _YEAR_RANGE.search(text)
    if match:
        return int(match.group(1)), int(match.group(2))
    return DEFAULT_YEAR_RANGE


def extract_category(text: str) -> ItemCategory:
    """First ``category: <word>`` naming a known category; unknown otherwise."""
    known = {c.value for c in ItemCategory}
    for match in _CATEGORY.finditer(text):
        word = match.group(1).lower()
        if word in known:
            return ItemCategory(word)
    return ItemCategory.UNKNOWN


def extract_bullets(section: str) -> list[str]:
    """Bullet lines (``-``, ``•``, ``*``) of a section, trimmed, in order."""
    return [item for item in _BULLET.findall(section) if item]


def extract_red_flags(text: str) -> list[str]:
    match = _RED_FLAG_SECTION.search(text)
    return extract_bullets(match.group(1)) if match else []


def extract_verified_markers(text: str) -> list[str]:
    match = _MARKER_SECTION.search(text)
    return extract_bullets(match.group(1)) if match else []


def extract_price_range(text: str) -> tuple[int, int]:
    match = _PRICE_RANGE.search(text)
    if not match:
        return 0, 0
    return int(match.group(1).replace(",", "")), int(match.group(2).replace(",", ""))


def parse_authentication_response(text: str, start_time: float) -> AuthenticationResult:
    """
    Parse the model's final answer into a complete AuthenticationResult.

    Args:
        text: Final natural-language answer of the model
        start_time: ``time.time()`` at the start of the run

    Returns:
        AuthenticationResult with every field populated
    """
    text = text or ""
    confidence = extract_confidence(text)
    is_authentic = extract_is_authentic(text)
    brand = extract_brand(text)
    era = extract_era(text)
    year_range = extract_year_range(text)
    red_flags = extract_red_flags(text)
    verified_markers = extract_verified_markers(text)
    low, high = extract_price_range(text)

    logger.debug(
        "Parsed response: confidence=%s authentic=%s brand=%s era=%s flags=%d markers=%d",
        confidence, is_authentic, brand, era, len(red_flags), len(verified_markers),
    )

    now = time.time()
    return AuthenticationResult(
        is_authentic=is_authentic,
        confidence=confidence,
        category=extract_category(text),
        brand_era=BrandEra(
            brand=brand,
            era=era,
            year_range=year_range,
            confidence=confidence / 100,
            markers=verified_markers[:BRAND_ERA_MARKER_LIMIT],
        ),
        rn_lookup=None,
        brand_pattern=BrandPatternResult(
            brand=brand,
            era=era,
            authenticity_score=confidence,
            matched_patterns=verified_markers,
            red_flags=red_flags,
            details=text[:DETAILS_PREVIEW_CHARS],
        ),
        date_forensics=DateForensicsResult(
            estimated_era=era,
            year_range=year_range,
            confidence=confidence / 100,
            evidence=verified_markers,
            construction_details=[],
            material_analysis="",
        ),
        market_data=MarketSearchResult(
            estimated_value=EstimatedValue(
                low=low, mid=round_half_up((low + high) / 2), high=high
            ),
            comparable_sales=[],
            market_trend=MarketTrend.STABLE,
            demand_level=DemandLevel.HIGH if confidence > 75 else DemandLevel.MODERATE,
        ),
        reasoning=text,
        red_flags=red_flags,
        verified_markers=verified_markers,
        thinking_output=text,
        timestamp=int(now * 1000),
        processing_time=max(0, int((now - start_time) * 1000)),
    )


def merge_tool_results(
    result: AuthenticationResult, tool_results: Sequence[AnyToolResult]
) -> AuthenticationResult:
    """Attach the tool outputs of the run; parsed fields are left untouched."""
    if not tool_results:
        return result
    rn_results = [r for r in tool_results if isinstance(r, RNLookupResult)]
    return result.model_copy(
        update={
            "tool_results": list(tool_results),
            "rn_lookup": rn_results[-1] if rn_results else result.rn_lookup,
        }
    )
