"""Deterministic forensic tools callable by the model.

Every tool is a pure function of its string arguments and the static tables
in ``data``. ``market_search`` draws random perturbations for its comparable
sales; pass ``rng`` to make it reproducible.
"""

import logging
import random
import re
from datetime import date, timedelta
from typing import Mapping

from grail_scanner.config.constants import DemandLevel, MarketTrend, RNStatus
from grail_scanner.services.forensics import data
from grail_scanner.services.forensics.models import (
    BrandPatternResult,
    ComparableSale,
    DateForensicsResult,
    EstimatedValue,
    MarketSearchResult,
    RNLookupResult,
)
from grail_scanner.utils.text_processing import normalize_key, round_half_up, split_csv

logger = logging.getLogger(__name__)


# ==========================================
#  RN / WPL LOOKUP
# ==========================================


def calculate_rn_year(rn_number: int) -> int | None:
    """Estimate the registration year of an RN number; None for the pre-1960 series."""
    if rn_number < data.RN_FORMULA_BASE:
        return None
    return round_half_up(
        (rn_number - data.RN_FORMULA_BASE) / data.RN_FORMULA_STEP + data.RN_FORMULA_YEAR
    )


def rn_lookup(rn_number: str = "") -> RNLookupResult:
    """Identify the manufacturer behind an RN/WPL number."""
    cleaned = re.sub(r"[^0-9]", "", rn_number)
    if not cleaned:
        return RNLookupResult(
            rn_number=rn_number,
            company_name="Invalid RN number",
            status=RNStatus.NOT_FOUND,
            formula="N/A",
        )

    number = int(cleaned)
    known = data.RN_DATABASE.get(cleaned)
    calculated_year = calculate_rn_year(number)

    if known is not None or calculated_year is not None:
        status = RNStatus.ACTIVE
    else:
        status = RNStatus.NOT_FOUND

    return RNLookupResult(
        rn_number=f"RN {cleaned}",
        company_name=known.company if known else f"Unknown (RN {cleaned})",
        registration_year=known.year if known else None,
        calculated_year=calculated_year,
        status=status,
        formula=(
            f"({number} - {data.RN_FORMULA_BASE}) / {data.RN_FORMULA_STEP} + {data.RN_FORMULA_YEAR}"
            f" = {calculated_year if calculated_year is not None else 'N/A'}"
        ),
    )


# ==========================================
#  BRAND PATTERN VERIFICATION
# ==========================================


def _select_era(eras: Mapping[str, data.EraPatterns], era: str) -> str:
    """Pick the first era key whose decade digits appear in ``era``, else the latest key."""
    keys = list(eras)
    for key in keys:
        if key.replace("s", "", 1) in era:
            return key
    return keys[-1]


def _matches_any(known: str, observed: list[str]) -> bool:
    prefix = known.lower()[: data.PATTERN_PREFIX_CHARS]
    return any(prefix in marker.lower() for marker in observed)


def brand_patterns(brand: str = "", era: str = "", markers: str = "") -> BrandPatternResult:
    """Score observed markers against the authentic and red-flag patterns of a brand era."""
    brand_key = normalize_key(brand)
    era = era.strip()
    observed = split_csv(markers)

    eras = data.BRAND_PATTERNS.get(brand_key)
    if eras is None:
        return BrandPatternResult(
            brand=brand or "Unknown",
            era=era,
            authenticity_score=data.UNKNOWN_BRAND_SCORE,
            matched_patterns=[],
            red_flags=["Brand not in database - manual verification required"],
            details=f'Brand "{brand}" not found in forensic database. Manual authentication recommended.',
        )

    era_key = _select_era(eras, era)
    era_data = eras[era_key]

    matched = [p for p in era_data.patterns if _matches_any(p, observed)]
    flagged = [f for f in era_data.red_flags if _matches_any(f, observed)]

    if era_data.patterns:
        pattern_score = len(matched) / len(era_data.patterns) * 100
    else:
        pattern_score = float(data.UNKNOWN_BRAND_SCORE)
    score = round_half_up(pattern_score - len(flagged) * data.RED_FLAG_PENALTY)

    return BrandPatternResult(
        brand=brand or "Unknown",
        era=era_key,
        authenticity_score=max(0, min(100, score)),
        # With no hits the expected patterns double as a checklist for the model.
        matched_patterns=matched or list(era_data.patterns),
        red_flags=flagged,
        details=era_data.details,
    )


# ==========================================
#  CONSTRUCTION DATING
# ==========================================


def date_forensics(
    category: str = "",
    construction_details: str = "",
    materials: str = "",
) -> DateForensicsResult:
    """Date a garment from construction and material markers."""
    details = construction_details.lower()
    materials = materials.lower()
    combined = f"{details} {materials}"

    matched = [m for m in data.CONSTRUCTION_MARKERS if m.feature in combined]
    logger.debug("date_forensics category=%s matched=%s", category, [m.feature for m in matched])

    if not matched:
        return DateForensicsResult(
            estimated_era="Undetermined",
            year_range=data.UNDETERMINED_YEAR_RANGE,
            confidence=data.UNDETERMINED_CONFIDENCE,
            evidence=["No specific construction markers identified"],
            construction_details=[details],
            material_analysis=materials or "Not specified",
        )

    total_weight = sum(m.confidence for m in matched)
    avg_start = round_half_up(sum(m.era_range[0] * m.confidence for m in matched) / total_weight)
    avg_end = round_half_up(sum(m.era_range[1] * m.confidence for m in matched) / total_weight)

    overlap_start = max(m.era_range[0] for m in matched)
    overlap_end = min(m.era_range[1] for m in matched)
    if overlap_start <= overlap_end:
        start, end = overlap_start, overlap_end
    else:
        start, end = avg_start, avg_end

    mean_confidence = total_weight / len(matched)
    confidence = min(data.MAX_DATING_CONFIDENCE, mean_confidence + len(matched) * data.CORROBORATION_BONUS)

    return DateForensicsResult(
        estimated_era=f"{start // 10 * 10}s - {end // 10 * 10}s",
        year_range=(start, end),
        confidence=confidence,
        evidence=[
            f"{m.feature}: {m.era_range[0]}-{m.era_range[1]} ({round_half_up(m.confidence * 100)}% confidence)"
            for m in matched
        ],
        construction_details=split_csv(details),
        material_analysis=materials or "Not specified",
    )


# ==========================================
#  MARKET ESTIMATE
# ==========================================


def era_multiplier(era: str) -> float:
    """Desirability multiplier for an era string."""
    for fragments, multiplier in data.ERA_MULTIPLIERS:
        if any(fragment in era for fragment in fragments):
            return multiplier
    return 1.0


def market_search(
    item_description: str = "",
    brand: str = "",
    era: str = "",
    *,
    rng: random.Random | None = None,
    today: date | None = None,
) -> MarketSearchResult:
    """Estimate the resale band of an item and synthesize comparable sales."""
    rng = rng or random.Random()
    today = today or date.today()

    band = data.MARKET_BASE_VALUES.get(normalize_key(brand), data.DEFAULT_PRICE_BAND)
    multiplier = era_multiplier(era)

    low = round_half_up(band.low * multiplier)
    high = round_half_up(band.high * multiplier)
    mid = round_half_up((low + high) / 2)

    comparable_sales = [
        ComparableSale(
            title=f"{item_description} - Similar condition",
            price=mid + round_half_up(rng.random() * 50 - 25),
            platform="eBay",
            date=(today - timedelta(days=5)).isoformat(),
            condition="Good",
        ),
        ComparableSale(
            title=f"{item_description} - Excellent condition",
            price=high - round_half_up(rng.random() * 50),
            platform="Grailed",
            date=(today - timedelta(days=10)).isoformat(),
            condition="Excellent",
        ),
        ComparableSale(
            title=f"{item_description} - Fair condition",
            price=low + round_half_up(rng.random() * 30),
            platform="Depop",
            date=(today - timedelta(days=28)).isoformat(),
            condition="Fair",
        ),
    ]

    if multiplier > 1.5:
        demand = DemandLevel.VERY_HIGH
    elif multiplier > 1.0:
        demand = DemandLevel.HIGH
    else:
        demand = DemandLevel.MODERATE

    return MarketSearchResult(
        estimated_value=EstimatedValue(low=low, mid=mid, high=high),
        comparable_sales=comparable_sales,
        market_trend=MarketTrend.RISING if multiplier > 1.2 else MarketTrend.STABLE,
        demand_level=demand,
    )
