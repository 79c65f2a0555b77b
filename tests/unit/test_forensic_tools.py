"""Tests for the forensic tools."""

import random
from datetime import date

import pytest

from grail_scanner.config.constants import DemandLevel, MarketTrend, RNStatus
from grail_scanner.services.forensics.tools import (
    brand_patterns,
    calculate_rn_year,
    date_forensics,
    era_multiplier,
    market_search,
    rn_lookup,
)

# ==========================================
#  RN LOOKUP
# ==========================================


def test_calculate_rn_year_formula_base():
    assert calculate_rn_year(13670) == 1959
    assert calculate_rn_year(16305) == 1960


def test_calculate_rn_year_below_base():
    assert calculate_rn_year(13669) is None
    assert calculate_rn_year(500) is None


def test_rn_lookup_known_registrant():
    result = rn_lookup("RN 73277")
    assert result.rn_number == "RN 73277"
    assert result.company_name == "Levi Strauss & Co."
    assert result.registration_year == 1982
    assert result.calculated_year == 1982
    assert result.status == RNStatus.ACTIVE
    assert result.formula == "(73277 - 13670) / 2635 + 1959 = 1982"


def test_rn_lookup_unknown_number_uses_formula():
    result = rn_lookup("rn#20000")
    assert result.company_name == "Unknown (RN 20000)"
    assert result.registration_year is None
    assert result.calculated_year == 1961
    assert result.status == RNStatus.ACTIVE


def test_rn_lookup_pre_formula_number_not_found():
    result = rn_lookup("12000")
    assert result.status == RNStatus.NOT_FOUND
    assert result.calculated_year is None
    assert result.formula.endswith("= N/A")


def test_rn_lookup_without_digits():
    result = rn_lookup("WPL")
    assert result.company_name == "Invalid RN number"
    assert result.status == RNStatus.NOT_FOUND
    assert result.formula == "N/A"
    assert result.rn_number == "WPL"


# ==========================================
#  BRAND PATTERNS
# ==========================================


def test_brand_patterns_unknown_brand():
    result = brand_patterns("Acme Vintage Co", "1980s", "some label")
    assert result.authenticity_score == 50
    assert result.matched_patterns == []
    assert result.red_flags == ["Brand not in database - manual verification required"]
    assert "Acme Vintage Co" in result.details


def test_brand_patterns_scores_matched_markers():
    result = brand_patterns(
        "Levis",
        "1970s",
        "Small e (Levi's) tab, Chain stitch hems, Care tag with numbers 5",
    )
    assert result.era == "1970s"
    assert result.authenticity_score == 75
    assert len(result.matched_patterns) == 3
    assert result.red_flags == []


def test_brand_patterns_red_flags_reduce_score():
    result = brand_patterns("levis", "1970s", "Small e (Levi's), Stretch denim fabric")
    assert result.red_flags == ["Stretch denim"]
    assert result.authenticity_score == 10


def test_brand_patterns_no_matches_returns_expected_patterns():
    result = brand_patterns("Nike", "1990s", "")
    assert result.era == "1990s"
    assert result.authenticity_score == 0
    assert result.matched_patterns
    assert result.red_flags == []


def test_brand_patterns_unmatched_era_falls_back_to_latest():
    result = brand_patterns("Ralph Lauren", "sometime", "")
    assert result.era == "1990s"


def test_brand_patterns_case_and_whitespace_insensitive():
    assert brand_patterns("  RALPH   lauren ", "1980s", "").era == "1980s"


# ==========================================
#  DATE FORENSICS
# ==========================================


def test_date_forensics_overlapping_markers():
    result = date_forensics("jacket", "Single-needle stitching, Talon zipper", "cotton")
    assert result.year_range == (1950, 1990)
    assert result.estimated_era == "1950s - 1990s"
    assert result.confidence == pytest.approx(0.875)
    assert len(result.evidence) == 2
    assert result.construction_details == ["single-needle stitching", "talon zipper"]
    assert result.material_analysis == "cotton"


def test_date_forensics_confidence_is_capped():
    result = date_forensics(
        "denim",
        "union label, selvedge, chain stitch, talon zipper, no care label",
        "",
    )
    assert result.confidence == pytest.approx(0.95)
    assert result.material_analysis == "Not specified"


def test_date_forensics_without_markers():
    result = date_forensics("shirt", "hand sewn", "")
    assert result.estimated_era == "Undetermined"
    assert result.year_range == (1960, 2020)
    assert result.confidence == pytest.approx(0.3)
    assert result.evidence == ["No specific construction markers identified"]


# ==========================================
#  MARKET SEARCH
# ==========================================


def test_era_multiplier():
    assert era_multiplier("1980s") == 1.8
    assert era_multiplier("early 1970s") == 1.8
    assert era_multiplier("1990s") == 1.4
    assert era_multiplier("2000s") == 0.8
    assert era_multiplier("1960s") == 1.0


def test_market_search_levis_1980s_band():
    result = market_search("501 jeans", "Levis", "1980", rng=random.Random(7))
    assert result.estimated_value.low == 108
    assert result.estimated_value.high == 1440
    assert result.estimated_value.mid == 774
    assert result.estimated_value.currency == "USD"
    assert result.market_trend == MarketTrend.RISING
    assert result.demand_level == DemandLevel.VERY_HIGH


def test_market_search_comparables_stay_near_band():
    result = market_search("Windbreaker", "Nike", "1990s", rng=random.Random(1))
    value = result.estimated_value
    ebay, grailed, depop = result.comparable_sales
    assert (ebay.platform, grailed.platform, depop.platform) == ("eBay", "Grailed", "Depop")
    assert value.mid - 25 <= ebay.price <= value.mid + 25
    assert value.high - 50 <= grailed.price <= value.high
    assert value.low <= depop.price <= value.low + 30
    assert result.demand_level == DemandLevel.HIGH


def test_market_search_dates_relative_to_today():
    result = market_search("Tee", "", "", today=date(2024, 3, 1))
    assert [s.date for s in result.comparable_sales] == ["2024-02-25", "2024-02-20", "2024-02-02"]
    assert result.estimated_value.low == 30
    assert result.estimated_value.high == 200
    assert result.market_trend == MarketTrend.STABLE
    assert result.demand_level == DemandLevel.MODERATE
