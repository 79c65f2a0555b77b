"""Static forensic reference tables.

Loaded once at import and never mutated; safe to share across concurrent
tool invocations.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# ==========================================
#  RN / WPL REGISTRANTS
# ==========================================

# Numbers below the formula base belong to the pre-1960 series.
RN_FORMULA_BASE = 13670
RN_FORMULA_STEP = 2635
RN_FORMULA_YEAR = 1959


@dataclass(frozen=True)
class Registrant:
    company: str
    year: int | None = None


RN_DATABASE: Mapping[str, Registrant] = MappingProxyType({
    "42850": Registrant("Nike Inc.", 1970),
    "55531": Registrant("Gap Inc.", 1975),
    "73277": Registrant("Levi Strauss & Co.", 1982),
    "73909": Registrant("Ralph Lauren Corporation", 1982),
    "77388": Registrant("Tommy Hilfiger", 1984),
    "91518": Registrant("The North Face", 1989),
    "101243": Registrant("Patagonia Inc.", 1992),
    "114798": Registrant("Carhartt Inc.", 1997),
    "56002": Registrant("Levi's (alternate)", 1975),
    "41381": Registrant("Pendleton Woolen Mills", 1969),
    "15763": Registrant("L.L.Bean Inc.", 1960),
    "26094": Registrant("Fruit of the Loom", 1964),
})

# ==========================================
#  BRAND PATTERNS
# ==========================================


@dataclass(frozen=True)
class EraPatterns:
    patterns: tuple[str, ...]
    red_flags: tuple[str, ...]
    details: str


# Era keys are ordered oldest to newest; the last one is the fallback.
BRAND_PATTERNS: Mapping[str, Mapping[str, EraPatterns]] = MappingProxyType({
    "nike": MappingProxyType({
        "1970s": EraPatterns(
            patterns=("Block letter NIKE logo", "Made in Japan/Taiwan", "Waffle outsole", "Simple swoosh"),
            red_flags=("Modern swoosh design", "Made in China/Vietnam", "Moisture-wicking materials"),
            details=(
                "Early Nike featured block letters and Japanese manufacturing. "
                "The swoosh was thinner and simpler."
            ),
        ),
        "1980s": EraPatterns(
            patterns=("Grey tag", "Silver/grey label", "Made in Taiwan/Korea", "Block font", "Pin tag on collar"),
            red_flags=("White label", "Modern barcode format", "Dri-FIT branding"),
            details="The Grey Tag era (1980-87) is highly collectible. Look for silver/grey woven labels.",
        ),
        "1990s": EraPatterns(
            patterns=("White tag", "White label", "Made in USA possible", "Embroidered swoosh", "Mini swoosh"),
            red_flags=("Grey tag (too early)", "Modern hang tag design", "Flex/React branding"),
            details="White Tag era (1988-1998). Highly sought after. Mini swoosh and center swoosh are valuable.",
        ),
        "2000s": EraPatterns(
            patterns=("Size tag on inside", "Modern hang tag", "Tech fabric labels", "Barcode tag"),
            red_flags=("Missing care labels", "Incorrect font spacing", "Poor swoosh proportions"),
            details="Modern era Nike. Look for consistent label formatting and proper material composition tags.",
        ),
    }),
    "levis": MappingProxyType({
        "1960s": EraPatterns(
            patterns=("Big E (LEVI'S)", "Single-stitch hems", "Redline selvedge", "Paper patch"),
            red_flags=("Lowercase e", "Chain stitch hems", "Modern rivets"),
            details="Big E era uses capital E in LEVI'S. Extremely valuable. Check for selvedge denim.",
        ),
        "1970s": EraPatterns(
            patterns=("Small e (Levi's)", "Orange tab possible", "Care tag with numbers", "Chain stitch hems"),
            red_flags=("Big E (too early)", "Modern leather patch", "Stretch denim"),
            details="Transition from Big E to small e happened ~1971. Orange tab indicates non-501 line.",
        ),
        "1980s": EraPatterns(
            patterns=("Red tab small e", "Leather patch", "Made in USA", "Cone Mills denim possible"),
            red_flags=("Paper patch", "Non-US manufacture", "Modern button styles"),
            details="Made in USA era. Look for quality denim weight and Cone Mills fabric.",
        ),
        "1990s": EraPatterns(
            patterns=("Red tab small e", "Various global manufacture", "Silver tab line", "Baggy/loose cuts"),
            red_flags=("Incorrect tab placement", "Poor rivet quality", "Wrong pocket arc pattern"),
            details="Diverse manufacturing era. Silver Tab line is collectible. Check pocket arcs carefully.",
        ),
    }),
    "ralph lauren": MappingProxyType({
        "1980s": EraPatterns(
            patterns=("Polo player logo", "Made in USA", "Single-needle construction", "Button-down collar"),
            red_flags=("Modern tag design", "Made in Sri Lanka/China", "Missing country of origin"),
            details=(
                "Golden era Ralph Lauren. Made in USA with premium construction. "
                "Look for single-needle stitching."
            ),
        ),
        "1990s": EraPatterns(
            patterns=("Polo Sport line", "Hi-Tech collection", "Snow Beach", "Stadium 1992"),
            red_flags=("Incorrect flag design", "Wrong font for era", "Poor embroidery quality"),
            details="Highly collectible era. Polo Sport, Snow Beach, and Stadium 1992 command premium prices.",
        ),
    }),
})

# Prefix length used when comparing an observed marker against a known pattern.
PATTERN_PREFIX_CHARS = 10
RED_FLAG_PENALTY = 15
UNKNOWN_BRAND_SCORE = 50

# ==========================================
#  CONSTRUCTION MARKERS
# ==========================================


@dataclass(frozen=True)
class ConstructionMarker:
    feature: str
    era_range: tuple[int, int]
    confidence: float


CONSTRUCTION_MARKERS: tuple[ConstructionMarker, ...] = (
    ConstructionMarker("single-needle", (1950, 1990), 0.7),
    ConstructionMarker("chain stitch", (1950, 1985), 0.8),
    ConstructionMarker("selvedge", (1920, 1985), 0.85),
    ConstructionMarker("union label", (1955, 1995), 0.9),
    ConstructionMarker("made in usa", (1940, 2000), 0.6),
    ConstructionMarker("made in japan", (1960, 1990), 0.7),
    ConstructionMarker("made in china", (1985, 2026), 0.5),
    ConstructionMarker("ykk zipper", (1960, 2026), 0.4),
    ConstructionMarker("talon zipper", (1930, 1990), 0.85),
    ConstructionMarker("coats & clark", (1950, 2010), 0.6),
    ConstructionMarker("bar tack", (1960, 2026), 0.3),
    ConstructionMarker("rolled hem", (1940, 1980), 0.75),
    ConstructionMarker("triple stitch", (1970, 2026), 0.4),
    ConstructionMarker("polyester", (1960, 2026), 0.3),
    ConstructionMarker("nylon", (1940, 2026), 0.2),
    ConstructionMarker("rayon", (1920, 2026), 0.3),
    ConstructionMarker("care label", (1971, 2026), 0.8),
    ConstructionMarker("no care label", (1920, 1971), 0.9),
)

UNDETERMINED_YEAR_RANGE = (1960, 2020)
UNDETERMINED_CONFIDENCE = 0.3
MAX_DATING_CONFIDENCE = 0.95
CORROBORATION_BONUS = 0.05

# ==========================================
#  MARKET PRICES
# ==========================================


@dataclass(frozen=True)
class PriceBand:
    low: int
    high: int


DEFAULT_PRICE_BAND = PriceBand(30, 200)

MARKET_BASE_VALUES: Mapping[str, PriceBand] = MappingProxyType({
    "nike": PriceBand(80, 450),
    "levis": PriceBand(60, 800),
    "ralph lauren": PriceBand(50, 600),
    "the north face": PriceBand(70, 350),
    "patagonia": PriceBand(60, 300),
    "carhartt": PriceBand(40, 250),
    "champion": PriceBand(40, 200),
    "stussy": PriceBand(80, 500),
    "supreme": PriceBand(100, 2000),
})

# Checked in order; the first era fragment found in the request wins.
ERA_MULTIPLIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("1970", "1980"), 1.8),
    (("1990",), 1.4),
    (("2000",), 0.8),
)
