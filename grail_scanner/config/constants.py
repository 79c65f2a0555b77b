"""
Constants, enums, and static values.
"""

from enum import Enum


class ConfidenceLevel(str, Enum):
    """Authentication confidence bucket derived from the 0-100 score."""

    VERY_HIGH = "very_high"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    UNCERTAIN = "uncertain"


class ItemCategory(str, Enum):
    """Item category for authentication."""

    JACKET = "jacket"
    SHIRT = "shirt"
    PANTS = "pants"
    DRESS = "dress"
    SHOES = "shoes"
    BAG = "bag"
    ACCESSORY = "accessory"
    HAT = "hat"
    OUTERWEAR = "outerwear"
    SPORTSWEAR = "sportswear"
    DENIM = "denim"
    UNKNOWN = "unknown"


class ToolName(str, Enum):
    """Forensic tools exposed to the model."""

    RN_LOOKUP = "rn_lookup"
    BRAND_PATTERNS = "brand_patterns"
    DATE_FORENSICS = "date_forensics"
    MARKET_SEARCH = "market_search"


class ScanStatus(str, Enum):
    """Scan status reported to the client."""

    IDLE = "idle"
    CAPTURING = "capturing"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    TOOL_CALLING = "tool_calling"
    SELF_CORRECTING = "self_correcting"
    COMPLETE = "complete"
    ERROR = "error"


class ScanPhase(str, Enum):
    """Internal orchestration phases."""

    INITIALIZING = "initializing"
    SENDING_INITIAL = "sending_initial"
    AWAITING_TOOL_CALLS = "awaiting_tool_calls"
    EXECUTING_TOOLS = "executing_tools"
    SYNTHESIZING = "synthesizing"
    SELF_CORRECTING = "self_correcting"
    COMPLETE = "complete"
    FAILED = "failed"


class ScanPhaseDescription(str, Enum):
    """Orchestration phase descriptions."""

    INITIALIZING = "Validate configuration and open the model session"
    SENDING_INITIAL = "Send the forensic prompt and the item image"
    AWAITING_TOOL_CALLS = "Inspect the model turn for tool call requests"
    EXECUTING_TOOLS = "Run the requested forensic tools"
    SYNTHESIZING = "Parse the final model answer into a structured result"
    SELF_CORRECTING = "Re-query the model after a low-confidence answer"


class RNStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    NOT_FOUND = "not_found"


class MarketTrend(str, Enum):
    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"


class DemandLevel(str, Enum):
    VERY_HIGH = "very_high"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class ThinkingLevel(str, Enum):
    """Reasoning depth passed through to the hosted model."""

    LOW = "low"
    HIGH = "high"


class MediaResolution(str, Enum):
    """Vision resolution passed through to the hosted model."""

    LOW = "low"
    HIGH = "high"


TOTAL_SCAN_STEPS = 6
TOOL_RESULT_PREVIEW_CHARS = 200
DEFAULT_MAX_TOOL_ROUNDS = 8
DEFAULT_SELF_CORRECTION_THRESHOLD = 0.7
