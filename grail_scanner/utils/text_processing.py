"""Text processing utilities."""

import math
import re


def normalize_text(text: str) -> str:
    """
    Collapse runs of whitespace and trim.

    Args:
        text: Input text

    Returns:
        Normalized text
    """
    return re.sub(r"\s+", " ", text).strip()


def normalize_key(text: str) -> str:
    """Normalize free text for table lookups (lower-cased, whitespace collapsed)."""
    return normalize_text(text).lower()


def split_csv(text: str) -> list[str]:
    """Split a comma-separated list, dropping empty entries."""
    return [item.strip() for item in text.split(",") if item.strip()]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))
