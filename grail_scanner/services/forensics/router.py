"""Forensic tool registry and dispatch by name."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from grail_scanner.config.constants import ToolName
from grail_scanner.errors import UnknownToolError
from grail_scanner.services.forensics.models import AnyToolResult, ToolCall
from grail_scanner.services.forensics.tools import (
    brand_patterns,
    date_forensics,
    market_search,
    rn_lookup,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: its callable plus the schema advertised to the model."""

    name: str
    func: Callable[..., AnyToolResult]
    description: str
    parameters: Mapping[str, str] = field(default_factory=dict)
    """Parameter name -> description. All parameters are strings."""

    required: tuple[str, ...] = ()


_SPECS = (
    ToolSpec(
        name=ToolName.RN_LOOKUP.value,
        func=rn_lookup,
        description=(
            "Look up an RN (Registered Number) or WPL (Wool Products Label) number to identify "
            "the manufacturer and registration year. RN numbers are assigned by the FTC to US "
            "textile manufacturers."
        ),
        parameters={
            "rn_number": 'The RN or WPL number found on the garment label (e.g., "RN 42850" or "WPL 12345")',
        },
        required=("rn_number",),
    ),
    ToolSpec(
        name=ToolName.BRAND_PATTERNS.value,
        func=brand_patterns,
        description=(
            "Verify brand-specific authentication markers for a given brand and era. Checks label "
            "fonts, tag placement, hardware details, and era-specific patterns."
        ),
        parameters={
            "brand": 'The brand name to verify (e.g., "Nike", "Levis", "Ralph Lauren")',
            "era": 'The suspected era/decade (e.g., "1990s", "1980s", "early 2000s")',
            "markers": (
                "Comma-separated list of authentication markers observed "
                '(e.g., "swoosh logo, white tag, made in USA")'
            ),
        },
        required=("brand", "era"),
    ),
    ToolSpec(
        name=ToolName.DATE_FORENSICS.value,
        func=date_forensics,
        description=(
            "Perform forensic dating analysis based on construction techniques, materials, and "
            "manufacturing details visible in the garment."
        ),
        parameters={
            "category": 'Item category (e.g., "jacket", "shirt", "pants", "shoes")',
            "construction_details": (
                'Observed construction details (e.g., "single-needle stitching, bar-tack '
                'reinforcement, YKK zipper")'
            ),
            "materials": 'Observed materials (e.g., "100% cotton, heavy denim, selvedge edge")',
        },
        required=("category", "construction_details"),
    ),
    ToolSpec(
        name=ToolName.MARKET_SEARCH.value,
        func=market_search,
        description=(
            "Search for current market pricing and recent sales data for an authenticated vintage "
            "item. Returns comparable sales, estimated value range, and market trends."
        ),
        parameters={
            "item_description": (
                'Full description of the item (e.g., "1992 Nike Air windbreaker jacket, size L, '
                'teal colorway")'
            ),
            "brand": "Brand name",
            "era": "Era/year range",
        },
        required=("item_description",),
    ),
)

TOOL_REGISTRY: Mapping[str, ToolSpec] = MappingProxyType({spec.name: spec for spec in _SPECS})

FORENSIC_TOOLS: tuple[str, ...] = tuple(TOOL_REGISTRY)


def get_tool_spec(name: str) -> ToolSpec:
    """Return the registered spec for ``name`` or raise ``UnknownToolError``."""
    spec = TOOL_REGISTRY.get(name)
    if spec is None:
        raise UnknownToolError(name)
    return spec


def execute_tool_call(name: str, args: Mapping[str, str] | None = None) -> AnyToolResult:
    """Run a forensic tool by name.

    Arguments the tool does not declare are dropped, so a chatty model cannot
    break the call with extra keys.

    Raises:
        UnknownToolError: ``name`` is not a registered tool.
    """
    spec = get_tool_spec(name)
    kwargs = {k: str(v) for k, v in (args or {}).items() if k in spec.parameters}
    ignored = set(args or {}) - set(kwargs)
    if ignored:
        logger.debug("Ignoring undeclared arguments for %s: %s", name, sorted(ignored))
    return spec.func(**kwargs)


def run_tool_call(call: ToolCall) -> AnyToolResult:
    """Run a model-issued ``ToolCall``."""
    return execute_tool_call(call.name, call.args)
