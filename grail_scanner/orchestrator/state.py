"""Authentication run state."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from grail_scanner.config.constants import ScanPhase
from grail_scanner.services.forensics.models import AnyToolResult

logger = logging.getLogger(__name__)


@dataclass
class ScanState:
    """Mutable state of one authentication run."""

    started_at: float = field(default_factory=time.time)
    phase: ScanPhase = ScanPhase.INITIALIZING

    # Tool loop
    rounds: int = 0
    tool_calls_executed: int = 0
    tool_results: list[AnyToolResult] = field(default_factory=list)
    ceiling_reached: bool = False

    # Synthesis
    final_text: str = ""
    initial_confidence: int | None = None

    # Self-correction
    correction_attempted: bool = False
    corrected_confidence: int | None = None

    def transition(self, phase: ScanPhase) -> None:
        logger.debug("Scan phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def elapsed_ms(self) -> float:
        return (time.time() - self.started_at) * 1000

    def summary(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "rounds": self.rounds,
            "tool_calls_executed": self.tool_calls_executed,
            "ceiling_reached": self.ceiling_reached,
            "initial_confidence": self.initial_confidence,
            "correction_attempted": self.correction_attempted,
            "corrected_confidence": self.corrected_confidence,
        }
