"""Async context manager for timing and logging orchestration phases."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from grail_scanner.config.constants import ScanPhase, ScanPhaseDescription
from grail_scanner.infrastructure.logging.logger import StructuredLogger
from grail_scanner.orchestrator.state import ScanState


@asynccontextmanager
async def timed_step(
    phase: ScanPhase,
    logger: StructuredLogger,
    state: ScanState,
) -> AsyncGenerator[ScanState, None]:
    """Enter ``phase`` and log its duration with the state summary on exit."""
    state.transition(phase)
    logger.logger.info("%s: %s", phase.value, ScanPhaseDescription[phase.name].value)
    start = time.time()
    yield state
    logger.log_step(phase.value, state.summary(), duration_ms=(time.time() - start) * 1000)
