"""
Authentication orchestrator.

Drives one scan: image to model, tool-call rounds, synthesis and an
optional self-correction pass, reporting progress along the way.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any, Literal

from pydantic import ValidationError

from grail_scanner.config.constants import ScanPhase, ScanStatus
from grail_scanner.config.prompts import build_correction_prompt, build_forensic_prompt
from grail_scanner.config.settings import Settings, get_settings
from grail_scanner.errors import InvalidOverrideError
from grail_scanner.infrastructure.llm.factory import ensure_api_key, open_forensic_session
from grail_scanner.infrastructure.llm.session import ForensicChatSession, ModelTurn
from grail_scanner.infrastructure.logging.logger import StructuredLogger
from grail_scanner.orchestrator.models import AuthenticationConfig, AuthenticationResult, ScanProgress
from grail_scanner.orchestrator.progress import ProgressCallback, ProgressChannel, ProgressReporter
from grail_scanner.orchestrator.state import ScanState
from grail_scanner.orchestrator.step_timer import timed_step
from grail_scanner.services.forensics.models import AnyToolResult, ToolCall
from grail_scanner.services.forensics.router import get_tool_spec, run_tool_call
from grail_scanner.services.parsing.parser import (
    find_confidence,
    merge_tool_results,
    parse_authentication_response,
)
from grail_scanner.utils.image import ImagePayload

logger = logging.getLogger(__name__)

SessionFactory = Callable[[AuthenticationConfig], ForensicChatSession]
ConfigInput = AuthenticationConfig | Mapping[str, Any] | None
StreamEvent = tuple[Literal["progress"], ScanProgress] | tuple[Literal["result"], AuthenticationResult]


class AuthenticationOrchestrator:
    """Runs authentication scans against the hosted model."""

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: SessionFactory | None = None,
    ):
        self.settings = settings or get_settings()
        self.session_factory = session_factory or open_forensic_session
        self.structured_logger = StructuredLogger(__name__)

    def resolve_config(self, config: ConfigInput = None) -> AuthenticationConfig:
        """
        Build the run configuration from settings plus per-call overrides.

        Raises:
            InvalidOverrideError: An override value is out of range or unknown.
            ConfigurationError: No API key is configured.
        """
        if isinstance(config, AuthenticationConfig):
            resolved = config
        else:
            try:
                resolved = AuthenticationConfig.from_settings(self.settings, config)
            except ValidationError as e:
                raise InvalidOverrideError(f"Invalid authentication configuration: {e}") from e
        ensure_api_key(resolved)
        return resolved

    async def authenticate(
        self,
        image: ImagePayload,
        config: ConfigInput = None,
        on_progress: ProgressCallback | None = None,
    ) -> AuthenticationResult:
        """
        Authenticate one garment image.

        Args:
            image: Raw image bytes and MIME type
            config: AuthenticationConfig or a mapping of overrides
            on_progress: Optional sync or async progress callback

        Returns:
            The final AuthenticationResult

        Raises:
            ConfigurationError: Missing credential
            InvalidOverrideError: Invalid per-call overrides
            UnknownToolError: The model requested a tool outside the set
        """
        state = ScanState()
        reporter = ProgressReporter(on_progress)

        try:
            async with timed_step(ScanPhase.INITIALIZING, self.structured_logger, state):
                await reporter.report(
                    ScanStatus.ANALYZING, "Initializing Gemini forensic analysis...", 1
                )
                run_config = self.resolve_config(config)
                session = self.session_factory(run_config)

            async with timed_step(ScanPhase.SENDING_INITIAL, self.structured_logger, state):
                await reporter.report(
                    ScanStatus.ANALYZING,
                    f"Sending image to Gemini (thinking level: {run_config.thinking_level.value})...",
                    2,
                )
                turn = await session.send_image(build_forensic_prompt(), image)

            turn = await self._run_tool_rounds(session, turn, run_config, reporter, state)

            async with timed_step(ScanPhase.SYNTHESIZING, self.structured_logger, state):
                await reporter.report(
                    ScanStatus.ANALYZING, "Synthesizing forensic authentication report...", 4
                )
                state.final_text = turn.text
                result = parse_authentication_response(turn.text, state.started_at)
                result = merge_tool_results(result, state.tool_results)
                state.initial_confidence = result.confidence

            if result.confidence < run_config.self_correction_threshold * 100:
                corrected = await self._self_correct(session, result, reporter, state)
                if corrected is not None:
                    state.transition(ScanPhase.COMPLETE)
                    await reporter.report(
                        ScanStatus.COMPLETE,
                        f"Self-correction improved confidence: "
                        f"{result.confidence}% → {corrected.confidence}%",
                        6,
                    )
                    return corrected

            state.transition(ScanPhase.COMPLETE)
            await reporter.report(
                ScanStatus.COMPLETE,
                f"Authentication complete: {result.confidence}% confidence",
                6,
            )
            logger.info(
                "Scan complete in %.0f ms: confidence=%d rounds=%d tools=%d",
                state.elapsed_ms(), result.confidence, state.rounds, state.tool_calls_executed,
            )
            return result

        except Exception as e:
            failed_in = state.phase.value
            state.transition(ScanPhase.FAILED)
            self.structured_logger.log_error(failed_in, e, state.summary())
            raise

    async def authenticate_stream(
        self,
        image: ImagePayload,
        config: ConfigInput = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Run a scan and yield its progress events followed by the result.

        The run's error, if any, is re-raised after the progress already
        emitted has been yielded.
        """
        channel = ProgressChannel()

        async def run() -> AuthenticationResult:
            try:
                return await self.authenticate(image, config, on_progress=channel.publish)
            finally:
                channel.close()

        task = asyncio.create_task(run())
        try:
            async for progress in channel:
                yield "progress", progress
            result = await task
        finally:
            if not task.done():
                task.cancel()
        yield "result", result

    async def _run_tool_rounds(
        self,
        session: ForensicChatSession,
        turn: ModelTurn,
        run_config: AuthenticationConfig,
        reporter: ProgressReporter,
        state: ScanState,
    ) -> ModelTurn:
        """Execute tool rounds until the model stops asking or the ceiling is hit."""
        state.transition(ScanPhase.AWAITING_TOOL_CALLS)
        while turn.tool_calls and state.rounds < run_config.max_tool_rounds:
            calls = turn.tool_calls
            state.rounds += 1

            async with timed_step(ScanPhase.EXECUTING_TOOLS, self.structured_logger, state):
                await reporter.report(
                    ScanStatus.TOOL_CALLING,
                    f"Executing forensic tools (round {state.rounds}: {len(calls)} calls)...",
                    3,
                    tool_name=calls[0].name,
                )
                responses = await self._execute_round(calls, reporter, state)
                turn = await session.send_tool_results(responses)

            state.transition(ScanPhase.AWAITING_TOOL_CALLS)

        if turn.tool_calls:
            state.ceiling_reached = True
            logger.warning(
                "Tool round ceiling (%d) reached; ignoring %d pending calls",
                run_config.max_tool_rounds, len(turn.tool_calls),
            )
        return turn

    async def _execute_round(
        self,
        calls: Sequence[ToolCall],
        reporter: ProgressReporter,
        state: ScanState,
    ) -> list[tuple[ToolCall, AnyToolResult]]:
        """Run one round of tool calls concurrently, one worker thread per call."""
        # Reject the whole round before anything runs
        for call in calls:
            get_tool_spec(call.name)

        async def run_one(call: ToolCall) -> AnyToolResult:
            result = await asyncio.to_thread(run_tool_call, call)
            state.tool_calls_executed += 1
            await reporter.report(
                ScanStatus.TOOL_CALLING,
                f"Tool: {call.name} completed",
                3,
                tool_name=call.name,
                tool_result=result.model_dump_json(),
            )
            return result

        results = await asyncio.gather(*(run_one(call) for call in calls))
        # Call order, not completion order
        state.tool_results.extend(results)
        return list(zip(calls, results))

    async def _self_correct(
        self,
        session: ForensicChatSession,
        result: AuthenticationResult,
        reporter: ProgressReporter,
        state: ScanState,
    ) -> AuthenticationResult | None:
        """
        Re-query the model once; return the corrected result only if it is
        strictly more confident.
        """
        async with timed_step(ScanPhase.SELF_CORRECTING, self.structured_logger, state):
            state.correction_attempted = True
            await reporter.report(
                ScanStatus.SELF_CORRECTING,
                f"Low confidence ({result.confidence}%). Re-analyzing with enhanced scrutiny...",
                5,
            )
            try:
                turn = await session.send_text(build_correction_prompt(result.confidence))
            except Exception:
                logger.warning("Self-correction turn failed; keeping initial result", exc_info=True)
                return None

            # A correction must be a fresh report with its own confidence score
            if turn.tool_calls or find_confidence(turn.text) is None:
                logger.warning(
                    "Self-correction turn had no confidence score (tool calls=%s); "
                    "keeping initial result",
                    [c.name for c in turn.tool_calls],
                )
                return None

            corrected = parse_authentication_response(turn.text, state.started_at)
            state.corrected_confidence = corrected.confidence

        if corrected.confidence <= result.confidence:
            logger.info(
                "Self-correction did not improve confidence (%d%% -> %d%%)",
                result.confidence, corrected.confidence,
            )
            return None

        corrected = merge_tool_results(corrected, state.tool_results)
        return corrected.model_copy(update={"self_corrected": True})


async def authenticate_item(
    image: ImagePayload,
    config: ConfigInput = None,
    on_progress: ProgressCallback | None = None,
    settings: Settings | None = None,
) -> AuthenticationResult:
    """Convenience wrapper around ``AuthenticationOrchestrator.authenticate``."""
    orchestrator = AuthenticationOrchestrator(settings)
    return await orchestrator.authenticate(image, config, on_progress)
