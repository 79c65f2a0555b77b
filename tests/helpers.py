"""Shared fakes and fixture data for the test suite."""

import itertools
from collections.abc import Iterable, Sequence

from grail_scanner.infrastructure.llm.session import ModelTurn
from grail_scanner.services.forensics.models import AnyToolResult, ToolCall
from grail_scanner.utils.image import ImagePayload

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32

HIGH_CONFIDENCE_REPORT = """Verdict: This jacket is authentic.
Brand: Levis
Era: 1970s
Category: denim
Confidence: 88%
Estimated value: $150 - $400

Red flags:
- Slight fading on care tag

Verified markers:
- Small e red tab
- Single stitch hem
- Copper rivets
"""

LOW_CONFIDENCE_REPORT = """Brand: Nike
Era: 1990s
Confidence: 40%
Some markers look genuine but the label is worn.
"""

CORRECTED_REPORT = """After a closer look the swoosh embroidery is genuine.
Brand: Nike
Era: 1990s
Confidence: 82%
"""


class FakeChatSession:
    """Scripted ForensicChatSession.

    ``turns`` answers the image and tool-result messages in order; once
    exhausted an empty turn is returned. ``correction`` answers ``send_text``
    and may be an exception to raise.
    """

    def __init__(
        self,
        turns: Iterable[ModelTurn] = (),
        correction: ModelTurn | Exception | None = None,
    ):
        self._turns = iter(turns)
        self.correction = correction
        self.images: list[tuple[str, ImagePayload]] = []
        self.tool_batches: list[list[tuple[ToolCall, AnyToolResult]]] = []
        self.texts: list[str] = []

    def _next(self) -> ModelTurn:
        return next(self._turns, ModelTurn())

    async def send_image(self, prompt: str, image: ImagePayload) -> ModelTurn:
        self.images.append((prompt, image))
        return self._next()

    async def send_tool_results(
        self, results: Sequence[tuple[ToolCall, AnyToolResult]]
    ) -> ModelTurn:
        self.tool_batches.append(list(results))
        return self._next()

    async def send_text(self, prompt: str) -> ModelTurn:
        self.texts.append(prompt)
        if isinstance(self.correction, Exception):
            raise self.correction
        return self.correction or ModelTurn()


def tool_turn(*calls: tuple[str, dict[str, str]]) -> ModelTurn:
    return ModelTurn(tool_calls=[ToolCall(name=name, args=args) for name, args in calls])


def endless_tool_turns() -> Iterable[ModelTurn]:
    return itertools.repeat(tool_turn(("rn_lookup", {"rn_number": "RN 42850"})))


