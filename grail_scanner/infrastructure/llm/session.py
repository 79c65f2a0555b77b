"""Chat session abstraction over the hosted multimodal model."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from google.genai import chats, types

from grail_scanner.services.forensics.models import AnyToolResult, ToolCall
from grail_scanner.utils.image import ImagePayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelTurn:
    """One model answer: any text it produced plus requested tool calls."""

    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)


class ForensicChatSession(Protocol):
    """A single ongoing conversation with the model."""

    async def send_image(self, prompt: str, image: ImagePayload) -> ModelTurn: ...

    async def send_tool_results(
        self, results: Sequence[tuple[ToolCall, AnyToolResult]]
    ) -> ModelTurn: ...

    async def send_text(self, prompt: str) -> ModelTurn: ...


def _extract_text(response: types.GenerateContentResponse) -> str:
    """Visible text of the first candidate; thought parts are skipped by the SDK."""
    return response.text or ""


def _extract_tool_calls(response: types.GenerateContentResponse) -> list[ToolCall]:
    return [
        ToolCall(name=call.name or "", args=call.args or {})
        for call in (response.function_calls or [])
    ]


def to_model_turn(response: types.GenerateContentResponse) -> ModelTurn:
    return ModelTurn(text=_extract_text(response), tool_calls=_extract_tool_calls(response))


def _tool_response_payload(result: AnyToolResult) -> dict[str, Any]:
    return result.model_dump(mode="json")


class GeminiChatSession:
    """``ForensicChatSession`` backed by a google-genai async chat."""

    def __init__(self, chat: chats.AsyncChat) -> None:
        self._chat = chat

    async def _send(self, message: list[Any] | str) -> ModelTurn:
        response = await self._chat.send_message(message)
        turn = to_model_turn(response)
        logger.debug(
            "Model turn: %d chars, tool calls=%s",
            len(turn.text), [c.name for c in turn.tool_calls],
        )
        return turn

    async def send_image(self, prompt: str, image: ImagePayload) -> ModelTurn:
        return await self._send(
            [prompt, types.Part.from_bytes(data=image.data, mime_type=image.mime_type)]
        )

    async def send_tool_results(
        self, results: Sequence[tuple[ToolCall, AnyToolResult]]
    ) -> ModelTurn:
        return await self._send(
            [
                types.Part.from_function_response(
                    name=call.name, response=_tool_response_payload(result)
                )
                for call, result in results
            ]
        )

    async def send_text(self, prompt: str) -> ModelTurn:
        return await self._send(prompt)
