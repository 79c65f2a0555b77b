"""Tests for the Gemini session adapter and factory."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai import types

from grail_scanner.errors import ConfigurationError
from grail_scanner.infrastructure.llm.factory import (
    build_generate_config,
    create_client,
    open_forensic_session,
)
from grail_scanner.infrastructure.llm.session import GeminiChatSession, to_model_turn
from grail_scanner.orchestrator.models import AuthenticationConfig
from grail_scanner.services.forensics.models import ToolCall
from grail_scanner.services.forensics.tools import rn_lookup
from grail_scanner.utils.image import ImagePayload


def _response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _config(**overrides) -> AuthenticationConfig:
    values = {"api_key": "test-key", "model": "gemini-3-pro-preview"}
    values.update(overrides)
    return AuthenticationConfig(**values)


def test_model_turn_skips_thought_parts():
    response = _response(
        types.Part(text="internal musing", thought=True),
        types.Part(text="Brand: Nike"),
        types.Part(
            function_call=types.FunctionCall(name="rn_lookup", args={"rn_number": "42850"})
        ),
    )

    turn = to_model_turn(response)

    assert turn.text == "Brand: Nike"
    assert turn.tool_calls == [ToolCall(name="rn_lookup", args={"rn_number": "42850"})]


def test_model_turn_joins_split_text_parts():
    response = _response(types.Part(text="Confidence: 8"), types.Part(text="5%"))

    assert to_model_turn(response).text == "Confidence: 85%"


def test_model_turn_from_empty_response():
    turn = to_model_turn(types.GenerateContentResponse(candidates=[]))
    assert turn.text == ""
    assert turn.tool_calls == []


@pytest.mark.asyncio
async def test_session_sends_image_part():
    chat = MagicMock()
    chat.send_message = AsyncMock(return_value=_response(types.Part(text="Confidence: 80%")))
    session = GeminiChatSession(chat)

    turn = await session.send_image("Analyze", ImagePayload(data=b"\xff\xd8\xff"))

    assert turn.text == "Confidence: 80%"
    message = chat.send_message.await_args.args[0]
    assert message[0] == "Analyze"
    assert message[1].inline_data.mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_session_sends_all_tool_responses_in_one_turn():
    chat = MagicMock()
    chat.send_message = AsyncMock(return_value=_response(types.Part(text="done")))
    session = GeminiChatSession(chat)
    call = ToolCall(name="rn_lookup", args={"rn_number": "42850"})

    await session.send_tool_results([(call, rn_lookup("42850")), (call, rn_lookup("55531"))])

    chat.send_message.assert_awaited_once()
    parts = chat.send_message.await_args.args[0]
    assert [p.function_response.name for p in parts] == ["rn_lookup", "rn_lookup"]
    assert parts[1].function_response.response["company_name"] == "Gap Inc."


def test_generate_config_passes_through_levels():
    config = build_generate_config(_config(thinking_level="low", media_resolution="high"))

    assert config.automatic_function_calling.disable is True
    assert config.thinking_config.thinking_level == types.ThinkingLevel.LOW
    assert config.media_resolution == types.MediaResolution.MEDIA_RESOLUTION_HIGH
    names = [d.name for d in config.tools[0].function_declarations]
    assert names == ["rn_lookup", "brand_patterns", "date_forensics", "market_search"]


def test_create_client_requires_api_key():
    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY is required"):
        create_client(_config(api_key=""))


@patch("grail_scanner.infrastructure.llm.factory.genai.Client")
def test_open_forensic_session_creates_chat(mock_client_cls):
    session = open_forensic_session(_config(model="gemini-custom", timeout_ms=5000))

    assert isinstance(session, GeminiChatSession)
    kwargs = mock_client_cls.call_args.kwargs
    assert kwargs["api_key"] == "test-key"
    assert kwargs["http_options"].timeout == 5000
    create = mock_client_cls.return_value.aio.chats.create
    assert create.call_args.kwargs["model"] == "gemini-custom"
