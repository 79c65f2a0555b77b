"""Gemini client and session factory helpers."""

import logging

from google import genai
from google.genai import types

from grail_scanner.config.constants import MediaResolution, ThinkingLevel
from grail_scanner.errors import ConfigurationError
from grail_scanner.infrastructure.llm.session import ForensicChatSession, GeminiChatSession
from grail_scanner.orchestrator.models import AuthenticationConfig
from grail_scanner.services.forensics.declarations import build_forensic_tool

logger = logging.getLogger(__name__)

_THINKING_LEVELS = {
    ThinkingLevel.LOW: types.ThinkingLevel.LOW,
    ThinkingLevel.HIGH: types.ThinkingLevel.HIGH,
}

_MEDIA_RESOLUTIONS = {
    MediaResolution.LOW: types.MediaResolution.MEDIA_RESOLUTION_LOW,
    MediaResolution.HIGH: types.MediaResolution.MEDIA_RESOLUTION_HIGH,
}


def ensure_api_key(config: AuthenticationConfig) -> None:
    """Raise ``ConfigurationError`` when no Gemini credential is configured."""
    if not config.api_key:
        raise ConfigurationError(
            "GEMINI_API_KEY is required. Get one at https://ai.google.dev/gemini-api/docs/api-key"
        )


def create_client(config: AuthenticationConfig) -> genai.Client:
    """
    Create a Gemini client for one authentication run.

    Raises:
        ConfigurationError: No API key is configured.
    """
    ensure_api_key(config)
    return genai.Client(
        api_key=config.api_key,
        http_options=types.HttpOptions(timeout=config.timeout_ms),
    )


def build_generate_config(config: AuthenticationConfig) -> types.GenerateContentConfig:
    """Generation config with the forensic tools attached and manual tool execution."""
    return types.GenerateContentConfig(
        tools=[build_forensic_tool()],
        automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        thinking_config=types.ThinkingConfig(thinking_level=_THINKING_LEVELS[config.thinking_level]),
        media_resolution=_MEDIA_RESOLUTIONS[config.media_resolution],
    )


def open_forensic_session(config: AuthenticationConfig) -> ForensicChatSession:
    """Open a new chat with the forensic tool declarations attached."""
    client = create_client(config)
    logger.debug(
        "Opening Gemini chat model=%s thinking=%s media=%s",
        config.model, config.thinking_level.value, config.media_resolution.value,
    )
    chat = client.aio.chats.create(model=config.model, config=build_generate_config(config))
    return GeminiChatSession(chat)
