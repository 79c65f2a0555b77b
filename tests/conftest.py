"""Pytest configuration and fixtures."""

import pytest

from grail_scanner.config.settings import Settings
from grail_scanner.orchestrator.authenticator import AuthenticationOrchestrator
from grail_scanner.utils.image import ImagePayload
from tests.helpers import JPEG_BYTES, FakeChatSession


@pytest.fixture
def settings():
    """Provide settings fixture with a test credential and no .env lookup."""
    return Settings(gemini_api_key="test-key", _env_file=None)


@pytest.fixture
def image():
    return ImagePayload(data=JPEG_BYTES, mime_type="image/jpeg")


@pytest.fixture
def make_orchestrator(settings):
    """Build an orchestrator wired to a given fake session."""

    def _make(session: FakeChatSession, settings_override: Settings | None = None):
        return AuthenticationOrchestrator(
            settings_override or settings, session_factory=lambda config: session
        )

    return _make
