"""FastAPI dependencies."""

from functools import lru_cache

from fastapi import Depends

from grail_scanner.config.settings import Settings, get_settings
from grail_scanner.orchestrator.authenticator import AuthenticationOrchestrator


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings as a FastAPI dependency."""
    return get_settings()


def get_orchestrator(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> AuthenticationOrchestrator:
    """Orchestrator bound to the application settings."""
    return AuthenticationOrchestrator(settings)
