"""Health and configuration status endpoints."""

from fastapi import APIRouter, Depends

from grail_scanner.api.dependencies import get_settings_dependency
from grail_scanner.api.models import HealthResponse, StatusResponse
from grail_scanner.config.settings import Settings, is_gemini_configured
from grail_scanner.services.forensics.router import FORENSIC_TOOLS

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings_dependency)) -> HealthResponse:
    """Health check."""
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/status", response_model=StatusResponse)
async def status(settings: Settings = Depends(get_settings_dependency)) -> StatusResponse:
    """Report whether the scanner can reach Gemini and with which defaults."""
    return StatusResponse(
        configured=is_gemini_configured(settings),
        model=settings.gemini_model,
        thinking_level=settings.thinking_level.value,
        media_resolution=settings.media_resolution.value,
        tools=list(FORENSIC_TOOLS),
    )
