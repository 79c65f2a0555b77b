"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grail_scanner import __version__
from grail_scanner.api.routers import api_router
from grail_scanner.config.settings import Settings, get_settings, is_gemini_configured
from grail_scanner.infrastructure.logging.logger import setup_logging
from grail_scanner.services.forensics.router import FORENSIC_TOOLS

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate required configuration at startup."""
    if not is_gemini_configured(settings):
        logger.warning("GEMINI_API_KEY is not set; authentication requests will fail with 503")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info(
        "Starting Grail Scanner (model=%s, thinking=%s, tools=%s)",
        settings.gemini_model, settings.thinking_level.value, ", ".join(FORENSIC_TOOLS),
    )
    _validate_startup_config(settings)
    yield
    logger.info("Shutting down Grail Scanner")


app = FastAPI(
    title="Grail Scanner",
    description="Vintage clothing authentication with Gemini and forensic tools",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")
