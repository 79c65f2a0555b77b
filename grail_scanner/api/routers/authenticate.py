"""Authentication endpoints."""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from grail_scanner.api.dependencies import get_orchestrator, get_settings_dependency
from grail_scanner.config.settings import Settings
from grail_scanner.errors import ConfigurationError, InvalidImageError, InvalidOverrideError
from grail_scanner.orchestrator.authenticator import AuthenticationOrchestrator
from grail_scanner.orchestrator.models import AuthenticationConfig, AuthenticationResult
from grail_scanner.utils.image import ImagePayload, image_from_base64, image_from_bytes

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_image(
    image: UploadFile | None, image_base64: str | None, settings: Settings
) -> ImagePayload:
    """Turn the multipart upload (or a base64 data URL) into an ImagePayload."""
    try:
        if image is not None:
            data = await image.read(settings.max_image_bytes + 1)
            payload = image_from_bytes(data, image.content_type)
        elif image_base64:
            payload = image_from_base64(image_base64)
        else:
            raise InvalidImageError("An image file or base64 image is required")
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if payload.size > settings.max_image_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image exceeds the {settings.max_image_bytes} byte limit",
        )
    return payload


def _resolve_config(
    orchestrator: AuthenticationOrchestrator, overrides: dict[str, Any]
) -> AuthenticationConfig:
    try:
        return orchestrator.resolve_config(overrides)
    except InvalidOverrideError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ConfigurationError as e:
        logger.warning("Authentication unavailable: %s", e)
        raise HTTPException(status_code=503, detail=str(e)) from e


def _overrides(
    model: str | None,
    thinking_level: str | None,
    media_resolution: str | None,
    self_correction_threshold: float | None,
) -> dict[str, Any]:
    return {
        "model": model or None,
        "thinking_level": thinking_level.lower() if thinking_level else None,
        "media_resolution": media_resolution.lower() if media_resolution else None,
        "self_correction_threshold": self_correction_threshold,
    }


@router.post("", response_model=AuthenticationResult)
async def authenticate(
    image: UploadFile | None = File(None),  # noqa: B008
    image_base64: str | None = Form(None),
    model: str | None = Form(None),
    thinking_level: str | None = Form(None),
    media_resolution: str | None = Form(None),
    self_correction_threshold: float | None = Form(None),
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
    orchestrator: AuthenticationOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> AuthenticationResult:
    """Authenticate a garment from a photo of its label or construction details."""
    payload = await _read_image(image, image_base64, settings)
    config = _resolve_config(
        orchestrator,
        _overrides(model, thinking_level, media_resolution, self_correction_threshold),
    )
    try:
        return await orchestrator.authenticate(payload, config)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except Exception as e:
        logger.error("Error authenticating item: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/stream", response_class=StreamingResponse)
async def authenticate_stream(
    image: UploadFile | None = File(None),  # noqa: B008
    image_base64: str | None = Form(None),
    model: str | None = Form(None),
    thinking_level: str | None = Form(None),
    media_resolution: str | None = Form(None),
    self_correction_threshold: float | None = Form(None),
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
    orchestrator: AuthenticationOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> StreamingResponse:
    """Stream scan progress and the final result as Server-Sent Events."""
    payload = await _read_image(image, image_base64, settings)
    config = _resolve_config(
        orchestrator,
        _overrides(model, thinking_level, media_resolution, self_correction_threshold),
    )

    async def generate() -> AsyncIterator[str]:
        try:
            async for kind, body in orchestrator.authenticate_stream(payload, config):
                event = {"event": kind, **body.model_dump(mode="json")}
                yield f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
            logger.info("Stream completed successfully")
        except Exception as e:
            logger.error("Error in streaming: %s", e, exc_info=True)
            yield f"data: {json.dumps({'event': 'error', 'error': 'An error occurred'}, ensure_ascii=False)}\n\n"

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
