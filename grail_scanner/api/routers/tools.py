"""Forensic tool endpoints.

Exposes the same tools the model calls, for manual checks and debugging.
"""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from grail_scanner.api.models import ToolInfo
from grail_scanner.errors import UnknownToolError
from grail_scanner.services.forensics.declarations import describe_tools
from grail_scanner.services.forensics.router import execute_tool_call

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[ToolInfo])
async def list_tools() -> list[dict[str, Any]]:
    """List the forensic tools offered to the model."""
    return describe_tools()


@router.post("/{name}")
async def run_tool(
    name: str,
    args: dict[str, Any] | None = Body(None),  # noqa: B008
) -> dict[str, Any]:
    """Run one forensic tool with string arguments."""
    str_args = {k: "" if v is None else str(v) for k, v in (args or {}).items()}
    try:
        result = await asyncio.to_thread(execute_tool_call, name, str_args)
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error("Error running tool %s: %s", name, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e
    return result.model_dump(mode="json")
