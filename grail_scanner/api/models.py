"""Request/Response models for API endpoints."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")


class StatusResponse(BaseModel):
    """Response model for the configuration status endpoint."""

    configured: bool = Field(..., description="Whether a Gemini API key is set")
    model: str = Field(..., description="Default Gemini model")
    thinking_level: str = Field(..., description="Default thinking level")
    media_resolution: str = Field(..., description="Default media resolution")
    tools: list[str] = Field(..., description="Registered forensic tool names")


class ToolInfo(BaseModel):
    """Description of one forensic tool."""

    name: str
    description: str
    parameters: dict[str, str]
    required: list[str]
