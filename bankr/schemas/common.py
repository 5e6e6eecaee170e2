"""Common schemas used across all routers."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain message response, also used for errors."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    engine: str = "connected"
    index: str
    abbreviations: int = Field(0, description="Entries in the abbreviation registry")
    abbreviation_source: str | None = Field(None, description="Where the registry was loaded from")
    environment: str
