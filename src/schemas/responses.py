from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseResponse(BaseModel):
    """Base response schema with common fields."""

    success: bool = Field(..., description="Whether the operation was successful")
    timestamp: datetime = Field(default_factory=utcnow, description="Response timestamp")


class ErrorResponse(BaseResponse):
    """Error response schema."""

    success: bool = Field(default=False, description="Always false for errors")
    error: dict[str, Any] = Field(..., description="Error details")
    message: str = Field(..., description="Error message")


class HealthCheckResponse(BaseResponse):
    """Health check response schema."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    database: dict[str, Any] = Field(..., description="Database status")


class RootResponse(BaseResponse):
    """API welcome payload."""

    message: str = Field(..., description="Welcome message")
    version: str = Field(..., description="API version")
    docs: str | None = Field(None, description="Interactive docs path")
    health: str = Field(..., description="Health check path")
