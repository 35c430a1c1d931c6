"""
Common Response Models - Standardized API response structures.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseResponse(BaseModel):
    """
    Base response model for all API responses.

    Provides a common timestamp field.
    """
    timestamp: datetime = Field(default_factory=utcnow, description="Response timestamp (UTC)")


class ErrorDetail(BaseModel):
    """
    Detailed error information.

    Provides structured error data with code, message, and optional details.
    """
    code: str = Field(..., description="Error code (e.g., PROMETHEUS_ERROR, VALIDATION_ERROR)")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[str] = Field(None, description="Additional error details or context")
    field: Optional[str] = Field(None, description="Field name (for validation errors)")


class ErrorResponse(BaseResponse):
    """
    Standard error response for all API errors.

    Provides consistent error structure across all endpoints.
    """
    error: ErrorDetail = Field(..., description="Error details")


class HealthResponse(BaseResponse):
    status: str
    version: str
    prometheus: str
    prometheus_url: str
