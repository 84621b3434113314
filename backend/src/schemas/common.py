"""
Common Pydantic schemas shared across the application.

Contains health check and error schemas, plus the camelCase base model
used for bodies consumed by the dashboard client.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# Wire Base
# =============================================================================

class CamelModel(BaseModel):
    """
    Base for response bodies read by the dashboard client.

    Python attributes stay snake_case; JSON keys are camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Health Check Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """
    Health check response schema.

    Used by monitoring systems to verify service health.
    """

    status: str = Field(
        ...,
        description="Overall health status (healthy, unhealthy)"
    )
    version: str = Field(
        ...,
        description="Application version"
    )
    timestamp: datetime = Field(
        ...,
        description="Current server timestamp"
    )
    database: str = Field(
        ...,
        description="Database connection status"
    )
    environment: str = Field(
        ...,
        description="Runtime environment (development, production)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "timestamp": "2024-01-15T10:30:00Z",
                "database": "connected",
                "environment": "development"
            }
        }
    }


# =============================================================================
# Error Schemas
# =============================================================================

class RouteError(BaseModel):
    """
    Error body returned by the secure data routes.

    The message is fixed per route; the underlying cause is never exposed.
    """

    error: str = Field(..., description="Fixed, user-facing error message")

    model_config = {
        "json_schema_extra": {
            "example": {"error": "Failed to fetch campaigns"}
        }
    }


class ErrorResponse(BaseModel):
    """
    Standard error response for application-wide exception handlers.
    """

    success: bool = Field(
        default=False,
        description="Always false for errors"
    )
    error: str = Field(
        ...,
        description="Error type or category"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    request_id: Optional[str] = Field(
        default=None,
        description="Request ID for support/debugging"
    )
