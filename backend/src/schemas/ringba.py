"""
Schemas for the Ringba diagnostics endpoints.
"""

from typing import Optional

from pydantic import Field

from .common import CamelModel


class EnvironmentCheckResponse(CamelModel):
    """Presence report for the Ringba credentials. Never carries the full key."""

    has_api_key: bool = Field(..., description="RINGBA_API_KEY is set")
    api_key_length: int = Field(..., ge=0, description="Length of the key, 0 if unset")
    api_key_preview: Optional[str] = Field(
        None, description="First 10 and last 10 characters joined by '...'"
    )
    has_account_id: bool = Field(..., description="RINGBA_ACCOUNT_ID is set")
    account_id: Optional[str] = Field(None, description="Raw account identifier")
    timestamp: str = Field(..., description="ISO-8601 UTC generation time")

    model_config = {
        "json_schema_extra": {
            "example": {
                "hasApiKey": True,
                "apiKeyLength": 36,
                "apiKeyPreview": "09f0c9f0a4...4d2b1e9f17",
                "hasAccountId": True,
                "accountId": "RA1234567890",
                "timestamp": "2024-01-15T10:30:00.000Z",
            }
        }
    }
