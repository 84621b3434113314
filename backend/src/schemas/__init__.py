"""
Pydantic validation schemas for OnScript Analytics.

Contains request/response DTOs with validation rules.
These schemas enforce data integrity at API boundaries.
"""

from .common import (
    CamelModel,
    HealthResponse,
    RouteError,
    ErrorResponse,
)
from .ringba import EnvironmentCheckResponse
from .secure import (
    ProfileResponse,
    ProfileUpdate,
    UserCreate,
    RingbaAccountCreate,
    RingbaAccountResponse,
    CampaignResponse,
    CallLogResponse,
    AIAnalysisCreate,
    AIAnalysisResponse,
    AnalyticsSummary,
)

__all__ = [
    # Common schemas
    "CamelModel",
    "HealthResponse",
    "RouteError",
    "ErrorResponse",
    # Ringba diagnostics
    "EnvironmentCheckResponse",
    # Secure data
    "ProfileResponse",
    "ProfileUpdate",
    "UserCreate",
    "RingbaAccountCreate",
    "RingbaAccountResponse",
    "CampaignResponse",
    "CallLogResponse",
    "AIAnalysisCreate",
    "AIAnalysisResponse",
    "AnalyticsSummary",
]
