"""
Pydantic schemas for the secure (user-scoped) data routes.

Field names are camelCase on the wire to match the dashboard client.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from .common import CamelModel


# =============================================================================
# Profile
# =============================================================================


class ProfileSettings(CamelModel):
    notifications: bool
    theme: str
    timezone: str


class ProfileResponse(CamelModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    company: Optional[str] = None
    phone: Optional[str] = None
    role: str
    plan: str
    is_active: bool
    settings: ProfileSettings
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """
    Self-service profile update.

    Role, plan, and activation are admin concerns and are not accepted here.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    company: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    notifications: Optional[bool] = None
    theme: Optional[str] = Field(None, pattern="^(light|dark)$")
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)


class UserCreate(BaseModel):
    """Admin-only: create a dashboard user. The password is generated server-side."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    company: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    role: str = Field("viewer", pattern="^(admin|agent|viewer)$")
    plan: str = Field("free", pattern="^(free|pro|enterprise)$")


# =============================================================================
# Ringba Accounts & Campaigns
# =============================================================================


class RingbaAccountCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    account_id: str = Field(..., min_length=1, max_length=100)
    api_key: str = Field(..., min_length=1)
    account_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True


class RingbaAccountResponse(CamelModel):
    id: UUID
    user_id: UUID
    account_id: str
    api_key_preview: Optional[str] = None
    account_name: str
    is_active: bool
    last_sync: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CampaignResponse(CamelModel):
    id: UUID
    user_id: UUID
    ringba_campaign_id: str
    name: str
    description: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Call Logs & Analysis
# =============================================================================


class AIAnalysisResponse(CamelModel):
    id: UUID
    user_id: UUID
    call_log_id: UUID
    transcript: str
    summary: str
    sentiment: str
    key_points: List[str] = []
    action_items: List[str] = []
    quality_score: Optional[float] = None
    compliance_flags: List[str] = []
    created_at: datetime


class AIAnalysisCreate(BaseModel):
    """Insights produced for one of the user's call logs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    call_log_id: UUID
    transcript: str = ""
    summary: str = ""
    sentiment: str = Field("neutral", pattern="^(positive|negative|neutral)$")
    key_points: List[str] = []
    action_items: List[str] = []
    quality_score: Optional[float] = Field(None, ge=0, le=100)
    compliance_flags: List[str] = []


class CallLogResponse(CamelModel):
    id: UUID
    user_id: UUID
    campaign_id: UUID
    campaign_name: Optional[str] = None
    ringba_call_id: str
    caller_number: str
    target_number: str
    call_start_time: datetime
    call_end_time: Optional[datetime] = None
    duration: int
    status: str
    disposition: Optional[str] = None
    recording_url: Optional[str] = None
    transcription: Optional[str] = None
    ai_analysis: List[AIAnalysisResponse] = []
    created_at: datetime


# =============================================================================
# Analytics
# =============================================================================


class AnalyticsSummary(CamelModel):
    total_calls: int
    total_campaigns: int
    avg_call_duration: float
    sentiment_breakdown: Dict[str, int]
    quality_score_avg: float
