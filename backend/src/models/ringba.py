"""
Ringba-sourced data owned by a dashboard user.

Accounts hold the (encrypted) credentials for a user's Ringba account;
campaigns and call logs are the synced Ringba records; AI analyses are
the OnScript transcript insights attached to a call log.
"""

import enum
import uuid

from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    Integer,
    Float,
    Text,
    LargeBinary,
    JSON,
    ForeignKey,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base


# =============================================================================
# Enums
# =============================================================================


class CampaignStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class Sentiment(str, enum.Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


def _enum_values(e):
    return [x.value for x in e]


# =============================================================================
# RingbaAccount Model
# =============================================================================


class RingbaAccount(Base):
    __tablename__ = "ringba_accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    account_id = Column(String(100), nullable=False)
    # Stored encrypted, see core.security.encrypt_secret
    api_key_encrypted = Column(LargeBinary, nullable=False)
    account_name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_sync = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

    user = relationship("User", back_populates="ringba_accounts")

    def __repr__(self) -> str:
        return f"<RingbaAccount(id={self.id}, account_id={self.account_id})>"


# =============================================================================
# RingbaCampaign Model
# =============================================================================


class RingbaCampaign(Base):
    __tablename__ = "ringba_campaigns"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    ringba_campaign_id = Column(String(100), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(CampaignStatus, name="campaign_status", values_callable=_enum_values), nullable=False, default=CampaignStatus.ACTIVE)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

    user = relationship("User", back_populates="campaigns")
    call_logs = relationship("RingbaCallLog", back_populates="campaign", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<RingbaCampaign(id={self.id}, name={self.name})>"


# =============================================================================
# RingbaCallLog Model
# =============================================================================


class RingbaCallLog(Base):
    __tablename__ = "ringba_call_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    campaign_id = Column(Uuid(as_uuid=True), ForeignKey("ringba_campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    ringba_call_id = Column(String(100), nullable=False, index=True)
    caller_number = Column(String(50), nullable=False)
    target_number = Column(String(50), nullable=False)
    call_start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    call_end_time = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=False, default=0)  # seconds
    status = Column(String(50), nullable=False)
    disposition = Column(String(100), nullable=True)
    recording_url = Column(String(1024), nullable=True)
    transcription = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())

    campaign = relationship("RingbaCampaign", back_populates="call_logs", lazy="joined")
    analyses = relationship(
        "AIAnalysis",
        back_populates="call_log",
        cascade="all, delete-orphan",
        order_by=lambda: [AIAnalysis.created_at.desc(), AIAnalysis.id.desc()],
    )

    def __repr__(self) -> str:
        return f"<RingbaCallLog(id={self.id}, ringba_call_id={self.ringba_call_id})>"


# =============================================================================
# AIAnalysis Model
# =============================================================================


class AIAnalysis(Base):
    __tablename__ = "ai_analysis"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    call_log_id = Column(Uuid(as_uuid=True), ForeignKey("ringba_call_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    transcript = Column(Text, nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    sentiment = Column(SQLEnum(Sentiment, name="sentiment", values_callable=_enum_values), nullable=False, default=Sentiment.NEUTRAL)
    key_points = Column(JSON, nullable=False, default=list)
    action_items = Column(JSON, nullable=False, default=list)
    quality_score = Column(Float, nullable=True)
    compliance_flags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())

    call_log = relationship("RingbaCallLog", back_populates="analyses")

    def __repr__(self) -> str:
        return f"<AIAnalysis(id={self.id}, sentiment={self.sentiment.value})>"
