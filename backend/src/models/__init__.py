"""
SQLAlchemy ORM models for OnScript Analytics.

Contains database table definitions and relationships.
Third-party API keys are stored encrypted in the database.
"""

from .user import User, UserRole, UserPlan, UserTheme
from .ringba import RingbaAccount, RingbaCampaign, RingbaCallLog, AIAnalysis, CampaignStatus, Sentiment

__all__ = [
    # User model and enums
    "User",
    "UserRole",
    "UserPlan",
    "UserTheme",
    # Ringba data
    "RingbaAccount",
    "RingbaCampaign",
    "RingbaCallLog",
    "AIAnalysis",
    "CampaignStatus",
    "Sentiment",
]
