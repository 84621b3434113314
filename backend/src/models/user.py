"""
User model for the dashboard's authenticated users.
"""

import enum
import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Uuid, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base


# =============================================================================
# Enums
# =============================================================================


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    AGENT = "agent"
    VIEWER = "viewer"


class UserPlan(str, enum.Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class UserTheme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"


def _enum_values(e):
    return [x.value for x in e]


# =============================================================================
# User Model
# =============================================================================


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(SQLEnum(UserRole, name="user_role", values_callable=_enum_values), nullable=False, default=UserRole.VIEWER)
    plan = Column(SQLEnum(UserPlan, name="user_plan", values_callable=_enum_values), nullable=False, default=UserPlan.FREE)
    is_active = Column(Boolean, nullable=False, default=True)

    # Display preferences
    notifications = Column(Boolean, nullable=False, default=True)
    theme = Column(SQLEnum(UserTheme, name="user_theme", values_callable=_enum_values), nullable=False, default=UserTheme.LIGHT)
    timezone = Column(String(64), nullable=False, default="UTC")

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

    ringba_accounts = relationship("RingbaAccount", back_populates="user", cascade="all, delete-orphan")
    campaigns = relationship("RingbaCampaign", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"
