"""
Secure User Service

Session-scoped data access for the dashboard. Each instance is bound to
one database session and one authenticated user, and every query is
filtered by that user's id, so a route never passes identity explicitly:

    service = SecureUserService(db, user)
    campaigns = service.get_user_campaigns()

Results are returned as JSON-ready dicts (camelCase keys) so routes can
pass them through unchanged. Database errors propagate; the routes own
the mapping to HTTP responses.

@module services/secure_user_service
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ..core.auth import get_current_user
from ..core.database import get_db
from ..core.security import decrypt_secret, encrypt_secret, hash_password, preview_secret
from ..models.user import User, UserPlan, UserRole, UserTheme
from ..models.ringba import RingbaAccount, RingbaCampaign, RingbaCallLog, AIAnalysis, Sentiment
from ..schemas.secure import (
    AIAnalysisCreate,
    AIAnalysisResponse,
    AnalyticsSummary,
    CallLogResponse,
    CampaignResponse,
    ProfileResponse,
    ProfileSettings,
    ProfileUpdate,
    RingbaAccountCreate,
    RingbaAccountResponse,
    UserCreate,
)

logger = logging.getLogger(__name__)

DEFAULT_CALL_LOG_LIMIT = 50
MAX_CALL_LOG_LIMIT = 500

# Fields a user may change on their own profile
_PROFILE_FIELDS = ("first_name", "last_name", "company", "phone", "notifications", "theme", "timezone")
_NULLABLE_PROFILE_FIELDS = ("company", "phone")


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def _as_utc(value: datetime) -> datetime:
    """Naive UTC form of a datetime, for comparison with stored timestamps."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# =============================================================================
# Row -> wire conversion
# =============================================================================

def serialize_profile(user: User) -> Dict[str, Any]:
    return _dump(ProfileResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        company=user.company,
        phone=user.phone,
        role=user.role.value,
        plan=user.plan.value,
        is_active=user.is_active,
        settings=ProfileSettings(
            notifications=user.notifications,
            theme=user.theme.value,
            timezone=user.timezone,
        ),
        created_at=user.created_at,
        updated_at=user.updated_at,
        last_login=user.last_login,
    ))


def serialize_account(account: RingbaAccount) -> Dict[str, Any]:
    """The stored API key never leaves the service; only its preview does."""
    try:
        preview = preview_secret(decrypt_secret(account.api_key_encrypted))
    except ValueError:
        logger.warning(f"Stored API key for Ringba account {account.id} could not be decrypted")
        preview = None

    return _dump(RingbaAccountResponse(
        id=account.id,
        user_id=account.user_id,
        account_id=account.account_id,
        api_key_preview=preview,
        account_name=account.account_name,
        is_active=account.is_active,
        last_sync=account.last_sync,
        created_at=account.created_at,
        updated_at=account.updated_at,
    ))


def serialize_campaign(campaign: RingbaCampaign) -> Dict[str, Any]:
    return _dump(CampaignResponse(
        id=campaign.id,
        user_id=campaign.user_id,
        ringba_campaign_id=campaign.ringba_campaign_id,
        name=campaign.name,
        description=campaign.description,
        status=campaign.status.value,
        created_at=campaign.created_at,
        updated_at=campaign.updated_at,
    ))


def _analysis_model(analysis: AIAnalysis) -> AIAnalysisResponse:
    return AIAnalysisResponse(
        id=analysis.id,
        user_id=analysis.user_id,
        call_log_id=analysis.call_log_id,
        transcript=analysis.transcript,
        summary=analysis.summary,
        sentiment=analysis.sentiment.value,
        key_points=analysis.key_points or [],
        action_items=analysis.action_items or [],
        quality_score=analysis.quality_score,
        compliance_flags=analysis.compliance_flags or [],
        created_at=analysis.created_at,
    )


def serialize_analysis(analysis: AIAnalysis) -> Dict[str, Any]:
    return _dump(_analysis_model(analysis))


def serialize_call_log(call_log: RingbaCallLog) -> Dict[str, Any]:
    return _dump(CallLogResponse(
        id=call_log.id,
        user_id=call_log.user_id,
        campaign_id=call_log.campaign_id,
        campaign_name=call_log.campaign.name if call_log.campaign else None,
        ringba_call_id=call_log.ringba_call_id,
        caller_number=call_log.caller_number,
        target_number=call_log.target_number,
        call_start_time=call_log.call_start_time,
        call_end_time=call_log.call_end_time,
        duration=call_log.duration,
        status=call_log.status,
        disposition=call_log.disposition,
        recording_url=call_log.recording_url,
        transcription=call_log.transcription,
        ai_analysis=[_analysis_model(a) for a in call_log.analyses],
        created_at=call_log.created_at,
    ))


# =============================================================================
# Service
# =============================================================================

class SecureUserService:
    """
    Data access scoped to a single authenticated user.

    Every query filters on the bound user's id; there is no way to reach
    another user's rows except the admin-only get_all_users() and create_user().
    """

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    def get_current_user_profile(self) -> Optional[Dict[str, Any]]:
        """Profile of the bound user, or None if the row no longer exists."""
        user = self.db.query(User).filter(User.id == self.user.id).first()
        if user is None:
            return None
        return serialize_profile(user)

    def update_user_profile(self, updates: ProfileUpdate) -> Optional[Dict[str, Any]]:
        """
        Apply the provided profile fields and return the updated profile.

        Fields left out are untouched; an explicit null clears company or phone.
        """
        user = self.db.query(User).filter(User.id == self.user.id).first()
        if user is None:
            return None

        changes = updates.model_dump(exclude_unset=True)
        for field in _PROFILE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if value is None and field not in _NULLABLE_PROFILE_FIELDS:
                continue
            if field == "theme":
                value = UserTheme(value)
            setattr(user, field, value)

        user.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Profile updated for user {user.id}: {sorted(changes)}")
        return serialize_profile(user)

    # -------------------------------------------------------------------------
    # Ringba data
    # -------------------------------------------------------------------------

    def get_user_ringba_accounts(self) -> List[Dict[str, Any]]:
        accounts = (
            self.db.query(RingbaAccount)
            .filter(RingbaAccount.user_id == self.user.id)
            .order_by(RingbaAccount.created_at.desc())
            .all()
        )
        return [serialize_account(a) for a in accounts]

    def create_ringba_account(self, account_data: RingbaAccountCreate) -> Dict[str, Any]:
        """Link a Ringba account to the current user. The API key is stored encrypted."""
        account = RingbaAccount(
            user_id=self.user.id,
            account_id=account_data.account_id,
            api_key_encrypted=encrypt_secret(account_data.api_key),
            account_name=account_data.account_name,
            is_active=account_data.is_active,
        )
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)

        logger.info(f"Ringba account {account.account_id} linked for user {self.user.id}")
        return serialize_account(account)

    def get_user_campaigns(self) -> List[Dict[str, Any]]:
        """Campaigns owned by the current user, newest first."""
        campaigns = (
            self.db.query(RingbaCampaign)
            .filter(RingbaCampaign.user_id == self.user.id)
            .order_by(RingbaCampaign.created_at.desc())
            .all()
        )
        return [serialize_campaign(c) for c in campaigns]

    def get_user_call_logs(
        self,
        limit: int = DEFAULT_CALL_LOG_LIMIT,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Call logs for the current user, most recent call first.

        Each entry carries its campaign name and any AI analyses.

        Args:
            limit: Page size (clamped to 1..MAX_CALL_LOG_LIMIT)
            offset: Rows to skip (negative treated as 0)
        """
        limit = max(1, min(limit, MAX_CALL_LOG_LIMIT))
        offset = max(0, offset)

        call_logs = (
            self.db.query(RingbaCallLog)
            .options(selectinload(RingbaCallLog.analyses))
            .filter(RingbaCallLog.user_id == self.user.id)
            .order_by(RingbaCallLog.call_start_time.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [serialize_call_log(c) for c in call_logs]

    def get_user_ai_analysis(self, call_log_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        query = self.db.query(AIAnalysis).filter(AIAnalysis.user_id == self.user.id)
        if call_log_id is not None:
            query = query.filter(AIAnalysis.call_log_id == call_log_id)
        query = query.order_by(AIAnalysis.created_at.desc(), AIAnalysis.id.desc())
        return [serialize_analysis(a) for a in query.all()]

    def create_ai_analysis(self, analysis_data: AIAnalysisCreate) -> Dict[str, Any]:
        """
        Attach an AI analysis to one of the current user's call logs.

        Raises:
            LookupError: If the call log does not exist or belongs to another user
        """
        call_log = (
            self.db.query(RingbaCallLog)
            .filter(
                RingbaCallLog.id == analysis_data.call_log_id,
                RingbaCallLog.user_id == self.user.id,
            )
            .first()
        )
        if call_log is None:
            raise LookupError(f"Call log {analysis_data.call_log_id} not found")

        analysis = AIAnalysis(
            user_id=self.user.id,
            call_log_id=call_log.id,
            transcript=analysis_data.transcript,
            summary=analysis_data.summary,
            sentiment=Sentiment(analysis_data.sentiment),
            key_points=analysis_data.key_points,
            action_items=analysis_data.action_items,
            quality_score=analysis_data.quality_score,
            compliance_flags=analysis_data.compliance_flags,
        )
        self.db.add(analysis)
        self.db.commit()
        self.db.refresh(analysis)
        return serialize_analysis(analysis)

    def get_user_analytics(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Summary metrics across the user's call logs.

        Calls are attributed the sentiment of their most recent analysis;
        calls without one count as neutral. The quality average only covers
        calls whose latest analysis carries a score.

        The date range applies only when both bounds are given; a lone
        start or end is ignored. Offset-aware bounds are compared in UTC.
        """
        query = (
            self.db.query(RingbaCallLog)
            .options(selectinload(RingbaCallLog.analyses))
            .filter(RingbaCallLog.user_id == self.user.id)
        )
        if start is not None and end is not None:
            query = query.filter(
                RingbaCallLog.call_start_time >= _as_utc(start),
                RingbaCallLog.call_start_time <= _as_utc(end),
            )
        call_logs = query.all()

        total_campaigns = (
            self.db.query(func.count(RingbaCampaign.id))
            .filter(RingbaCampaign.user_id == self.user.id)
            .scalar()
        ) or 0

        total_calls = len(call_logs)
        avg_duration = (
            sum(c.duration or 0 for c in call_logs) / total_calls if total_calls else 0.0
        )

        sentiment_breakdown: Dict[str, int] = {}
        quality_scores = []
        for call_log in call_logs:
            latest = call_log.analyses[0] if call_log.analyses else None
            sentiment = latest.sentiment.value if latest else Sentiment.NEUTRAL.value
            sentiment_breakdown[sentiment] = sentiment_breakdown.get(sentiment, 0) + 1
            if latest is not None and latest.quality_score is not None:
                quality_scores.append(latest.quality_score)

        quality_avg = sum(quality_scores) / len(quality_scores) if quality_scores else 0.0

        return _dump(AnalyticsSummary(
            total_calls=total_calls,
            total_campaigns=total_campaigns,
            avg_call_duration=avg_duration,
            sentiment_breakdown=sentiment_breakdown,
            quality_score_avg=quality_avg,
        ))

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    def is_current_user_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN

    def get_current_user_role(self) -> Optional[str]:
        return self.user.role.value if self.user.role else None

    def get_all_users(self) -> List[Dict[str, Any]]:
        """
        Every user profile, newest first. Admin only.

        Raises:
            PermissionError: If the bound user is not an admin
        """
        if not self.is_current_user_admin():
            raise PermissionError("Admin access required")

        users = self.db.query(User).order_by(User.created_at.desc()).all()
        return [serialize_profile(u) for u in users]

    def create_user(self, user_data: UserCreate) -> Optional[Dict[str, Any]]:
        """
        Create a dashboard user. Admin only.

        Sign-in goes through the identity provider, so the stored password
        is random and unusable.

        Returns:
            The new user's profile, or None if the email is already taken

        Raises:
            PermissionError: If the bound user is not an admin
        """
        if not self.is_current_user_admin():
            raise PermissionError("Admin access required")

        email = user_data.email.strip().lower()
        if self.db.query(User).filter(User.email == email).first() is not None:
            logger.warning(f"User creation skipped, email already registered: {email}")
            return None

        user = User(
            email=email,
            password_hash=hash_password(secrets.token_urlsafe(24)),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            company=user_data.company,
            phone=user_data.phone,
            role=UserRole(user_data.role),
            plan=UserPlan(user_data.plan),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User {user.id} ({user.role.value}) created by admin {self.user.id}")
        return serialize_profile(user)


# =============================================================================
# Dependency Injection
# =============================================================================

def get_secure_user_service(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> SecureUserService:
    """FastAPI dependency: a SecureUserService bound to the request's user."""
    return SecureUserService(db, user)
