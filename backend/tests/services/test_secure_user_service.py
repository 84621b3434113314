"""Tests for SecureUserService: per-user scoping, ordering, and analytics math."""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.security import encrypt_secret
from src.models.ringba import AIAnalysis, RingbaAccount, RingbaCallLog, RingbaCampaign, Sentiment
from src.models.user import UserRole
from src.schemas.secure import AIAnalysisCreate, ProfileUpdate, RingbaAccountCreate, UserCreate
from src.services.secure_user_service import SecureUserService


@pytest.fixture
def seed(db_session):
    """Helpers that insert rows owned by a given user."""

    class _Seed:
        @staticmethod
        def campaign(user, name="Campaign", created_at=datetime(2024, 1, 1)):
            row = RingbaCampaign(
                user_id=user.id,
                ringba_campaign_id=f"CA-{name}",
                name=name,
                created_at=created_at,
                updated_at=created_at,
            )
            db_session.add(row)
            db_session.commit()
            return row

        @staticmethod
        def call(user, campaign, start, duration=60, ringba_call_id=None):
            row = RingbaCallLog(
                user_id=user.id,
                campaign_id=campaign.id,
                ringba_call_id=ringba_call_id or f"CALL-{start:%Y%m%d%H%M}",
                caller_number="+15550000000",
                target_number="+15551111111",
                call_start_time=start,
                duration=duration,
                status="completed",
            )
            db_session.add(row)
            db_session.commit()
            return row

        @staticmethod
        def analysis(user, call_log, sentiment, quality_score=None, created_at=datetime(2024, 6, 1)):
            row = AIAnalysis(
                user_id=user.id,
                call_log_id=call_log.id,
                transcript="...",
                summary="...",
                sentiment=sentiment,
                quality_score=quality_score,
                key_points=["price objection"],
                created_at=created_at,
            )
            db_session.add(row)
            db_session.commit()
            return row

    return _Seed


# =============================================================================
# Campaigns
# =============================================================================


def test_campaigns_empty_for_new_user(db_session, make_user):
    service = SecureUserService(db_session, make_user())

    assert service.get_user_campaigns() == []


def test_campaigns_scoped_and_newest_first(db_session, make_user, seed):
    alice, bob = make_user(), make_user()
    seed.campaign(alice, "A1", datetime(2024, 1, 1))
    seed.campaign(alice, "A2", datetime(2024, 3, 1))
    seed.campaign(bob, "B1", datetime(2024, 2, 1))

    campaigns = SecureUserService(db_session, alice).get_user_campaigns()

    assert [c["name"] for c in campaigns] == ["A2", "A1"]
    assert set(campaigns[0]) == {
        "id", "userId", "ringbaCampaignId", "name", "description",
        "status", "createdAt", "updatedAt",
    }


def test_campaigns_propagate_database_errors(db_session, make_user, monkeypatch):
    service = SecureUserService(db_session, make_user())

    def broken_query(*args, **kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(db_session, "query", broken_query)

    with pytest.raises(RuntimeError):
        service.get_user_campaigns()


# =============================================================================
# Call logs & analyses
# =============================================================================


def test_call_logs_limit_is_clamped(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    for hour in range(3):
        seed.call(user, campaign, datetime(2024, 5, 1, hour))

    service = SecureUserService(db_session, user)

    assert len(service.get_user_call_logs(limit=0)) == 1
    assert len(service.get_user_call_logs(limit=10, offset=-5)) == 3


def test_call_logs_include_analyses(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user, "Final Expense")
    call = seed.call(user, campaign, datetime(2024, 5, 1, 10))
    seed.analysis(user, call, Sentiment.NEGATIVE, 42.0)

    [log] = SecureUserService(db_session, user).get_user_call_logs()

    assert log["campaignName"] == "Final Expense"
    assert log["aiAnalysis"][0]["sentiment"] == "negative"
    assert log["aiAnalysis"][0]["keyPoints"] == ["price objection"]


def test_ai_analysis_filtered_by_call_log(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    first = seed.call(user, campaign, datetime(2024, 5, 1, 10))
    second = seed.call(user, campaign, datetime(2024, 5, 1, 11))
    seed.analysis(user, first, Sentiment.POSITIVE)
    seed.analysis(user, second, Sentiment.NEUTRAL)

    service = SecureUserService(db_session, user)

    assert len(service.get_user_ai_analysis()) == 2
    only = service.get_user_ai_analysis(second.id)
    assert [a["callLogId"] for a in only] == [str(second.id)]


# =============================================================================
# Analytics
# =============================================================================


def test_analytics_for_user_without_calls(db_session, make_user):
    analytics = SecureUserService(db_session, make_user()).get_user_analytics()

    assert analytics == {
        "totalCalls": 0,
        "totalCampaigns": 0,
        "avgCallDuration": 0.0,
        "sentimentBreakdown": {},
        "qualityScoreAvg": 0.0,
    }


def test_analytics_counts_unanalysed_calls_as_neutral(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    analysed = seed.call(user, campaign, datetime(2024, 5, 1, 9), duration=100)
    seed.call(user, campaign, datetime(2024, 5, 1, 10), duration=200)
    seed.analysis(user, analysed, Sentiment.POSITIVE, quality_score=90.0)

    analytics = SecureUserService(db_session, user).get_user_analytics()

    assert analytics["totalCalls"] == 2
    assert analytics["avgCallDuration"] == 150.0
    assert analytics["sentimentBreakdown"] == {"positive": 1, "neutral": 1}
    assert analytics["qualityScoreAvg"] == 90.0


def test_analytics_uses_latest_analysis_per_call(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    call = seed.call(user, campaign, datetime(2024, 5, 1, 9))
    seed.analysis(user, call, Sentiment.NEGATIVE, 20.0, created_at=datetime(2024, 6, 1))
    seed.analysis(user, call, Sentiment.POSITIVE, 70.0, created_at=datetime(2024, 6, 2))

    analytics = SecureUserService(db_session, user).get_user_analytics()

    assert analytics["sentimentBreakdown"] == {"positive": 1}
    assert analytics["qualityScoreAvg"] == 70.0


def test_analytics_date_range(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    seed.call(user, campaign, datetime(2024, 4, 30, 23))
    seed.call(user, campaign, datetime(2024, 5, 15, 12))
    seed.call(user, campaign, datetime(2024, 6, 1, 0, 1))

    analytics = SecureUserService(db_session, user).get_user_analytics(
        start=datetime(2024, 5, 1), end=datetime(2024, 5, 31, 23, 59),
    )

    assert analytics["totalCalls"] == 1
    assert analytics["totalCampaigns"] == 1


def test_analytics_ignores_one_sided_range(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    seed.call(user, campaign, datetime(2024, 5, 15, 12))

    service = SecureUserService(db_session, user)

    assert service.get_user_analytics(start=datetime(2024, 6, 1))["totalCalls"] == 1
    assert service.get_user_analytics(end=datetime(2024, 4, 1))["totalCalls"] == 1


def test_analytics_range_bounds_compared_in_utc(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    seed.call(user, campaign, datetime(2024, 5, 1, 3, 0))
    plus_five = timezone(timedelta(hours=5))

    analytics = SecureUserService(db_session, user).get_user_analytics(
        start=datetime(2024, 5, 1, 5, 0, tzinfo=plus_five),
        end=datetime(2024, 5, 2, 4, 59, tzinfo=plus_five),
    )

    assert analytics["totalCalls"] == 1


def test_latest_analysis_tie_broken_by_id(db_session, make_user, seed):
    user = make_user()
    campaign = seed.campaign(user)
    call = seed.call(user, campaign, datetime(2024, 5, 1, 9))
    same_time = datetime(2024, 6, 1, 12)
    first = seed.analysis(user, call, Sentiment.NEGATIVE, 10.0, created_at=same_time)
    second = seed.analysis(user, call, Sentiment.POSITIVE, 90.0, created_at=same_time)
    latest = max((first, second), key=lambda a: a.id)

    db_session.expire_all()
    analytics = SecureUserService(db_session, user).get_user_analytics()

    assert analytics["sentimentBreakdown"] == {latest.sentiment.value: 1}
    assert analytics["qualityScoreAvg"] == latest.quality_score


# =============================================================================
# Profile, accounts, roles
# =============================================================================


def test_update_profile_only_touches_given_fields(db_session, make_user):
    user = make_user(first_name="Sam", phone="+15552223333")
    service = SecureUserService(db_session, user)

    profile = service.update_user_profile(ProfileUpdate(last_name="Okafor"))

    assert profile["firstName"] == "Sam"
    assert profile["lastName"] == "Okafor"
    assert profile["phone"] == "+15552223333"


def test_ringba_account_with_undecryptable_key_has_no_preview(db_session, make_user):
    user = make_user()
    db_session.add(RingbaAccount(
        user_id=user.id,
        account_id="RA1",
        api_key_encrypted=b"garbage-not-a-fernet-token",
        account_name="Broken",
    ))
    db_session.add(RingbaAccount(
        user_id=user.id,
        account_id="RA2",
        api_key_encrypted=encrypt_secret("abcdefghijKLMNOPQRSTUVWXYZ0123456789"),
        account_name="Good",
    ))
    db_session.commit()

    accounts = {a["accountId"]: a for a in SecureUserService(db_session, user).get_user_ringba_accounts()}

    assert accounts["RA1"]["apiKeyPreview"] is None
    assert accounts["RA2"]["apiKeyPreview"] == "abcdefghij...0123456789"


def test_role_helpers(db_session, make_user):
    admin = SecureUserService(db_session, make_user(role=UserRole.ADMIN))
    viewer = SecureUserService(db_session, make_user(role=UserRole.VIEWER))

    assert admin.is_current_user_admin() is True
    assert admin.get_current_user_role() == "admin"
    assert viewer.is_current_user_admin() is False
    assert viewer.get_current_user_role() == "viewer"


def test_get_all_users_requires_admin(db_session, make_user):
    viewer = SecureUserService(db_session, make_user(role=UserRole.VIEWER))

    with pytest.raises(PermissionError):
        viewer.get_all_users()


def test_update_profile_clears_nullable_fields_only(db_session, make_user):
    user = make_user(company="Acme", phone="+15552223333")
    service = SecureUserService(db_session, user)

    profile = service.update_user_profile(ProfileUpdate(company=None, first_name=None))

    assert profile["company"] is None
    assert profile["phone"] == "+15552223333"
    assert profile["firstName"] == user.first_name


# =============================================================================
# Creation
# =============================================================================


def test_create_ringba_account_stores_key_encrypted(db_session, make_user):
    user = make_user()
    key = "abcdefghijKLMNOPQRSTUVWXYZ0123456789"

    account = SecureUserService(db_session, user).create_ringba_account(
        RingbaAccountCreate(account_id="RA9", api_key=key, account_name="Primary"),
    )

    stored = db_session.query(RingbaAccount).one()
    assert stored.user_id == user.id
    assert key.encode("utf-8") not in stored.api_key_encrypted
    assert account["accountId"] == "RA9"
    assert account["apiKeyPreview"] == "abcdefghij...0123456789"
    assert "apiKey" not in account


def test_create_ai_analysis_for_own_call_log(db_session, make_user, seed):
    user = make_user()
    call = seed.call(user, seed.campaign(user), datetime(2024, 5, 1, 10))

    analysis = SecureUserService(db_session, user).create_ai_analysis(AIAnalysisCreate(
        call_log_id=call.id,
        summary="Caller asked about pricing",
        sentiment="positive",
        key_points=["pricing"],
        quality_score=88.5,
    ))

    assert analysis["callLogId"] == str(call.id)
    assert analysis["userId"] == str(user.id)
    assert analysis["sentiment"] == "positive"
    assert analysis["keyPoints"] == ["pricing"]
    assert analysis["qualityScore"] == 88.5


def test_create_ai_analysis_rejects_other_users_call_log(db_session, make_user, seed):
    owner, intruder = make_user(), make_user()
    call = seed.call(owner, seed.campaign(owner), datetime(2024, 5, 1, 10))

    with pytest.raises(LookupError):
        SecureUserService(db_session, intruder).create_ai_analysis(
            AIAnalysisCreate(call_log_id=call.id, sentiment="negative"),
        )

    assert db_session.query(AIAnalysis).count() == 0


def test_create_user_requires_admin(db_session, make_user):
    agent = SecureUserService(db_session, make_user(role=UserRole.AGENT))

    with pytest.raises(PermissionError):
        agent.create_user(UserCreate(email="x@example.com", first_name="X", last_name="Y"))


def test_create_user_returns_none_for_taken_email(db_session, make_user):
    admin = SecureUserService(db_session, make_user(role=UserRole.ADMIN, email="dup@example.com"))

    assert admin.create_user(UserCreate(email="DUP@example.com", first_name="D", last_name="U")) is None


def test_admin_creates_user_with_defaults(db_session, make_user):
    admin = SecureUserService(db_session, make_user(role=UserRole.ADMIN))

    profile = admin.create_user(UserCreate(email="viewer@example.com", first_name="Vi", last_name="Ewer"))

    assert profile["role"] == "viewer"
    assert profile["plan"] == "free"
    assert profile["isActive"] is True
    assert profile["settings"] == {"notifications": True, "theme": "light", "timezone": "UTC"}
