"""
Secure Data API — user-scoped campaign, call log, and profile routes

Every route delegates to SecureUserService, which is bound to the
authenticated user by dependency injection. Failures from the service are
logged and mapped to a fixed, route-specific message with status 500;
the cause is never returned to the caller.

Endpoints:
- GET /api/secure/campaigns         — the user's Ringba campaigns
- GET /api/secure/profile           — the user's profile
- PUT /api/secure/profile           — update the user's profile
- GET /api/secure/call-logs         — paged call logs with analyses
- GET /api/secure/analytics         — summary metrics
- GET /api/secure/ringba-accounts   — linked Ringba accounts (keys redacted)
- GET /api/secure/admin/users       — all users (admin only)
- POST /api/secure/admin/users      — create a user (admin only)

@module api/secure
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ..schemas.common import RouteError
from ..schemas.secure import ProfileUpdate, UserCreate
from ..services.secure_user_service import (
    DEFAULT_CALL_LOG_LIMIT,
    SecureUserService,
    get_secure_user_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/secure",
    tags=["Secure Data"],
    responses={500: {"model": RouteError}},
)


def _error(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# =============================================================================
# GET /api/secure/campaigns
# =============================================================================

@router.get("/campaigns")
async def get_campaigns(service: SecureUserService = Depends(get_secure_user_service)):
    """Campaigns for the current user, wrapped under `campaigns`."""
    try:
        campaigns = service.get_user_campaigns()
    except Exception:
        logger.exception("Error fetching campaigns")
        return _error("Failed to fetch campaigns")
    return {"campaigns": campaigns}


# =============================================================================
# /api/secure/profile
# =============================================================================

@router.get("/profile", responses={404: {"model": RouteError}})
async def get_profile(service: SecureUserService = Depends(get_secure_user_service)):
    try:
        profile = service.get_current_user_profile()
    except Exception:
        logger.exception("Error fetching profile")
        return _error("Failed to fetch profile")

    if profile is None:
        return _error("User not found", status.HTTP_404_NOT_FOUND)
    return {"profile": profile}


@router.put("/profile", responses={400: {"model": RouteError}})
async def update_profile(
    updates: ProfileUpdate,
    service: SecureUserService = Depends(get_secure_user_service),
):
    try:
        profile = service.update_user_profile(updates)
    except Exception:
        logger.exception("Error updating profile")
        return _error("Failed to update profile")

    if profile is None:
        return _error("Failed to update profile", status.HTTP_400_BAD_REQUEST)
    return {"profile": profile}


# =============================================================================
# GET /api/secure/call-logs
# =============================================================================

@router.get("/call-logs")
async def get_call_logs(
    limit: int = Query(DEFAULT_CALL_LOG_LIMIT, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: SecureUserService = Depends(get_secure_user_service),
):
    try:
        call_logs = service.get_user_call_logs(limit, offset)
    except Exception:
        logger.exception("Error fetching call logs")
        return _error("Failed to fetch call logs")
    return {"callLogs": call_logs}


# =============================================================================
# GET /api/secure/analytics
# =============================================================================

@router.get("/analytics")
async def get_analytics(
    start: Optional[datetime] = Query(None, description="Earliest call start time (inclusive)"),
    end: Optional[datetime] = Query(None, description="Latest call start time (inclusive)"),
    service: SecureUserService = Depends(get_secure_user_service),
):
    """Summary metrics. The date range applies only when both start and end are given."""
    try:
        analytics = service.get_user_analytics(start, end)
    except Exception:
        logger.exception("Error fetching analytics")
        return _error("Failed to fetch analytics")
    return {"analytics": analytics}


# =============================================================================
# GET /api/secure/ringba-accounts
# =============================================================================

@router.get("/ringba-accounts")
async def get_ringba_accounts(service: SecureUserService = Depends(get_secure_user_service)):
    try:
        accounts = service.get_user_ringba_accounts()
    except Exception:
        logger.exception("Error fetching Ringba accounts")
        return _error("Failed to fetch Ringba accounts")
    return {"accounts": accounts}


# =============================================================================
# /api/secure/admin/users
# =============================================================================

@router.get("/admin/users", responses={403: {"model": RouteError}})
async def get_all_users(service: SecureUserService = Depends(get_secure_user_service)):
    try:
        users = service.get_all_users()
    except PermissionError:
        return _error("Admin access required", status.HTTP_403_FORBIDDEN)
    except Exception:
        logger.exception("Error fetching users")
        return _error("Failed to fetch users")
    return {"users": users}


@router.post(
    "/admin/users",
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": RouteError}, 403: {"model": RouteError}},
)
async def create_user(
    user_data: UserCreate,
    service: SecureUserService = Depends(get_secure_user_service),
):
    try:
        user = service.create_user(user_data)
    except PermissionError:
        return _error("Admin access required", status.HTTP_403_FORBIDDEN)
    except Exception:
        logger.exception("Error creating user")
        return _error("Failed to create user")

    if user is None:
        return _error("Failed to create user", status.HTTP_400_BAD_REQUEST)
    return {"user": user}
