"""
Authentication and authorisation dependencies for FastAPI routes.

Provides:
- get_current_user: extracts & verifies JWT, returns the User row
- get_optional_user: same lookup, but None instead of 401 (used by page gates)

Tokens are accepted from the Authorization header or, for browser page
loads, from the access_token cookie.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .database import get_db
from .security import decode_token
from ..models.user import User


logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"

# Tokens are issued by the identity provider; tokenUrl is informational (Swagger UI)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _extract_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    if bearer:
        return bearer
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


def _resolve_user(token: Optional[str], db: Session) -> Optional[User]:
    """Map a raw token to an existing User, or None."""
    if not token:
        return None

    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        return None

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        return None

    return db.query(User).filter(User.id == user_id).first()


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Decode the JWT and return the authenticated User.

    Raises 401 if token is missing, invalid, or names an unknown user,
    and 403 if the user has been deactivated.
    """
    raw = _extract_token(request, token)
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = _resolve_user(raw, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account has been deactivated",
        )

    return user


async def get_optional_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Return the authenticated, active User or None. Never raises."""
    user = _resolve_user(_extract_token(request, token), db)
    if user is None or not user.is_active:
        return None
    return user
