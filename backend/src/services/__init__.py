"""
Business logic services for OnScript Analytics.

Contains logic separated from the API layer: user-scoped data access
and dashboard page composition.
"""

from .secure_user_service import SecureUserService, get_secure_user_service
from .pages import PageView

__all__ = [
    "SecureUserService",
    "get_secure_user_service",
    "PageView",
]
