"""
API route controllers for OnScript Analytics.

Contains FastAPI routers for different endpoints.
Routes handle HTTP requests and delegate to services for business logic.
"""

from .health import router as health_router
from .ringba import router as ringba_router
from .secure import router as secure_router
from .pages import router as pages_router

__all__ = [
    "health_router",
    "ringba_router",
    "secure_router",
    "pages_router",
]
