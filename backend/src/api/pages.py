"""
Dashboard Pages — server-rendered layout shells

Each route binds its path/query parameters through a page composer and
renders the shared shell around the composed component's mount point.
Protected pages pass through the access gate first.

@module api/pages
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from ..core.auth import get_optional_user
from ..core.config import settings
from ..models.user import User
from ..services import pages

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], default_response_class=HTMLResponse)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


# =============================================================================
# Rendering & access gate
# =============================================================================

def render_page(request: Request, page: pages.PageView) -> Response:
    return templates.TemplateResponse(request, "page.html", {"page": page})


def gate_page(request: Request, page: pages.PageView, user: Optional[User]) -> Response:
    """
    Protected-route gate: render the page, or deny.

    Anonymous visitors are redirected to the login page with a `next`
    parameter; signed-in users without a required role get 403.
    """
    if user is None:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return RedirectResponse(
            f"{settings.login_path}?next={quote(target, safe='')}",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    if page.required_roles and user.role.value not in page.required_roles:
        logger.info(f"Access denied to {request.url.path} for user {user.id} (role={user.role.value})")
        return templates.TemplateResponse(
            request,
            "access_denied.html",
            {"page": page, "user_role": user.role.value},
            status_code=status.HTTP_403_FORBIDDEN,
        )

    return render_page(request, page)


# =============================================================================
# Campaign pages
# =============================================================================

@router.get("/campaign-call-logs/{campaign_id}")
async def campaign_call_logs_page(
    request: Request,
    campaign_id: str,
    campaign_name: Optional[str] = Query(None, alias="campaignName"),
):
    return render_page(request, pages.compose_campaign_call_logs(campaign_id, campaign_name))


@router.get("/onscript/campaigns/{campaign_id}/calls")
async def onscript_campaign_calls_page(
    request: Request,
    campaign_id: str,
    campaign_name: Optional[str] = Query(None, alias="campaignName"),
):
    return render_page(request, pages.compose_onscript_campaign_calls(campaign_id, campaign_name))


@router.get("/onscript/campaigns/{campaign_id}/call-logs")
async def onscript_call_logs_page(request: Request, campaign_id: str):
    return render_page(request, pages.compose_onscript_call_logs(campaign_id))


# =============================================================================
# Operations & diagnostics
# =============================================================================

@router.get("/dashboard/background-processing")
async def background_processing_page(request: Request):
    return render_page(request, pages.compose_background_processing())


@router.get("/ringba-debug-request")
async def ringba_debug_request_page(request: Request):
    return render_page(request, pages.compose_ringba_debug_request())


# =============================================================================
# Protected pages
# =============================================================================

@router.get("/version")
async def version_page(request: Request, user: Optional[User] = Depends(get_optional_user)):
    page = pages.compose_version(settings.app_version, settings.environment)
    return gate_page(request, page, user)


@router.get("/webhooks")
async def webhooks_page(request: Request, user: Optional[User] = Depends(get_optional_user)):
    return gate_page(request, pages.compose_webhooks(), user)
