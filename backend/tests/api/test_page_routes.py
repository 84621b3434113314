"""Tests for the dashboard page routes: shell rendering and the access gate."""

import html
import json
import re
from typing import Optional

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.testclient import TestClient

from src.api.pages import gate_page
from src.core.auth import get_optional_user
from src.core.database import get_db
from src.models.user import User, UserRole
from src.services.pages import PageView


def _mount_point(body: str) -> tuple:
    match = re.search(r'data-component="([^"]+)" data-props="([^"]*)"', body)
    assert match, "component mount point missing"
    return match.group(1), json.loads(html.unescape(match.group(2)))


def test_campaign_call_logs_page_defaults_name(client):
    resp = client.get("/campaign-call-logs/123")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    component, props = _mount_point(resp.text)
    assert component == "RingbaCampaignCalls"
    assert props == {"campaignId": "123", "campaignName": "Campaign 123"}
    assert "<title>Call Logs | OnScript</title>" in resp.text


def test_campaign_call_logs_page_reads_query_name(client):
    resp = client.get("/campaign-call-logs/123", params={"campaignName": "Solar \"Q3\" <Inbound>"})

    _, props = _mount_point(resp.text)
    assert props["campaignName"] == "Solar \"Q3\" <Inbound>"
    assert "<Inbound>" not in resp.text


def test_onscript_campaign_calls_page(client):
    resp = client.get("/onscript/campaigns/CA77/calls")

    component, props = _mount_point(resp.text)
    assert component == "OnScriptCampaignCallLogs"
    assert props == {"campaignId": "CA77", "campaignName": "Campaign CA77"}


def test_onscript_call_logs_page(client):
    component, props = _mount_point(client.get("/onscript/campaigns/CA77/call-logs").text)

    assert component == "OnScriptCallLogs"
    assert props == {"campaignId": "CA77"}


def test_background_processing_page(client):
    resp = client.get("/dashboard/background-processing")

    assert resp.status_code == 200
    assert "<title>Background Processing | OnScript</title>" in resp.text
    assert _mount_point(resp.text) == ("BackgroundProcessingDashboard", {})


def test_ringba_debug_request_page_has_heading(client):
    resp = client.get("/ringba-debug-request")

    assert "RingBA API Request Debugger" in resp.text
    assert _mount_point(resp.text)[0] == "RingbaRequestDebugger"


# =============================================================================
# Protected pages
# =============================================================================


def test_protected_page_redirects_anonymous_visitor(client):
    resp = client.get("/version", follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?next=%2Fversion"


def test_protected_page_redirect_keeps_query(client):
    resp = client.get("/webhooks?tab=logs", follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?next=%2Fwebhooks%3Ftab%3Dlogs"


def test_protected_page_with_invalid_token_redirects(client):
    client.cookies.set("access_token", "expired-or-forged")

    resp = client.get("/version", follow_redirects=False)

    assert resp.status_code == 303


def test_protected_page_renders_for_signed_in_user(client, make_user, issue_token):
    client.cookies.set("access_token", issue_token(make_user(role=UserRole.VIEWER)))

    resp = client.get("/version")

    assert resp.status_code == 200
    component, props = _mount_point(resp.text)
    assert component == "VersionDisplay"
    assert set(props) == {"version", "environment"}


@pytest.fixture
def ops_client(db_session):
    """App with one admin-only page, served through the shared gate."""
    ops_app = FastAPI()

    @ops_app.get("/ops", response_class=HTMLResponse)
    async def ops_page(request: Request, user: Optional[User] = Depends(get_optional_user)):
        page = PageView(component="OpsConsole", heading="Ops Console", protected=True, required_roles=("admin",))
        return gate_page(request, page, user)

    def override_get_db():
        yield db_session

    ops_app.dependency_overrides[get_db] = override_get_db
    return TestClient(ops_app)


def test_role_gated_page_denies_wrong_role(ops_client, make_user, auth_headers):
    resp = ops_client.get("/ops", headers=auth_headers(make_user(role=UserRole.AGENT)))

    assert resp.status_code == 403
    assert "Access Denied" in resp.text
    assert "Required roles: admin" in resp.text
    assert "Your current role: agent" in resp.text


def test_role_gated_page_renders_for_admin(ops_client, make_user, auth_headers):
    resp = ops_client.get("/ops", headers=auth_headers(make_user(role=UserRole.ADMIN)))

    assert resp.status_code == 200
    assert "Ops Console" in resp.text
    assert _mount_point(resp.text)[0] == "OpsConsole"


@pytest.mark.parametrize("role", [UserRole.AGENT, UserRole.VIEWER, UserRole.ADMIN])
def test_webhooks_page_open_to_any_signed_in_user(client, make_user, auth_headers, role):
    resp = client.get("/webhooks", headers=auth_headers(make_user(role=role)))

    assert resp.status_code == 200
    assert "Webhook Management" in resp.text
    assert _mount_point(resp.text)[0] == "WebhookManagement"


def test_deactivated_user_is_treated_as_anonymous(client, make_user, auth_headers):
    user = make_user(role=UserRole.ADMIN, is_active=False)

    resp = client.get("/webhooks", headers=auth_headers(user), follow_redirects=False)

    assert resp.status_code == 303
