"""
Dashboard page composers.

Each composer maps route parameters (and optional query parameters) to a
PageView naming exactly one display component and the props it receives.
The component itself is rendered client-side; the server only produces
the layout shell and the component's mount point.

Composers are pure: no I/O, no state, and they never raise for string
input. Missing optional parameters resolve to their defaults.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


APP_TITLE = "OnScript"


@dataclass(frozen=True)
class PageView:
    component: str
    props: Dict[str, Any] = field(default_factory=dict)
    title: str = APP_TITLE
    heading: Optional[str] = None
    description: Optional[str] = None
    protected: bool = False
    required_roles: Tuple[str, ...] = ()


def default_campaign_label(campaign_id: str) -> str:
    """Label shown when no campaign name accompanies the id."""
    return f"Campaign {campaign_id}"


def _campaign_label(campaign_id: str, campaign_name: Optional[str]) -> str:
    # An empty name counts as missing
    return campaign_name or default_campaign_label(campaign_id)


# =============================================================================
# Campaign call logs
# =============================================================================

def compose_campaign_call_logs(campaign_id: str, campaign_name: Optional[str] = None) -> PageView:
    """Ringba call logs for one campaign, with Deepgram transcription."""
    label = _campaign_label(campaign_id, campaign_name)
    return PageView(
        component="RingbaCampaignCalls",
        props={"campaignId": campaign_id, "campaignName": label},
        title=f"Call Logs | {APP_TITLE}",
        heading="Call Logs",
        description=f"Campaign: {label} • Transcribe with Deepgram AI",
    )


def compose_onscript_campaign_calls(campaign_id: str, campaign_name: Optional[str] = None) -> PageView:
    return PageView(
        component="OnScriptCampaignCallLogs",
        props={
            "campaignId": campaign_id,
            "campaignName": _campaign_label(campaign_id, campaign_name),
        },
        title=f"Campaign Calls | {APP_TITLE}",
    )


def compose_onscript_call_logs(campaign_id: str) -> PageView:
    return PageView(
        component="OnScriptCallLogs",
        props={"campaignId": campaign_id},
        title=f"Call Logs | {APP_TITLE}",
    )


# =============================================================================
# Operations & diagnostics
# =============================================================================

def compose_background_processing() -> PageView:
    return PageView(
        component="BackgroundProcessingDashboard",
        title=f"Background Processing | {APP_TITLE}",
        description="Monitor and manage background call processing pipeline",
    )


def compose_ringba_debug_request() -> PageView:
    return PageView(
        component="RingbaRequestDebugger",
        title=f"Request Debugger | {APP_TITLE}",
        heading="RingBA API Request Debugger",
        description="Debug and inspect the exact API requests being made to RingBA",
    )


def compose_version(version: str, environment: str) -> PageView:
    return PageView(
        component="VersionDisplay",
        props={"version": version, "environment": environment},
        title=f"Version | {APP_TITLE}",
        protected=True,
    )


def compose_webhooks() -> PageView:
    return PageView(
        component="WebhookManagement",
        title=f"Webhooks | {APP_TITLE}",
        heading="Webhook Management",
        description="Configure and manage webhook integrations for real-time data delivery",
        protected=True,
    )
