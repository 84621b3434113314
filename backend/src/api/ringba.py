"""
Ringba Diagnostics API

Reports whether the Ringba credentials are configured so operators can
verify a deployment without reading the secret itself.

Endpoints:
- GET /api/ringba/check-env — credential presence, length, redacted preview

@module api/ringba
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..core.config import RingbaEnvironment, get_ringba_environment
from ..core.security import preview_secret
from ..schemas.ringba import EnvironmentCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ringba", tags=["Ringba Diagnostics"])


def _utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/check-env", response_model=EnvironmentCheckResponse)
async def check_env(
    env: RingbaEnvironment = Depends(get_ringba_environment),
) -> EnvironmentCheckResponse:
    """
    Report which Ringba credentials are present.

    Absent values degrade to false/0/null; this endpoint has no error path.
    """
    api_key = env.api_key
    account_id = env.account_id

    logger.debug(f"Ringba env check: api_key={'set' if api_key else 'unset'}, account_id={'set' if account_id else 'unset'}")

    return EnvironmentCheckResponse(
        has_api_key=api_key is not None,
        api_key_length=len(api_key) if api_key else 0,
        api_key_preview=preview_secret(api_key),
        has_account_id=account_id is not None,
        account_id=account_id,
        timestamp=_utc_timestamp(),
    )
