# app/services/webhook_service.py
"""
New-identity webhook: the authoritative profile bootstrap path.

The identity provider POSTs {"type": "INSERT", "record": {"id": ..., "email": ...}, ...}
whenever an account is created. We insert the matching profile row through the hosted
store's REST endpoint with the service-role key. `resolution=ignore-duplicates` makes a
redelivered event a no-op instead of a duplicate insert.

Returns (http_status, body) so the router stays a thin wrapper.
"""

from datetime import datetime, timezone
from typing import Optional

import httpx

from app.config import settings
from app.utils.json_parser import get_nested
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _profile_payload(identity_id: str, email: str) -> dict:
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": identity_id,
        "full_name": email.split("@")[0],
        "avatar_url": "",
        "email": email,
        "created_at": now,
        "updated_at": now,
    }


async def handle_new_identity(payload: Optional[dict]) -> tuple[int, dict]:
    identity_id = get_nested(payload or {}, "record", "id")
    email = get_nested(payload or {}, "record", "email")
    if not (isinstance(identity_id, str) and identity_id and isinstance(email, str) and email):
        logger.warning(f"[Webhook] Invalid user data: {payload}")
        return 400, {"error": "Invalid user data"}

    if not settings.STORE_URL or not settings.SERVICE_ROLE_KEY:
        logger.error("[Webhook] STORE_URL / SERVICE_ROLE_KEY not configured")
        return 500, {"error": "Store credentials are missing"}

    logger.info(f"[Webhook] Creating profile for {identity_id} ({email})")
    headers = {
        "Content-Type": "application/json",
        "apikey": settings.SERVICE_ROLE_KEY,
        "Authorization": f"Bearer {settings.SERVICE_ROLE_KEY}",
        "Prefer": "resolution=ignore-duplicates,return=minimal",
    }
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.post(
                f"{settings.STORE_URL.rstrip('/')}/rest/v1/profiles",
                json=_profile_payload(identity_id, email),
                headers=headers,
            )
    except httpx.HTTPError as e:
        logger.error(f"[Webhook] Store request failed: {e}")
        return 500, {"error": "Server error", "details": str(e)}

    if response.is_error:
        logger.error(f"[Webhook] Store rejected profile insert: HTTP {response.status_code} {response.text}")
        return 500, {"error": "Failed to insert profile", "details": response.text}

    return 200, {"message": "Profile created successfully"}
