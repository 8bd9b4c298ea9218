# app/services/profile_service.py
"""
Profile bootstrap and settings.

The new-user webhook is the authoritative creation path. ensure_profile is the in-app
fallback: a read, then an insert with ON CONFLICT DO NOTHING, so concurrent first
logins for the same identity never produce two rows or an error.
"""

from datetime import datetime
from typing import Optional

from app.services.gateway import DataGateway
from app.services.identity_provider import CUSTOMER, Identity, SessionContext, ensure_authenticated
from app.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("full_name", "avatar_url", "phone_number", "address", "postal_code")


def ensure_profile(gateway: DataGateway, identity_id: str, email: Optional[str] = None,
                   full_name: str = "", role: str = CUSTOMER):
    """Return the profile for identity_id, creating an empty one on first sight."""
    existing = gateway.select("profiles", {"id": identity_id}, limit=1)
    if existing:
        return existing[0]

    now = datetime.utcnow()
    logger.info(f"[Profile] No profile for {identity_id}, creating")
    return gateway.upsert(
        "profiles",
        {
            "id": identity_id,
            "full_name": full_name,
            "avatar_url": "",
            "email": email,
            "role": role,
            "created_at": now,
            "updated_at": now,
        },
        conflict_key="id",
        ignore_duplicates=True,
    )


def register_profile_bootstrap(gateway: DataGateway):
    """Make the gateway ensure a profile whenever a new identity is bound to it."""

    def _on_identity_change(identity: Optional[Identity]):
        if identity is not None:
            ensure_profile(gateway, identity.id, email=identity.email, role=identity.role)

    return gateway.on_identity_change(_on_identity_change)


def get_profile(gateway: DataGateway, session: Optional[SessionContext]):
    session = ensure_authenticated(session)
    return ensure_profile(gateway, session.identity_id, email=session.email, role=session.role)


def update_profile(gateway: DataGateway, session: Optional[SessionContext], changes: dict):
    """Settings page save. Unknown keys are ignored; the profile is created first if missing."""
    session = ensure_authenticated(session)
    ensure_profile(gateway, session.identity_id, email=session.email, role=session.role)

    patch = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
    if patch:
        patch["updated_at"] = datetime.utcnow()
        gateway.update("profiles", patch, {"id": session.identity_id})
        logger.info(f"[Profile] Updated {sorted(patch)} for {session.identity_id}")
    return gateway.select_one("profiles", {"id": session.identity_id})
