# app/services/identity_provider.py
"""
Client for the external identity provider.
Resolves a bearer access token into an Identity by calling GET {AUTH_URL}/auth/v1/user.
The role comes from the user metadata written at sign-up (customer | vendor).
"""

from dataclasses import dataclass
from typing import Optional

import requests

from app.config import settings
from app.exceptions import AuthenticationRequiredError, ErrorKind, PersistenceError
from app.utils.json_parser import get_nested
from app.utils.logger import get_logger

logger = get_logger(__name__)

CUSTOMER = "customer"
VENDOR = "vendor"


@dataclass(frozen=True)
class Identity:
    id: str
    email: Optional[str] = None
    role: str = CUSTOMER


@dataclass(frozen=True)
class SessionContext:
    """Explicit caller context passed into every service call."""
    identity_id: str
    role: str = CUSTOMER
    email: Optional[str] = None

    @property
    def is_vendor(self) -> bool:
        return self.role == VENDOR

    @classmethod
    def from_identity(cls, identity: Identity) -> "SessionContext":
        return cls(identity_id=identity.id, role=identity.role, email=identity.email)


def ensure_authenticated(session: Optional[SessionContext]) -> SessionContext:
    if session is None:
        raise AuthenticationRequiredError("Please log in to continue.")
    return session


def fetch_identity(access_token: str) -> Optional[Identity]:
    """
    Returns the Identity for a valid token, None for a rejected/expired one.
    Raises PersistenceError(UNAVAILABLE) when the provider cannot be asked.
    """
    if not settings.AUTH_URL:
        raise PersistenceError("Identity provider is not configured (AUTH_URL)", kind=ErrorKind.UNAVAILABLE)

    headers = {"Authorization": f"Bearer {access_token}"}
    if settings.AUTH_ANON_KEY:
        headers["apikey"] = settings.AUTH_ANON_KEY

    try:
        resp = requests.get(
            f"{settings.AUTH_URL.rstrip('/')}/auth/v1/user",
            headers=headers,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Identity provider unreachable: {e}")
        raise PersistenceError("Identity provider unreachable", kind=ErrorKind.UNAVAILABLE, detail=str(e)) from e

    if resp.status_code in (401, 403):
        logger.info("Access token rejected by identity provider")
        return None
    if resp.status_code != 200:
        logger.error(f"Identity provider returned HTTP {resp.status_code}: {resp.text}")
        raise PersistenceError(f"Identity provider returned HTTP {resp.status_code}",
                               kind=ErrorKind.UNAVAILABLE, detail=resp.text)

    data = resp.json()
    user_id = data.get("id") if isinstance(data, dict) else None
    if not user_id:
        return None
    role = get_nested(data, "user_metadata", "role") or CUSTOMER
    return Identity(id=user_id, email=data.get("email"), role=role)
