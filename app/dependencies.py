# app/dependencies.py
"""
FastAPI dependencies shared by the routers.
Each request gets its own DataGateway. The bearer token is resolved against the identity
provider and bound to that gateway, and binding a new identity bootstraps its profile.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext, fetch_identity
from app.services.profile_service import register_profile_bootstrap

# auto_error=False: anonymous requests reach the handler, which decides whether login is needed
bearer_scheme = HTTPBearer(auto_error=False)


def get_gateway(db: Session = Depends(get_db)) -> DataGateway:
    gateway = DataGateway(db)
    register_profile_bootstrap(gateway)
    return gateway


def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gateway: DataGateway = Depends(get_gateway),
) -> Optional[SessionContext]:
    """None for anonymous callers; services that need a caller raise AuthenticationRequiredError."""
    identity = fetch_identity(credentials.credentials) if credentials else None
    gateway.bind_identity(identity)
    return SessionContext.from_identity(identity) if identity else None
