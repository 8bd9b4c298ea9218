# app/routers/profiles.py
"""Profile of the signed-in identity (settings page)."""

from typing import Optional
from fastapi import APIRouter, Depends
from app.dependencies import get_gateway, get_session_context
from app.schemas.profile import ProfileOut, ProfileUpdate
from app.services import profile_service
from app.services.gateway import DataGateway
from app.services.identity_provider import SessionContext

router = APIRouter()


@router.get("/profile", response_model=ProfileOut, summary="My profile (created on first access)")
def get_profile(gateway: DataGateway = Depends(get_gateway),
                session: Optional[SessionContext] = Depends(get_session_context)):
    return profile_service.get_profile(gateway, session)


@router.put("/profile", response_model=ProfileOut, summary="Update my profile")
def update_profile(body: ProfileUpdate, gateway: DataGateway = Depends(get_gateway),
                   session: Optional[SessionContext] = Depends(get_session_context)):
    return profile_service.update_profile(gateway, session, body.model_dump(exclude_unset=True))
