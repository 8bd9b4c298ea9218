# app/routers/webhooks.py
"""
Identity-provider webhooks.
POST /webhooks/new-user is called once per account creation; creates the profile row.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from app.config import settings
from app.services.webhook_service import handle_new_identity
from app.utils.json_parser import safe_parse_json
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/webhooks/new-user", summary="Identity provider webhook: new account created")
async def receive_new_user(request: Request):
    if settings.WEBHOOK_SECRET and request.headers.get("X-Webhook-Secret") != settings.WEBHOOK_SECRET:
        logger.warning(f"[Webhook] Rejected delivery from {request.client.host if request.client else '?'}: bad secret")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Invalid webhook secret"})

    payload = safe_parse_json(await request.body())
    status_code, body = await handle_new_identity(payload)
    return JSONResponse(status_code=status_code, content=body)
