# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + identity provider reachability.
"""

import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "identity_provider": "not_configured",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if settings.AUTH_URL:
        try:
            resp = requests.get(
                f"{settings.AUTH_URL.rstrip('/')}/auth/v1/health",
                headers={"apikey": settings.AUTH_ANON_KEY or ""},
                timeout=3,
            )
            result["identity_provider"] = "ok" if resp.status_code == 200 else f"http_{resp.status_code}"
        except requests.exceptions.ConnectionError:
            result["identity_provider"] = "unreachable"
            result["status"] = "degraded"
        except requests.exceptions.RequestException as e:
            result["identity_provider"] = f"error: {str(e)}"

    return result
