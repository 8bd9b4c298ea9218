# app/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers for the marketplace error taxonomy, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import bookings, health, profiles, reference, search, vehicles, vendors, webhooks
from app.database import create_tables
from app.config import settings
from app.exceptions import (
    AuthenticationRequiredError, ErrorKind, NotFoundError, PersistenceError, ValidationError,
)
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="WashGo Marketplace API",
    description="Mobile car-wash marketplace: customers, vehicles, vendors, services and bookings.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (front end runs on its own origin) ──────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional API key for every endpoint except the identity-provider webhook,
    health check and docs. Set API_KEY in .env. Leave empty to disable.
    """
    open_paths = {"/api/v1/webhooks/new-user", "/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
_PERSISTENCE_STATUS = {
    ErrorKind.CONSTRAINT: status.HTTP_409_CONFLICT,
    ErrorKind.SCHEMA_MISSING: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(AuthenticationRequiredError)
async def auth_required_handler(request: Request, exc: AuthenticationRequiredError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.message, "login": "/auth/login"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"Persistence error on {request.url.path}: {exc.kind.value} {exc.detail}")
    return JSONResponse(
        status_code=_PERSISTENCE_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={"detail": exc.message, "kind": exc.kind.value},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(profiles.router,  prefix="/api/v1", tags=["👤 Profile"])
app.include_router(vehicles.router,  prefix="/api/v1", tags=["🚗 Vehicles"])
app.include_router(search.router,    prefix="/api/v1", tags=["🔍 Search"])
app.include_router(vendors.router,   prefix="/api/v1", tags=["🧽 Vendors"])
app.include_router(bookings.router,  prefix="/api/v1", tags=["📅 Bookings"])
app.include_router(webhooks.router,  prefix="/api/v1", tags=["📡 Webhooks"])
app.include_router(reference.router, prefix="/api/v1", tags=["📚 Reference"])
app.include_router(health.router,    prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 WashGo backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🔐 Identity provider: {settings.AUTH_URL or 'not configured'}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 WashGo backend shutting down...")
