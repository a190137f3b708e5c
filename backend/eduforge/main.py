# backend/eduforge/main.py

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .api import (
    auth,
    api_audit_log,
    api_contact,
    api_deliverable,
    api_file,
    api_notification,
    api_payment,
    api_request,
    api_service,
    api_settings,
    api_statistics,
    api_ticket,
    api_user,
)
from .core.config import settings, FRONTEND_ORIGINS
from .core.observability import setup_logging
from .database import Base, engine, get_db_session
from .middleware.security_headers import SecurityHeadersMiddleware
from .services.admin_bootstrap import ensure_default_admin
from .services.seed import seed_defaults
from .utils.errors import WorkflowError
from .utils.status_logger import register_status_listeners

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Eduforge API", default_response_class=ORJSONResponse)

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.add_middleware(
    CORSMiddleware,
    allow_origins=FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS origins set to: %s", FRONTEND_ORIGINS)
app.add_middleware(SecurityHeadersMiddleware, api_prefix=settings.API_PREFIX)


@app.exception_handler(WorkflowError)
async def workflow_exception_handler(request: Request, exc: WorkflowError):
    """Render domain errors with the same body shape as ``error_response``."""
    if exc.status_code >= 500:
        logger.error("Workflow error at %s: %s", request.url.path, exc.message)
    return ORJSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and parameters are a 400 with per-field messages."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    field_errors = {}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field_errors[".".join(loc) or "body"] = err.get("msg", "invalid")
    # A missing upload is the common case for multipart endpoints.
    if "file" in field_errors:
        message = "No file provided"
    else:
        message = "Validation failed"
    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"message": message, "field_errors": field_errors}},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail)
    return ORJSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error at %s: %s", request.url.path, exc)
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"message": "Internal Server Error", "field_errors": {}}},
    )


@app.get("/healthz", tags=["health"])
async def healthz():
    return {"status": "ok"}


api_prefix = settings.API_PREFIX

# ─── AUTH ROUTES (no prefix) ───────────────────────────────────────────────────
app.include_router(auth.router, prefix="/auth", tags=["auth"])

# ─── WORKFLOW ROUTES (under /api) ──────────────────────────────────────────────
app.include_router(api_service.router, prefix=f"{api_prefix}/services", tags=["services"])
app.include_router(api_request.router, prefix=f"{api_prefix}/requests", tags=["requests"])
app.include_router(api_payment.router, prefix=f"{api_prefix}/payments", tags=["payments"])
app.include_router(api_ticket.router, prefix=f"{api_prefix}/tickets", tags=["tickets"])
app.include_router(api_file.router, prefix=f"{api_prefix}/files", tags=["files"])
app.include_router(
    api_deliverable.router, prefix=f"{api_prefix}/deliverables", tags=["deliverables"]
)

# ─── SIDE-EFFECT & ADMIN ROUTES ────────────────────────────────────────────────
app.include_router(
    api_notification.router, prefix=f"{api_prefix}/notifications", tags=["notifications"]
)
app.include_router(api_audit_log.router, prefix=f"{api_prefix}/audit-logs", tags=["audit-logs"])
app.include_router(api_user.router, prefix=f"{api_prefix}/users", tags=["users"])
app.include_router(api_settings.router, prefix=f"{api_prefix}/settings", tags=["settings"])
app.include_router(api_statistics.router, prefix=f"{api_prefix}/statistics", tags=["statistics"])
app.include_router(api_contact.router, prefix=f"{api_prefix}/contacts", tags=["contacts"])


@app.on_event("startup")
def init_database() -> None:
    """Create tables, attach status listeners, bootstrap the admin and seed data."""
    Base.metadata.create_all(bind=engine)
    register_status_listeners()
    ensure_default_admin()
    if settings.SEED_DEFAULTS:
        with get_db_session() as db:
            seed_defaults(db)
