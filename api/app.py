"""
BizAudit API

FastAPI app for questionnaire submission and report delivery:
1. Scores a finished questionnaire and records it
2. Generates the AI report in the background (rate limited, retry/skip)
3. Serves the report read path for reloads and shared links

Run:
    uvicorn api.app:app --reload
"""

import logging
import sys
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bizaudit import __version__
from bizaudit.database import check_db_connection, init_db
from bizaudit.errors import (
    AuditError,
    NotFoundError,
    PersistenceError,
    ProviderError,
    RateLimitExceeded,
    ReportFetchError,
    TransientProviderError,
    ValidationError,
)
from bizaudit.orchestrator import InvalidTransition
from bizaudit.utils.config import get_settings

from . import audits, reports

# Configure logging to stdout (Railway treats stderr as errors)
logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="BizAudit",
    description="Business operations audit scoring with AI-written reports",
    version=__version__,
)

app.include_router(audits.router)
app.include_router(reports.router)


# ============================================================================
# STARTUP - Initialize Database
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    logger.info("Initializing database...")
    try:
        init_db()
    except SQLAlchemyError as e:
        # The template report path still works without a database
        logger.error(f"Database initialization failed: {e}")
        return
    if check_db_connection():
        logger.info("Database connection verified")
    else:
        logger.warning("Database connection check failed - continuing anyway")


# ============================================================================
# ERROR MAPPING
# ============================================================================

STATUS_CODES = (
    (ValidationError, 422),
    (RateLimitExceeded, 429),
    (TransientProviderError, 502),
    (ProviderError, 502),
    (ReportFetchError, 502),
    (NotFoundError, 404),
    (InvalidTransition, 409),
    (PersistenceError, 503),
)


def status_for(error: AuditError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


@app.exception_handler(AuditError)
async def audit_error_handler(request: Request, exc: AuditError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.code}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# ============================================================================
# HEALTH
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "BizAudit"}


@app.get("/api/health")
async def health():
    """Detailed health check including database status."""
    db_connected = check_db_connection()
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "environment": get_settings().ENVIRONMENT,
        "database": "connected" if db_connected else "disconnected",
    }
