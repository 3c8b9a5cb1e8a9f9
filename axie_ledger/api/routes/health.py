"""Health & Readiness Checks — is the process up, and can it take purchases?

Invariants:
    - GET /health/ always returns 200 if the process is up (liveness)
    - GET /health/ready returns 200 only when the database answers AND the ledger
      tables exist; otherwise 503 with the reason (database_unavailable | schema_missing)
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from axie_ledger.core.errors import StorageError
from axie_ledger.models import LEDGER_TABLES

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


def _not_ready(reason: str, **detail) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason, **detail},
    )


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Liveness check."""
    return {
        "status": "healthy",
        "service": request.app.title,
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check — database reachable and ledger schema migrated."""
    db_manager = getattr(request.app.state, "db", None)
    if db_manager is None or not await db_manager.health_check():
        return _not_ready("database_unavailable")
    try:
        missing = await db_manager.missing_tables(LEDGER_TABLES)
    except StorageError:
        return _not_ready("database_unavailable")
    if missing:
        logger.warning(f"Ledger tables missing: {', '.join(missing)}")
        return _not_ready("schema_missing", missing_tables=missing)
    return {
        "status": "ready",
        "checks": {"database": "healthy", "ledger_tables": list(LEDGER_TABLES)},
    }
