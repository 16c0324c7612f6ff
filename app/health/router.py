"""Health domain router.

Health check endpoint for monitoring and load balancers.
"""

import logging
import os

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.core.constants import Routes
from app.core.deps import ProfileStorageDep, SessionDep

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])

logger = logging.getLogger("app.health")


@router.get("")
async def health(session: SessionDep, storage: ProfileStorageDep):
    """Check database connectivity and that the upload directory is writable."""
    checks = {"database": "ok", "uploads": "ok"}
    try:
        session.exec(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        checks["database"] = "error"

    upload_dir = storage.upload_dir
    if not (upload_dir.is_dir() and os.access(upload_dir, os.W_OK)):
        checks["uploads"] = "error"

    if "error" in checks.values():
        return JSONResponse(status_code=503, content={"status": "unhealthy", **checks})
    return {"status": "ok", **checks}
