"""
Liveness and readiness endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.infrastructure.db import get_db
from options_api.services.events import get_export_processor, pending_count

SERVICE_NAME = "options-api"

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """Liveness: the process answers. No dependency is touched."""
    return {"status": "healthy", "service": SERVICE_NAME, "environment": settings.environment}


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Readiness: database round trip plus the country export backlog.

    503 when the database cannot be queried.
    """
    report = {
        "service": SERVICE_NAME,
        "environment": settings.environment,
        "dependencies": {},
    }

    try:
        db.execute(text("SELECT 1"))
        backlog = pending_count(db)
    except Exception as e:
        report["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        report["status"] = "degraded"
        return JSONResponse(content=report, status_code=503)

    report["dependencies"]["database"] = {"status": "healthy"}
    report["export_outbox"] = {
        "pending": backlog,
        "processor_running": get_export_processor().running,
    }
    report["status"] = "healthy"
    return report
