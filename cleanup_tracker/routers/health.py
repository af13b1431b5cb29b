# cleanup_tracker/routers/health.py
"""
System health check endpoint.
Reports database reachability, whether a roster exists and whether the
JWT secrets are real or development fallbacks.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import func, text
from cleanup_tracker.config import DEV_ACCESS_SECRET, DEV_REFRESH_SECRET, settings
from cleanup_tracker.database import get_db
from cleanup_tracker.models.user import User
from cleanup_tracker.utils.logger import get_logger
from cleanup_tracker.utils.timeutils import utcnow

logger = get_logger(__name__)

router = APIRouter()


def _secrets_status() -> str:
    try:
        if settings.access_secret == DEV_ACCESS_SECRET or settings.refresh_secret == DEV_REFRESH_SECRET:
            return "development"
    except RuntimeError:
        return "missing"
    return "configured"


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "environment": settings.ENVIRONMENT,
        "database": "unknown",
        "activeUsers": None,
        "jwtSecrets": _secrets_status(),
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
        result["activeUsers"] = db.query(func.count(User.id)).filter(User.is_active == True).scalar()  # noqa: E712
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if result["jwtSecrets"] == "missing" or result["activeUsers"] == 0:
        result["status"] = "degraded"
    return result
