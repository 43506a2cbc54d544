"""
Liveness and readiness endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tipsplit import __version__
from tipsplit.core.config import get_settings
from tipsplit.core.database import get_db
from tipsplit.core.logging_config import LoggingConfig
from tipsplit.services.calculation_service import CalculationService

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Process is up; touches nothing else"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": get_settings().app_name
    }


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """
    Readiness check: the calculations table must be queryable

    Returns:
        dict with the stored calculation count; 503 when the table cannot be read
    """
    settings = get_settings()
    body = {
        "timestamp": datetime.utcnow().isoformat(),
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.app_env,
    }

    try:
        stored = CalculationService(db).count()
    except SQLAlchemyError as e:
        logger.error("Calculations table unreachable", exc_info=True)
        db.rollback()
        body["status"] = "unhealthy"
        body["database"] = {"status": "unhealthy", "error": type(e).__name__}
        return JSONResponse(body, status_code=503)

    body["status"] = "healthy"
    body["database"] = {"status": "healthy", "calculations": stored}
    return body
