import time
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text
from registrar.health.schemas import HealthResponse, DatabaseHealthResponse
from registrar.config.settings import settings
from registrar.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["health"]
)

@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint to verify the API is running"""
    logger.info(f"Health check called - Environment: {settings.APP_ENV}")
    return {
        'status': 'healthy',
        'environment': settings.APP_ENV,
        'timestamp': time.time()
    }

@router.get("/health/database", response_model=DatabaseHealthResponse)
def database_health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(content={"status": "unhealthy", "connected": False}, status_code=503)
    return {"status": "healthy", "connected": True}
