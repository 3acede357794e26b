from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import text
from dependencies import get_db
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"]
)

@router.get("/live", status_code=status.HTTP_200_OK)
def health_live():
    """
    Liveness check to ensure the process is running.
    """
    return {"status": "ok"}

@router.get("/ready", status_code=status.HTTP_200_OK)
def health_ready(db: Session = Depends(get_db)):
    """
    Readiness check to ensure the database is accessible.
    """
    try:
        db.execute(text("SELECT 1")).scalar()
        return {"status": "ok"}
    except Exception as e:
        # Internal log only, don't expose details to the user
        logger.error(f"Health check failed: Database is down or unreachable. Error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "fail", "db": "down"}
        )
