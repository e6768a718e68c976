"""Health and readiness endpoints for deployment platforms."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import services
from database.connection import get_db
from utils.time import iso_utc

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Simple liveness probe - always returns ok if service is running."""
    return {"status": "ok", "ts": iso_utc(), "classifier_enabled": services.intent_classifier.llm_enabled}


@router.get("/readiness")
async def readiness(db: Session = Depends(get_db)):
    """Readiness probe - checks database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        return {"ready": True, "ts": iso_utc(), "database": "connected"}
    except SQLAlchemyError:
        return {"ready": False, "ts": iso_utc(), "database": "unavailable"}
