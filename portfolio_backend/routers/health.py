import time

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db, ping
from ..utils import envelope

router = APIRouter(prefix="/health", tags=["health"])

STARTED_AT = time.time()


@router.get("")
@router.get("/", include_in_schema=False)
def health(db: Session = Depends(get_db)):
    """Health check para el frontend y el monitoreo de la plataforma."""
    settings = get_settings()
    db_ok = ping(db.get_bind())
    return envelope(
        {
            "status": "healthy" if db_ok else "unhealthy",
            "database": "connected" if db_ok else "disconnected",
            "environment": settings.environment,
            "version": settings.version,
            "uptime": round(time.time() - STARTED_AT, 2),
        }
    )
