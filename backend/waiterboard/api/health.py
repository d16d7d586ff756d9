import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from waiterboard.db.database import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root_health_check():
    return {"status": "ok"}


@router.get("/db")
async def db_health_check(session: AsyncSession = Depends(get_db_session)):
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database connection failed: {e}",
        )


@router.get("/services")
async def services_health_check(request: Request):
    """
    Status of the board maintenance task.
    """
    maintenance = getattr(request.app.state, "board_maintenance", None)
    if maintenance is None:
        return {"status": "degraded", "services": {"board_maintenance": {"status": "not_reporting"}}}

    service_health = maintenance.health()
    overall = "ok" if service_health["status"] == "running" else "degraded"
    return {"status": overall, "services": {"board_maintenance": service_health}}
