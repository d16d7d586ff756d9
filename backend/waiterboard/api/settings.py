from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.db.database import get_db_session
from waiterboard.rate_limiter import limiter
from waiterboard.schemas.settings import BoardSettings, BoardSettingsUpdate
from waiterboard.services.settings_service import SettingsService

router = APIRouter()

EXPORT_FILENAME = "waiter-board-settings.json"


@router.get("", response_model=BoardSettings)
async def get_settings(db: AsyncSession = Depends(get_db_session)):
    """
    Retrieve the board settings, defaults filled in.
    """
    return await SettingsService(db).get_settings()


@router.put("", response_model=BoardSettings)
@limiter.limit("10/minute")
async def update_settings(
    request: Request,
    settings_update: BoardSettingsUpdate,
    initials: Optional[str] = Query(None, max_length=8),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Update some of the board settings.
    """
    service = SettingsService(db)
    updated = await service.update_settings(
        settings_update.model_dump(exclude_unset=True), staff_initials=initials
    )
    await db.commit()
    return updated


@router.get("/export")
async def export_settings(db: AsyncSession = Depends(get_db_session)):
    document = await SettingsService(db).export_settings()
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/import", response_model=BoardSettings)
@limiter.limit("10/minute")
async def import_settings(
    request: Request,
    document: Dict[str, Any],
    initials: Optional[str] = Query(None, max_length=8),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Replace all settings with a previously exported document.
    """
    service = SettingsService(db)
    imported = await service.import_settings(document, staff_initials=initials)
    await db.commit()
    return imported


@router.post("/reset", response_model=BoardSettings)
@limiter.limit("10/minute")
async def reset_settings(
    request: Request,
    initials: Optional[str] = Query(None, max_length=8),
    db: AsyncSession = Depends(get_db_session),
):
    service = SettingsService(db)
    defaults = await service.reset_settings(staff_initials=initials)
    await db.commit()
    return defaults
