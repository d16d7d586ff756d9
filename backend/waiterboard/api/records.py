from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.db.database import get_db_session
from waiterboard.models.waiter_record import OrderType
from waiterboard.rate_limiter import limiter
from waiterboard.schemas.waiter_record import (
    BulkUpdateRequest,
    BulkUpdateResult,
    DueTimeExtension,
    WaiterRecordCreate,
    WaiterRecordRead,
    WaiterRecordUpdate,
)
from waiterboard.services.waiter_record_service import WaiterRecordService

router = APIRouter()


@router.get("", response_model=List[WaiterRecordRead])
async def list_records(
    view: Literal["all", "production", "mail"] = Query("all", alias="type"),
    order_type: Optional[OrderType] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db_session),
):
    """
    List records that are not completed.
    `type=production` narrows to orders still in production, `type=mail` to the mail queue.
    """
    service = WaiterRecordService(db)
    return await service.list_records(view=view, order_type=order_type, search=search)


@router.post("", response_model=WaiterRecordRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("60/minute")
async def create_record(
    request: Request,
    record_in: WaiterRecordCreate,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Enter a new order. The due time is derived from the order type and current settings.
    """
    service = WaiterRecordService(db)
    record = await service.create_record(record_in)
    await db.commit()
    return record


@router.post("/bulk", response_model=BulkUpdateResult)
@limiter.limit("30/minute")
async def bulk_update_records(
    request: Request,
    bulk_in: BulkUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Apply the same flag changes to several records, e.g. mark a batch as printed.
    """
    service = WaiterRecordService(db)
    updated, not_found = await service.bulk_update(bulk_in.ids, bulk_in.to_update())
    await db.commit()
    return BulkUpdateResult(
        updated=[WaiterRecordRead.model_validate(record) for record in updated],
        not_found=not_found,
    )


@router.get("/{record_id}", response_model=WaiterRecordRead)
async def get_record(record_id: int, db: AsyncSession = Depends(get_db_session)):
    service = WaiterRecordService(db)
    return await service.get_record(record_id)


@router.put("/{record_id}", response_model=WaiterRecordRead)
@limiter.limit("120/minute")
async def update_record(
    request: Request,
    record_id: int,
    update: WaiterRecordUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    service = WaiterRecordService(db)
    record = await service.update_record(record_id, update)
    await db.commit()
    return record


@router.post("/{record_id}/extend", response_model=WaiterRecordRead)
@limiter.limit("60/minute")
async def extend_record_due_time(
    request: Request,
    record_id: int,
    extension: DueTimeExtension,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Push the due time of an open order later.
    """
    service = WaiterRecordService(db)
    record = await service.extend_due_time(record_id, extension.minutes, initials=extension.initials)
    await db.commit()
    return record


@router.delete("/{record_id}")
@limiter.limit("30/minute")
async def delete_record(
    request: Request,
    record_id: int,
    initials: Optional[str] = Query(None, max_length=8),
    db: AsyncSession = Depends(get_db_session),
):
    service = WaiterRecordService(db)
    await service.delete_record(record_id, initials=initials)
    await db.commit()
    return {"success": True}
