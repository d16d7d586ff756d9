from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.db.database import get_db_session
from waiterboard.repositories.audit_log import AuditLogRepository
from waiterboard.schemas.audit_log import AuditLogRead

router = APIRouter()


@router.get("", response_model=List[AuditLogRead])
async def get_audit_log(
    limit: int = Query(100, ge=1, le=1000),
    record_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Most recent audit entries first, optionally for a single record.
    """
    repo = AuditLogRepository(db)
    return await repo.get_recent(limit=limit, record_id=record_id)
