from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.models.audit_log import AuditAction, AuditEntityType, AuditLog
from waiterboard.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    def __init__(self, session: AsyncSession):
        super().__init__(AuditLog, session)

    async def add_entry(
        self,
        action: AuditAction,
        record_id: Optional[int] = None,
        old_values: Optional[dict] = None,
        new_values: Optional[dict] = None,
        staff_initials: Optional[str] = None,
        entity_type: AuditEntityType = AuditEntityType.RECORD,
    ) -> AuditLog:
        entry = AuditLog(
            entity_type=entity_type.value,
            record_id=record_id,
            action=action.value,
            old_values=old_values,
            new_values=new_values,
            staff_initials=staff_initials,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get_recent(self, limit: int = 100, record_id: Optional[int] = None) -> List[AuditLog]:
        """Newest entries first."""
        query = select(self.model)
        if record_id is not None:
            query = query.where(self.model.record_id == record_id)
        result = await self.session.execute(
            query.order_by(self.model.timestamp.desc(), self.model.id.desc()).limit(limit)
        )
        return list(result.scalars().all())
