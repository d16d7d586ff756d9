from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.models.waiter_record import OrderType, WaiterRecord
from waiterboard.repositories.base import BaseRepository


class WaiterRecordRepository(BaseRepository[WaiterRecord]):
    def __init__(self, session: AsyncSession):
        super().__init__(WaiterRecord, session)

    async def get_many(self, ids: List[int]) -> List[WaiterRecord]:
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(ids)).order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def get_active(self) -> List[WaiterRecord]:
        """All records not yet completed, soonest due first."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.completed.is_(False))
            .order_by(self.model.due_time.asc(), self.model.id.asc())
        )
        return list(result.scalars().all())

    async def get_production_board(
        self,
        order_type: Optional[OrderType] = None,
        search: Optional[str] = None,
    ) -> List[WaiterRecord]:
        """Orders still in production: not ready, not completed, not moved to mail."""
        query = (
            select(self.model)
            .where(
                self.model.completed.is_(False),
                self.model.ready.is_(False),
                self.model.moved_to_mail.is_(False),
            )
        )
        if order_type is not None:
            query = query.where(self.model.order_type == order_type)
        if search:
            query = query.where(self._search_clause(search))
        result = await self.session.execute(
            query.order_by(self.model.due_time.asc(), self.model.id.asc())
        )
        return list(result.scalars().all())

    async def get_mail_queue(self, search: Optional[str] = None) -> List[WaiterRecord]:
        query = (
            select(self.model)
            .where(
                self.model.moved_to_mail.is_(True),
                self.model.mailed.is_(False),
                self.model.completed.is_(False),
            )
        )
        if search:
            query = query.where(self._search_clause(search))
        result = await self.session.execute(
            query.order_by(self.model.moved_to_mail_at.asc(), self.model.id.asc())
        )
        return list(result.scalars().all())

    async def get_patient_board(self, ready_after: datetime) -> List[WaiterRecord]:
        """Ready waiter orders marked ready after `ready_after`, most recent first."""
        result = await self.session.execute(
            select(self.model)
            .where(
                self.model.completed.is_(False),
                self.model.ready.is_(True),
                self.model.order_type == OrderType.WAITER,
                self.model.ready_at > ready_after,
            )
            .order_by(self.model.ready_at.desc(), self.model.id.desc())
        )
        return list(result.scalars().all())

    async def get_expired_ready(self, ready_before: datetime) -> List[WaiterRecord]:
        """Ready waiter orders whose board window closed before `ready_before`."""
        result = await self.session.execute(
            select(self.model)
            .where(
                self.model.completed.is_(False),
                self.model.ready.is_(True),
                self.model.order_type == OrderType.WAITER,
                self.model.ready_at < ready_before,
            )
            .order_by(self.model.ready_at.asc())
        )
        return list(result.scalars().all())

    async def search_active(self, term: str) -> List[WaiterRecord]:
        result = await self.session.execute(
            select(self.model)
            .where(self.model.completed.is_(False), self._search_clause(term))
            .order_by(self.model.due_time.asc(), self.model.id.asc())
        )
        return list(result.scalars().all())

    def _search_clause(self, term: str):
        needle = term.strip().lower()
        return or_(
            func.lower(self.model.mrn).contains(needle, autoescape=True),
            func.lower(self.model.first_name).contains(needle, autoescape=True),
            func.lower(self.model.last_name).contains(needle, autoescape=True),
        )

    async def get_completed_before(self, cutoff: datetime) -> List[WaiterRecord]:
        """Completed records finished before `cutoff`; rows without completed_at use created_at."""
        finished_at = func.coalesce(self.model.completed_at, self.model.created_at)
        result = await self.session.execute(
            select(self.model)
            .where(self.model.completed.is_(True), finished_at < cutoff)
            .order_by(self.model.id)
        )
        return list(result.scalars().all())

    async def complete_if_open(self, record: WaiterRecord, completed_at: datetime) -> bool:
        """
        Mark `record` completed only if it still is not. Returns False when
        another session completed it first. `record` is refreshed either way.
        """
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == record.id, self.model.completed.is_(False))
            .values(completed=True, completed_at=completed_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.refresh(record)
        return result.rowcount == 1
