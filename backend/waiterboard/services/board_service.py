"""
Read models for the production board and the public patient board.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.models.audit_log import AuditAction
from waiterboard.models.waiter_record import OrderType, WaiterRecord
from waiterboard.repositories.audit_log import AuditLogRepository
from waiterboard.repositories.waiter_record import WaiterRecordRepository
from waiterboard.schemas.board import PatientBoardEntry, PatientBoardResponse, ProductionBoardEntry
from waiterboard.schemas.waiter_record import WaiterRecordRead
from waiterboard.services.due_time import (
    elapsed_minutes,
    format_time_remaining,
    is_urgent,
    mask_name,
    time_remaining,
)
from waiterboard.services.settings_service import SettingsService
from waiterboard.utils.status_utils import order_state, order_type_label
from waiterboard.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def to_production_entry(record: WaiterRecord, now: datetime) -> ProductionBoardEntry:
    remaining = time_remaining(record.due_time, now)
    base = WaiterRecordRead.model_validate(record).model_dump()
    return ProductionBoardEntry(
        **base,
        order_type_label=order_type_label(record.order_type),
        state=order_state(record).value,
        time_remaining_seconds=math.floor(remaining.total_seconds),
        countdown=format_time_remaining(record.due_time, now),
        is_overdue=remaining.is_overdue,
        is_urgent=is_urgent(record.due_time, now),
        elapsed_minutes=elapsed_minutes(record.created_at, now),
    )


def to_patient_entry(record: WaiterRecord, now: datetime) -> PatientBoardEntry:
    return PatientBoardEntry(
        id=record.id,
        display_name=mask_name(record.first_name, record.last_name),
        num_prescriptions=record.num_prescriptions,
        ready_at=record.ready_at,
        minutes_since_ready=max(elapsed_minutes(record.ready_at, now), 0),
    )


class BoardService:
    def __init__(
        self,
        session: AsyncSession,
        waiter_record_repository_class=WaiterRecordRepository,
        audit_log_repository_class=AuditLogRepository,
        settings_service: Optional[SettingsService] = None,
    ):
        self.session = session
        self.record_repo = waiter_record_repository_class(session)
        self.audit_repo = audit_log_repository_class(session)
        self.settings_service = settings_service or SettingsService(session)

    async def production_board(
        self,
        now: Optional[datetime] = None,
        order_type: Optional[OrderType] = None,
        search: Optional[str] = None,
    ) -> List[ProductionBoardEntry]:
        now = now or utcnow()
        records = await self.record_repo.get_production_board(order_type=order_type, search=search)
        return [to_production_entry(record, now) for record in records]

    async def patient_board(self, now: Optional[datetime] = None) -> PatientBoardResponse:
        """
        Ready waiter orders inside the auto-clear window. Expired orders are
        completed first so the board and the record store agree.
        """
        now = now or utcnow()
        settings = await self.settings_service.get_settings()
        await self.auto_clear(now=now, auto_clear_minutes=settings.auto_clear_minutes)

        window_start = now - timedelta(minutes=settings.auto_clear_minutes)
        records = await self.record_repo.get_patient_board(ready_after=window_start)

        return PatientBoardResponse(
            pharmacy_name=settings.pharmacy_name,
            message=settings.patient_board_message,
            display_font_size=settings.display_font_size,
            refresh_rate=settings.patient_board_refresh_rate,
            dark_mode=settings.dark_mode,
            sound_notifications=settings.sound_notifications,
            generated_at=now,
            records=[to_patient_entry(record, now) for record in records],
        )

    async def auto_clear(
        self,
        now: Optional[datetime] = None,
        auto_clear_minutes: Optional[int] = None,
    ) -> int:
        """
        Complete ready waiter orders whose board window has passed.
        Returns the number of records cleared.
        """
        now = now or utcnow()
        if auto_clear_minutes is None:
            auto_clear_minutes = (await self.settings_service.get_settings()).auto_clear_minutes

        cutoff = now - timedelta(minutes=auto_clear_minutes)
        expired = await self.record_repo.get_expired_ready(ready_before=cutoff)

        cleared = 0
        for record in expired:
            before = record.to_dict()
            if not await self.record_repo.complete_if_open(record, completed_at=now):
                continue
            await self.audit_repo.add_entry(
                action=AuditAction.AUTO_CLEAR,
                record_id=record.id,
                old_values=before,
                new_values=record.to_dict(),
            )
            cleared += 1

        if cleared:
            logger.info(f"Auto-cleared {cleared} ready orders older than {auto_clear_minutes}m")
        return cleared
