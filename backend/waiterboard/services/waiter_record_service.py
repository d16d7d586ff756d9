"""
Order lifecycle operations. Every mutation is written together with an audit
entry holding the record as it was before and after the change.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from waiterboard.exceptions import InvalidUpdateError, RecordNotFoundError
from waiterboard.models.audit_log import AuditAction
from waiterboard.models.patient import Patient
from waiterboard.models.waiter_record import LIFECYCLE_FLAGS, OrderType, WaiterRecord
from waiterboard.repositories.audit_log import AuditLogRepository
from waiterboard.repositories.patient import PatientRepository
from waiterboard.repositories.waiter_record import WaiterRecordRepository
from waiterboard.schemas.waiter_record import WaiterRecordCreate, WaiterRecordUpdate
from waiterboard.services.due_time import calculate_due_time
from waiterboard.services.settings_service import SettingsService
from waiterboard.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def apply_record_changes(record: WaiterRecord, changes: dict, now: datetime) -> List[str]:
    """
    Apply a partial update to `record` in place and return the names of the
    fields that actually changed.

    A lifecycle flag stamps its timestamp only on a false -> true transition and
    clears it on true -> false; re-sending the current value is not a change.
    """
    changed = []
    for field in ("comments", "initials"):
        if field in changes and getattr(record, field) != changes[field]:
            setattr(record, field, changes[field])
            changed.append(field)

    for flag, stamp_field in LIFECYCLE_FLAGS.items():
        if flag not in changes:
            continue
        new_value = bool(changes[flag])
        if bool(getattr(record, flag)) == new_value:
            continue
        setattr(record, flag, new_value)
        if stamp_field:
            setattr(record, stamp_field, now if new_value else None)
        changed.append(flag)

    return changed


class WaiterRecordService:
    def __init__(
        self,
        session: AsyncSession,
        waiter_record_repository_class=WaiterRecordRepository,
        audit_log_repository_class=AuditLogRepository,
        patient_repository_class=PatientRepository,
        settings_service: Optional[SettingsService] = None,
    ):
        self.session = session
        self.record_repo = waiter_record_repository_class(session)
        self.audit_repo = audit_log_repository_class(session)
        self.patient_repo = patient_repository_class(session)
        self.settings_service = settings_service or SettingsService(session)

    async def create_record(self, record_in: WaiterRecordCreate, now: Optional[datetime] = None) -> WaiterRecord:
        now = now or utcnow()
        settings = await self.settings_service.get_settings()

        record = WaiterRecord(
            mrn=record_in.mrn,
            first_name=record_in.first_name,
            last_name=record_in.last_name,
            dob=record_in.dob,
            num_prescriptions=record_in.num_prescriptions,
            comments=record_in.comments,
            initials=record_in.initials,
            order_type=record_in.order_type,
            due_time=calculate_due_time(record_in.order_type, settings, now),
            created_at=now,
        )
        record = await self.record_repo.create(record)
        await self._register_patient(record_in)

        await self.audit_repo.add_entry(
            action=AuditAction.CREATE,
            record_id=record.id,
            new_values=record.to_dict(),
            staff_initials=record_in.initials,
        )
        logger.info(f"Created {record.order_type.value} record {record.id}, due {record.due_time.isoformat()}")
        return record

    async def get_record(self, record_id: int) -> WaiterRecord:
        record = await self.record_repo.get(record_id)
        if record is None:
            raise RecordNotFoundError(f"Record {record_id} not found")
        return record

    async def list_records(
        self,
        view: str = "all",
        order_type: Optional[OrderType] = None,
        search: Optional[str] = None,
    ) -> List[WaiterRecord]:
        if view == "production":
            return await self.record_repo.get_production_board(order_type=order_type, search=search)

        if view == "mail":
            records = await self.record_repo.get_mail_queue(search=search)
        elif search:
            records = await self.record_repo.search_active(search)
        else:
            records = await self.record_repo.get_active()

        if order_type is not None:
            records = [r for r in records if r.order_type == order_type]
        return records

    async def update_record(
        self,
        record_id: int,
        update: WaiterRecordUpdate,
        now: Optional[datetime] = None,
    ) -> WaiterRecord:
        record = await self.get_record(record_id)
        await self._apply_update(record, update.changes(), update.initials, now or utcnow())
        return record

    async def bulk_update(
        self,
        record_ids: List[int],
        update: WaiterRecordUpdate,
        now: Optional[datetime] = None,
    ) -> Tuple[List[WaiterRecord], List[int]]:
        """
        Apply one update to several records. Returns the records found (changed
        or not) and the ids that do not exist.
        """
        now = now or utcnow()
        unique_ids = list(dict.fromkeys(record_ids))
        records = await self.record_repo.get_many(unique_ids)
        found_ids = {r.id for r in records}
        not_found = [record_id for record_id in unique_ids if record_id not in found_ids]

        changes = update.changes()
        for record in records:
            await self._apply_update(record, changes, update.initials, now)

        if not_found:
            logger.warning(f"Bulk update skipped unknown record ids: {not_found}")
        return records, not_found

    async def extend_due_time(
        self,
        record_id: int,
        minutes: int,
        initials: Optional[str] = None,
    ) -> WaiterRecord:
        if minutes <= 0:
            raise InvalidUpdateError("Extension must be a positive number of minutes.")

        record = await self.get_record(record_id)
        if record.completed:
            raise InvalidUpdateError(f"Record {record_id} is already completed.")

        before = record.to_dict()
        record.due_time = record.due_time + timedelta(minutes=minutes)
        await self.record_repo.update(record)

        await self.audit_repo.add_entry(
            action=AuditAction.EXTEND,
            record_id=record.id,
            old_values=before,
            new_values=record.to_dict(),
            staff_initials=initials,
        )
        logger.info(f"Extended record {record.id} due time by {minutes}m")
        return record

    async def delete_record(self, record_id: int, initials: Optional[str] = None) -> None:
        record = await self.get_record(record_id)
        await self.audit_repo.add_entry(
            action=AuditAction.DELETE,
            record_id=record.id,
            old_values=record.to_dict(),
            staff_initials=initials,
        )
        await self.record_repo.delete(record.id)
        logger.info(f"Deleted record {record_id}")

    async def _apply_update(
        self,
        record: WaiterRecord,
        changes: dict,
        staff_initials: Optional[str],
        now: datetime,
    ) -> List[str]:
        before = record.to_dict()
        changed = apply_record_changes(record, changes, now)
        if not changed:
            return changed

        await self.record_repo.update(record)
        await self.audit_repo.add_entry(
            action=AuditAction.UPDATE,
            record_id=record.id,
            old_values=before,
            new_values=record.to_dict(),
            staff_initials=staff_initials,
        )
        logger.info(f"Updated record {record.id}: {', '.join(changed)}")
        return changed

    async def _register_patient(self, record_in: WaiterRecordCreate) -> None:
        """First order for an MRN adds the patient to the lookup directory."""
        existing = await self.patient_repo.get_by_mrn(record_in.mrn)
        if existing is not None:
            return

        patient = Patient(
            mrn=record_in.mrn,
            first_name=record_in.first_name,
            last_name=record_in.last_name,
            dob=record_in.dob,
        )
        # A concurrent order may register the same MRN first; only the savepoint is undone.
        try:
            async with self.session.begin_nested():
                await self.patient_repo.create(patient)
        except IntegrityError:
            logger.info("Patient already registered by a concurrent order")
            return
        logger.info("Registered new patient in directory")
