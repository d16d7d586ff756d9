from datetime import timedelta

import pytest

from waiterboard.models.audit_log import AuditAction, AuditEntityType
from waiterboard.models.patient import Patient
from waiterboard.models.waiter_record import OrderType
from waiterboard.repositories.audit_log import AuditLogRepository
from waiterboard.repositories.patient import PatientRepository
from waiterboard.repositories.setting import SettingRepository
from waiterboard.repositories.waiter_record import WaiterRecordRepository
from waiterboard.utils.time_utils import utcnow


@pytest.mark.asyncio
async def test_production_board_excludes_finished_orders(db_session, create_record):
    late = await create_record(mrn="MRN-1", due_in_minutes=-10)
    soon = await create_record(mrn="MRN-2", due_in_minutes=5, printed=True)
    await create_record(mrn="MRN-3", ready_minutes_ago=2)
    await create_record(mrn="MRN-4", completed=True)
    await create_record(mrn="MRN-5", moved_to_mail=True)

    repo = WaiterRecordRepository(db_session)
    board = await repo.get_production_board()

    assert [r.id for r in board] == [late.id, soon.id]


@pytest.mark.asyncio
async def test_production_board_filters(db_session, create_record):
    acute = await create_record(mrn="MRN-ACUTE", first_name="Robert", order_type=OrderType.ACUTE)
    await create_record(mrn="MRN-WAIT", first_name="Emily")

    repo = WaiterRecordRepository(db_session)
    assert [r.id for r in await repo.get_production_board(order_type=OrderType.ACUTE)] == [acute.id]
    assert [r.id for r in await repo.get_production_board(search="ROB")] == [acute.id]


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(db_session, create_record):
    await create_record(mrn="MRN-100")
    repo = WaiterRecordRepository(db_session)
    assert await repo.search_active("%") == []
    assert await repo.search_active("_") == []


@pytest.mark.asyncio
async def test_mail_queue(db_session, create_record):
    now = utcnow()
    older = await create_record(mrn="MRN-1", moved_to_mail=True, moved_to_mail_at=now - timedelta(minutes=30))
    newer = await create_record(mrn="MRN-2", moved_to_mail=True, moved_to_mail_at=now - timedelta(minutes=5))
    await create_record(mrn="MRN-3", moved_to_mail=True, mailed=True, moved_to_mail_at=now)

    repo = WaiterRecordRepository(db_session)
    assert [r.id for r in await repo.get_mail_queue()] == [older.id, newer.id]


@pytest.mark.asyncio
async def test_patient_board_window_and_order(db_session, create_record):
    first_ready = await create_record(mrn="MRN-1", ready_minutes_ago=20)
    last_ready = await create_record(mrn="MRN-2", ready_minutes_ago=2)
    await create_record(mrn="MRN-3", ready_minutes_ago=60)
    await create_record(mrn="MRN-4", order_type=OrderType.ACUTE, ready_minutes_ago=1)
    await create_record(mrn="MRN-5", ready_minutes_ago=1, completed=True)

    repo = WaiterRecordRepository(db_session)
    board = await repo.get_patient_board(ready_after=utcnow() - timedelta(minutes=45))

    assert [r.id for r in board] == [last_ready.id, first_ready.id]


@pytest.mark.asyncio
async def test_expired_ready_only_returns_waiter_orders(db_session, create_record):
    expired = await create_record(mrn="MRN-1", ready_minutes_ago=50)
    await create_record(mrn="MRN-2", order_type=OrderType.ACUTE, ready_minutes_ago=50)
    await create_record(mrn="MRN-3", ready_minutes_ago=10)

    repo = WaiterRecordRepository(db_session)
    result = await repo.get_expired_ready(ready_before=utcnow() - timedelta(minutes=45))

    assert [r.id for r in result] == [expired.id]


@pytest.mark.asyncio
async def test_completed_before_falls_back_to_created_at(db_session, create_record):
    now = utcnow()
    old = await create_record(mrn="MRN-1", completed=True, completed_at=now - timedelta(days=40))
    legacy = await create_record(mrn="MRN-2", created_minutes_ago=60 * 24 * 45, completed=True)
    await create_record(mrn="MRN-3", completed=True, completed_at=now - timedelta(days=2))
    await create_record(mrn="MRN-4", created_minutes_ago=60 * 24 * 45)

    repo = WaiterRecordRepository(db_session)
    result = await repo.get_completed_before(now - timedelta(days=30))

    assert [r.id for r in result] == [old.id, legacy.id]


@pytest.mark.asyncio
async def test_get_many_skips_unknown_ids(db_session, create_record):
    record = await create_record()
    repo = WaiterRecordRepository(db_session)
    assert [r.id for r in await repo.get_many([record.id, 999])] == [record.id]


@pytest.mark.asyncio
async def test_patient_repository(db_session):
    repo = PatientRepository(db_session)
    await repo.create(Patient(mrn="MRN-2", first_name="Zed", last_name="Brown", dob="1970-01-01"))
    await repo.create(Patient(mrn="MRN-1", first_name="Amy", last_name="Adams", dob="1980-02-02"))

    assert (await repo.get_by_mrn("MRN-1")).first_name == "Amy"
    assert await repo.get_by_mrn("MRN-404") is None
    assert [p.mrn for p in await repo.get_all_ordered()] == ["MRN-1", "MRN-2"]


@pytest.mark.asyncio
async def test_setting_repository_upsert_and_delete_all(db_session):
    repo = SettingRepository(db_session)
    await repo.upsert("pharmacy_name", "First")
    await repo.upsert("pharmacy_name", "Second")
    await repo.upsert("dark_mode", "true")

    assert await repo.get_values() == {"pharmacy_name": "Second", "dark_mode": "true"}
    assert await repo.delete_all() == 2
    assert await repo.get_values() == {}


@pytest.mark.asyncio
async def test_audit_log_recent_is_newest_first(db_session):
    repo = AuditLogRepository(db_session)
    first = await repo.add_entry(AuditAction.CREATE, record_id=1, new_values={"id": 1})
    second = await repo.add_entry(AuditAction.UPDATE, record_id=1, old_values={"id": 1}, new_values={"id": 1})
    other = await repo.add_entry(AuditAction.RESET, entity_type=AuditEntityType.SETTINGS)

    assert [e.id for e in await repo.get_recent()] == [other.id, second.id, first.id]
    assert [e.id for e in await repo.get_recent(record_id=1)] == [second.id, first.id]
    assert [e.id for e in await repo.get_recent(limit=1)] == [other.id]
    assert other.entity_type == "settings"


@pytest.mark.asyncio
async def test_mail_queue_search(db_session, create_record):
    match = await create_record(mrn="MRN-1", first_name="Susan", moved_to_mail=True)
    await create_record(mrn="MRN-2", first_name="Anthony", moved_to_mail=True)

    repo = WaiterRecordRepository(db_session)
    assert [r.id for r in await repo.get_mail_queue(search="SUS")] == [match.id]
    assert await repo.get_mail_queue(search="zzz") == []


@pytest.mark.asyncio
async def test_complete_if_open_only_succeeds_once(db_session, create_record):
    record = await create_record(ready_minutes_ago=50)
    repo = WaiterRecordRepository(db_session)
    now = utcnow()

    assert await repo.complete_if_open(record, completed_at=now) is True
    assert record.completed is True
    assert record.completed_at == now

    assert await repo.complete_if_open(record, completed_at=now + timedelta(minutes=1)) is False
    assert record.completed_at == now
