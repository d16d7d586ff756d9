import os

# Must be set before the app is imported so settings fall back to test defaults
os.environ.setdefault("TEST_MODE", "true")
os.environ.setdefault("TESTING", "true")

from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from waiterboard.db.database import get_db_session
from waiterboard.main import app
from waiterboard.models.base import Base
from waiterboard.models.waiter_record import OrderType, WaiterRecord
from waiterboard.utils.time_utils import utcnow


@pytest.fixture(scope="function")
async def test_db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'waiterboard_test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession):
    async def _get_test_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = _get_test_db_session

    # Disable rate limiter for tests
    app.state.limiter.enabled = False

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.state.limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def create_record(db_session: AsyncSession):
    """
    Factory fixture that inserts a WaiterRecord directly, bypassing the service,
    so tests can place timestamps wherever they need them.
    """
    async def _factory(
        mrn: str = "MRN-10001",
        first_name: str = "James",
        last_name: str = "Anderson",
        order_type: OrderType = OrderType.WAITER,
        created_minutes_ago: int = 0,
        due_in_minutes: int = 30,
        ready_minutes_ago: int | None = None,
        **flags,
    ) -> WaiterRecord:
        now = utcnow()
        record = WaiterRecord(
            mrn=mrn,
            first_name=first_name,
            last_name=last_name,
            dob="1985-03-15",
            num_prescriptions=flags.pop("num_prescriptions", 1),
            comments=flags.pop("comments", ""),
            initials=flags.pop("initials", "AB"),
            order_type=order_type,
            created_at=now - timedelta(minutes=created_minutes_ago),
            due_time=now + timedelta(minutes=due_in_minutes),
        )
        if ready_minutes_ago is not None:
            record.ready = True
            record.ready_at = now - timedelta(minutes=ready_minutes_ago)
        for flag, value in flags.items():
            setattr(record, flag, value)
        db_session.add(record)
        await db_session.commit()
        await db_session.refresh(record)
        return record

    return _factory
