"""Service test fixtures — async DB, SQL store + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager patched so get_store opens sessions on the test engine
    - seed_equipment inserts a small fleet in a known state

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - db_manager patched rather than get_store overridden: routes exercise the
      real SqlEquipmentStore wiring
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from fleetpet.db.base import Base
from fleetpet.infrastructure.database import DatabaseSessionManager
import fleetpet.infrastructure.database as db_module
from fleetpet.infrastructure.sql_store import SqlEquipmentStore
from fleetpet.main import app
from fleetpet.models import Equipment, MaintenanceLog

NOW = datetime.now(timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return SqlEquipmentStore(test_db)


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client whose store sessions run on the test engine."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_equipment(test_db):
    """Three items: fresh, neglected for 10 days, and never cared for.

    EQ-FRESH  Lv.1 xp=95 health=100, cared 1 day ago
    EQ-OLD    Lv.2 xp=0  health=50,  cared 10 days ago
    EQ-NEW    Lv.1 xp=0  health=100, never cared
    """
    test_db.add_all([
        Equipment(
            machine_id="EQ-FRESH", machine_name="Forklift",
            level=1, xp=95, health=100, last_cared_date=NOW - timedelta(days=1),
        ),
        Equipment(
            machine_id="EQ-OLD", machine_name="Truck",
            level=2, xp=0, health=50, last_cared_date=NOW - timedelta(days=10),
        ),
        Equipment(machine_id="EQ-NEW", machine_name="Crane"),
    ])
    test_db.add_all([
        MaintenanceLog(
            machine_id="EQ-FRESH", action="給油",
            performed_at=NOW - timedelta(days=1), processed_at=NOW - timedelta(days=1),
        ),
        MaintenanceLog(
            machine_id="EQ-OLD", action="洗車",
            performed_at=NOW - timedelta(days=10), processed_at=NOW - timedelta(days=10),
        ),
    ])
    await test_db.commit()


@pytest.fixture
def now():
    return NOW
