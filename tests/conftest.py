import sys
import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Ensure project root is on sys.path so `import services` works
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read at import time; point them at SQLite before anything loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from core.permissions import Actor, Role
from database.models import ExpenseCategory, Organization
from database.repositories import (
    DriverRepository,
    ExpenseCategoryRepository,
    SupplierRepository,
    TripRepository,
    TruckRepository,
)
from services.notifications import NotificationDispatcher

from helpers import RecordingTransport, create_test_engine


ORG_ID = "org-main"
OTHER_ORG_ID = "org-other"


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """Fresh in-memory database per test."""
    engine = await create_test_engine()
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async_session = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def organization(db_session: AsyncSession) -> Organization:
    """Tenant every test works in."""
    org = Organization(id=ORG_ID, name="Northline Haulage")
    other = Organization(id=OTHER_ORG_ID, name="Rival Freight")
    db_session.add_all([org, other])
    await db_session.commit()
    return org


def _actor(role: Role, organization_id: str = ORG_ID) -> Actor:
    return Actor(
        user_id=f"user-{role.value}",
        organization_id=organization_id,
        name=f"Test {role.value.capitalize()}",
        email=f"{role.value}@example.com",
        role=role,
    )


@pytest.fixture
def admin() -> Actor:
    return _actor(Role.ADMIN)


@pytest.fixture
def supervisor() -> Actor:
    return _actor(Role.SUPERVISOR)


@pytest.fixture
def staff() -> Actor:
    return _actor(Role.STAFF)


@pytest.fixture
def other_admin() -> Actor:
    """Admin of a different organization."""
    return _actor(Role.ADMIN, OTHER_ORG_ID)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def dispatcher(transport) -> NotificationDispatcher:
    return NotificationDispatcher(transport=transport, enabled=True)


@pytest_asyncio.fixture
async def fleet(db_session: AsyncSession, organization: Organization) -> dict:
    """Trucks T1/T2, trip X1 and driver D1 in the main org; OT1 in the other org."""
    trucks = TruckRepository(db_session)
    trips = TripRepository(db_session)
    drivers = DriverRepository(db_session)

    fleet = {
        "T1": await trucks.create(ORG_ID, "KA-1001", make="Volvo", truck_id="T1"),
        "T2": await trucks.create(ORG_ID, "KA-2002", make="Scania", truck_id="T2"),
        "X1": await trips.create(ORG_ID, "Lyon", "Milan", trip_id="X1"),
        "D1": await drivers.create(ORG_ID, "Ana", "Costa", driver_id="D1"),
        "OT1": await trucks.create(OTHER_ORG_ID, "ZZ-9999", truck_id="OT1"),
    }
    await db_session.commit()
    return fleet


@pytest_asyncio.fixture
async def suppliers(db_session: AsyncSession, organization: Organization) -> dict:
    """Suppliers S1/S2 in the main org; OS1 in the other org."""
    repo = SupplierRepository(db_session)
    result = {
        "S1": await repo.create(ORG_ID, "Fuel Depot", supplier_id="S1"),
        "S2": await repo.create(ORG_ID, "Tyre Works", supplier_id="S2"),
        "OS1": await repo.create(OTHER_ORG_ID, "Elsewhere Ltd", supplier_id="OS1"),
    }
    await db_session.commit()
    return result


async def _category(session: AsyncSession, name: str, **flags) -> ExpenseCategory:
    category = await ExpenseCategoryRepository(session).create(ORG_ID, name, **flags)
    await session.commit()
    return category


@pytest_asyncio.fixture
async def fuel_category(db_session: AsyncSession, organization: Organization) -> ExpenseCategory:
    """Fuel: truck links only."""
    return await _category(db_session, "Fuel", color="#f97316", is_truck=True)


@pytest_asyncio.fixture
async def maintenance_category(db_session: AsyncSession, organization: Organization) -> ExpenseCategory:
    """Maintenance: truck, trip and driver links."""
    return await _category(
        db_session, "Maintenance", is_truck=True, is_trip=True, is_driver=True
    )


@pytest_asyncio.fixture
async def office_category(db_session: AsyncSession, organization: Organization) -> ExpenseCategory:
    """Office: no fleet links, used for business expenses."""
    return await _category(db_session, "Office")
