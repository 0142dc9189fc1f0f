"""Shared test utilities that are not fixtures."""
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from database.base import Base, enable_sqlite_foreign_keys
from database.models import Supplier
from services.aggregation import ExpenseRecord
from services.notifications import NotificationEvent

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


async def create_test_engine() -> AsyncEngine:
    """In-memory SQLite engine with foreign keys on and all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,  # One shared connection keeps the in-memory DB alive
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


class RecordingTransport:
    """Transport that keeps every delivered event."""

    def __init__(self):
        self.events: List[NotificationEvent] = []

    async def send(self, event: NotificationEvent) -> None:
        self.events.append(event)


class FailingTransport:
    """Transport whose delivery always fails."""

    def __init__(self):
        self.attempts = 0

    async def send(self, event: NotificationEvent) -> None:
        self.attempts += 1
        raise ConnectionError("mail relay unreachable")


async def balance_of(session: AsyncSession, supplier: Supplier) -> Decimal:
    """Current supplier balance as stored (balances move by SQL deltas)."""
    await session.refresh(supplier)
    return Decimal(supplier.balance)


def record(
    amount,
    category: str = "Fuel",
    trucks=(),
    trips=(),
    drivers=(),
    expense_date: datetime = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc),
    color=None,
    record_id: str = "e",
) -> ExpenseRecord:
    """Build an ExpenseRecord with sensible defaults."""
    return ExpenseRecord(
        id=record_id,
        category=category,
        amount=Decimal(str(amount)),
        expense_date=expense_date,
        category_color=color,
        trucks=tuple(trucks),
        trips=tuple(trips),
        drivers=tuple(drivers),
    )
