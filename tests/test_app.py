"""Tests for process startup and shutdown."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

import backoffice.app as app
from services.notifications import (
    ExpenseNotificationData,
    NotificationEventType,
    default_dispatcher,
    expense_event,
)

from helpers import RecordingTransport


@pytest.mark.asyncio
async def test_startup_configures_logging_and_schema(monkeypatch):
    calls = []

    async def fake_init_db():
        calls.append("init_db")

    monkeypatch.setattr(app, "setup_logging", lambda: calls.append("setup_logging"))
    monkeypatch.setattr(app, "init_db", fake_init_db)

    await app.startup()
    await app.startup(create_schema=False)

    assert calls == ["setup_logging", "init_db", "setup_logging"]


@pytest.mark.asyncio
async def test_shutdown_waits_for_pending_notifications(monkeypatch):
    transport = RecordingTransport()
    closed = []

    async def fake_close_db():
        closed.append(True)

    monkeypatch.setattr(default_dispatcher, "transport", transport)
    monkeypatch.setattr(default_dispatcher, "enabled", True)
    monkeypatch.setattr(app, "close_db", fake_close_db)

    default_dispatcher.dispatch(
        expense_event(
            NotificationEventType.DELETED,
            ExpenseNotificationData(
                id="exp-9",
                description="Tolls A7",
                category="Tolls",
                amount=Decimal("18.40"),
                date=datetime(2026, 7, 1, tzinfo=timezone.utc),
            ),
            organization_id="org-main",
            performed_by={"name": "Admin", "email": "admin@example.com", "role": "admin"},
        )
    )

    await app.shutdown()

    assert [e.entity_id for e in transport.events] == ["exp-9"]
    assert default_dispatcher.pending == 0
    assert closed == [True]
