"""Tests for report shaping and the report/chart use cases."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.dto.expenses import CreateExpenseDTO
from core.exceptions import PermissionDeniedError
from services.reports import build_charts, build_report
from services.use_cases import (
    CreateExpenseUseCase,
    GetExpenseChartsUseCase,
    GetExpenseReportUseCase,
)

from helpers import record


def test_build_report_defaults_period_to_expense_dates():
    first = datetime(2026, 1, 5, tzinfo=timezone.utc)
    last = datetime(2026, 3, 9, tzinfo=timezone.utc)
    records = [
        record(10, trucks=["KA-1"], expense_date=last),
        record(30, trucks=["KA-1", "KA-2"], expense_date=first),
    ]

    report = build_report(records)

    assert report.period_start == first
    assert report.period_end == last
    assert report.total == Decimal("40")
    assert report.expense_count == 2
    assert report.rows[1].trucks == "KA-1, KA-2"
    assert [s.group.key for s in report.by_truck] == ["KA-1", "KA-2"]
    assert report.by_truck[0].share == Decimal("0.5714285714285714285714285714")


def test_build_report_empty_uses_now():
    before = datetime.now(timezone.utc)

    report = build_report([])

    assert report.rows == []
    assert report.total == Decimal("0")
    assert report.period_start >= before
    assert report.by_category == []


def test_build_report_explicit_period_wins():
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    end = datetime(2025, 12, 31, tzinfo=timezone.utc)

    report = build_report([record(5)], start_date=start, end_date=end)

    assert (report.period_start, report.period_end) == (start, end)


def test_build_charts_contains_every_breakdown():
    records = [
        record(10, "Fuel", trucks=["KA-1"], expense_date=datetime(2026, 1, 2, tzinfo=timezone.utc)),
        record(5, "Tolls", trips=["Lyon→Milan"], drivers=["Ana Costa"]),
    ]

    charts = build_charts(records, tz="UTC", default_color="#123456")

    assert charts.total == Decimal("15")
    assert [g.key for g in charts.by_category] == ["Fuel", "Tolls"]
    assert charts.by_category[1].color == "#123456"
    assert charts.by_truck[0].key == "KA-1"
    assert charts.by_trip[0].key == "Lyon→Milan"
    assert charts.by_driver[0].key == "Ana Costa"
    assert [m.label for m in charts.by_month] == ["Jan 2026", "Mar 2026"]


@pytest.mark.asyncio
async def test_report_use_case_rows_and_breakdowns(
    db_session, admin, staff, fleet, suppliers, maintenance_category, office_category, dispatcher
):
    create = CreateExpenseUseCase(db_session, dispatcher)
    day = datetime(2026, 4, 10, 8, 0, tzinfo=timezone.utc)
    await create.execute(
        admin,
        CreateExpenseDTO(
            category_id=maintenance_category.id,
            amount=Decimal("120.00"),
            expense_date=day,
            truck_ids=["T1", "T2"],
            driver_ids=["D1"],
            notes="Brake pads",
        ),
    )
    await create.execute(
        admin,
        CreateExpenseDTO(
            category_id=office_category.id,
            amount=Decimal("80.00"),
            expense_date=day + timedelta(days=1),
            is_business_expense=True,
            supplier_id="S1",
        ),
    )

    report = await GetExpenseReportUseCase(db_session).execute(staff)

    assert report.total == Decimal("200.00")
    # Newest first
    assert [row.category for row in report.rows] == ["Office", "Maintenance"]
    assert report.rows[0].supplier == "Fuel Depot"
    assert report.rows[1].trucks == "KA-1001, KA-2002"
    assert report.rows[1].drivers == "Ana Costa"
    assert report.rows[1].notes == "Brake pads"
    assert {s.group.key: s.group.total_amount for s in report.by_truck} == {
        "KA-1001": Decimal("120.00"),
        "KA-2002": Decimal("120.00"),
    }
    assert [s.share for s in report.by_category] == [Decimal("0.6"), Decimal("0.4")]


@pytest.mark.asyncio
async def test_report_use_case_date_filter(db_session, admin, fleet, fuel_category, dispatcher):
    create = CreateExpenseUseCase(db_session, dispatcher)
    for day in (1, 15, 28):
        await create.execute(
            admin,
            CreateExpenseDTO(
                category_id=fuel_category.id,
                amount=Decimal("10.00"),
                expense_date=datetime(2026, 2, day, 12, 0, tzinfo=timezone.utc),
                truck_ids=["T1"],
            ),
        )

    report = await GetExpenseReportUseCase(db_session).execute(
        admin,
        start_date=datetime(2026, 2, 10, tzinfo=timezone.utc),
        end_date=datetime(2026, 2, 20, tzinfo=timezone.utc),
    )

    assert report.expense_count == 1
    assert report.total == Decimal("10.00")


@pytest.mark.asyncio
async def test_charts_require_manager_role(db_session, staff, organization):
    with pytest.raises(PermissionDeniedError):
        await GetExpenseChartsUseCase(db_session).execute(staff)


@pytest.mark.asyncio
async def test_reports_are_tenant_scoped(db_session, admin, other_admin, fleet, fuel_category, dispatcher):
    await CreateExpenseUseCase(db_session, dispatcher).execute(
        admin,
        CreateExpenseDTO(
            category_id=fuel_category.id,
            amount=Decimal("10.00"),
            expense_date=datetime.now(timezone.utc),
            truck_ids=["T1"],
        ),
    )

    report = await GetExpenseReportUseCase(db_session).execute(other_admin)

    assert report.rows == []
