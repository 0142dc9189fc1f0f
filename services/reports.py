"""Chart data and export-ready report shaping for expenses."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence

from services.aggregation import (
    DEFAULT_CATEGORY_COLOR,
    ExpenseRecord,
    GroupShare,
    GroupTotal,
    MonthTotal,
    aggregate_by_category,
    aggregate_by_driver,
    aggregate_by_month,
    aggregate_by_trip,
    aggregate_by_truck,
    compute_shares,
    compute_total,
)


@dataclass(frozen=True)
class ExpenseCharts:
    """Breakdowns behind the expense analytics page."""
    by_category: List[GroupTotal]
    by_truck: List[GroupTotal]
    by_trip: List[GroupTotal]
    by_driver: List[GroupTotal]
    by_month: List[MonthTotal]
    total: Decimal


@dataclass(frozen=True)
class ReportRow:
    """One expense line of an exported report."""
    date: datetime
    category: str
    amount: Decimal
    trucks: str
    trips: str
    drivers: str
    supplier: str
    notes: str
    is_business_expense: bool
    is_paid: bool


@dataclass(frozen=True)
class ExpenseReport:
    """Everything an exporter needs to render a report."""
    period_start: datetime
    period_end: datetime
    rows: List[ReportRow]
    total: Decimal
    by_category: List[GroupShare] = field(default_factory=list)
    by_truck: List[GroupShare] = field(default_factory=list)
    by_trip: List[GroupShare] = field(default_factory=list)
    by_driver: List[GroupShare] = field(default_factory=list)

    @property
    def expense_count(self) -> int:
        return len(self.rows)


def build_charts(
    records: Sequence[ExpenseRecord],
    tz: Optional[str] = None,
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> ExpenseCharts:
    """Compute every chart breakdown from one set of records."""
    return ExpenseCharts(
        by_category=aggregate_by_category(records, default_color),
        by_truck=aggregate_by_truck(records),
        by_trip=aggregate_by_trip(records),
        by_driver=aggregate_by_driver(records),
        by_month=aggregate_by_month(records, tz),
        total=compute_total(records),
    )


def _report_row(record: ExpenseRecord) -> ReportRow:
    return ReportRow(
        date=record.expense_date,
        category=record.category,
        amount=record.amount,
        trucks=", ".join(record.trucks),
        trips=", ".join(record.trips),
        drivers=", ".join(record.drivers),
        supplier=record.supplier or "",
        notes=record.notes or "",
        is_business_expense=record.is_business_expense,
        is_paid=record.is_paid,
    )


def build_report(
    records: Sequence[ExpenseRecord],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> ExpenseReport:
    """
    Shape records into an export report.

    Rows keep the order of ``records``. A missing period bound falls back to
    the earliest/latest expense date, or to now when there are no records.
    """
    dates = [r.expense_date for r in records]
    now = datetime.now(timezone.utc)
    period_start = start_date or (min(dates) if dates else now)
    period_end = end_date or (max(dates) if dates else now)

    return ExpenseReport(
        period_start=period_start,
        period_end=period_end,
        rows=[_report_row(r) for r in records],
        total=compute_total(records),
        by_category=compute_shares(aggregate_by_category(records, default_color)),
        by_truck=compute_shares(aggregate_by_truck(records)),
        by_trip=compute_shares(aggregate_by_trip(records)),
        by_driver=compute_shares(aggregate_by_driver(records)),
    )
