"""
Expense aggregation for analytics views and exports.

All functions here are pure: they take a sequence of ``ExpenseRecord`` and
return new lists without touching the input. Groups are sorted by total,
largest first, with ties kept in the order the key was first seen. Monthly
totals are the exception and run oldest to newest.

An expense linked to several trucks (trips, drivers) counts in full towards
every one of them. Amounts are never split.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import pytz

from database.models import Expense

DEFAULT_CATEGORY_COLOR = "#71717a"


@dataclass(frozen=True)
class ExpenseRecord:
    """Flat, ORM-free view of an expense used by aggregation and reports."""
    id: str
    category: str
    amount: Decimal
    expense_date: datetime
    category_color: Optional[str] = None
    notes: Optional[str] = None
    trucks: Tuple[str, ...] = field(default_factory=tuple)
    trips: Tuple[str, ...] = field(default_factory=tuple)
    drivers: Tuple[str, ...] = field(default_factory=tuple)
    is_business_expense: bool = False
    supplier: Optional[str] = None
    is_paid: bool = False

    @classmethod
    def from_model(cls, expense: Expense) -> "ExpenseRecord":
        """
        Build a record from an expense loaded with its relations.

        Requires category, supplier and the three association collections
        (with their targets) to be eager-loaded.
        """
        return cls(
            id=expense.id,
            category=expense.category.name,
            category_color=expense.category.color,
            amount=Decimal(expense.amount),
            expense_date=expense.expense_date,
            notes=expense.notes,
            trucks=tuple(sorted(te.truck.label for te in expense.truck_expenses)),
            trips=tuple(sorted(te.trip.label for te in expense.trip_expenses)),
            drivers=tuple(sorted(de.driver.label for de in expense.driver_expenses)),
            is_business_expense=expense.is_business_expense,
            supplier=expense.supplier.name if expense.supplier else None,
            is_paid=expense.is_paid,
        )


@dataclass(frozen=True)
class GroupTotal:
    """Total amount and expense count for one breakdown key."""
    key: str
    total_amount: Decimal
    count: int
    color: Optional[str] = None


@dataclass(frozen=True)
class MonthTotal:
    """Total amount and expense count for one calendar month."""
    year: int
    month: int
    label: str
    total_amount: Decimal
    count: int


@dataclass(frozen=True)
class GroupShare:
    """A group with its fraction of the breakdown it belongs to."""
    group: GroupTotal
    share: Decimal

    @property
    def percentage(self) -> Decimal:
        return (self.share * 100).quantize(Decimal("0.01"))


def _group(
    records: Iterable[ExpenseRecord],
    keys_of: Callable[[ExpenseRecord], Iterable[str]],
    color_of: Optional[Callable[[ExpenseRecord], Optional[str]]] = None,
) -> List[GroupTotal]:
    totals: "OrderedDict[str, list]" = OrderedDict()
    for record in records:
        for key in keys_of(record):
            entry = totals.get(key)
            if entry is None:
                entry = totals[key] = [Decimal("0"), 0, None]
            entry[0] += record.amount
            entry[1] += 1
            if color_of is not None:
                entry[2] = color_of(record)
    groups = [
        GroupTotal(key=key, total_amount=total, count=count, color=color)
        for key, (total, count, color) in totals.items()
    ]
    # sorted() is stable, so equal totals keep first-seen order
    return sorted(groups, key=lambda g: g.total_amount, reverse=True)


def aggregate_by_category(
    records: Iterable[ExpenseRecord],
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> List[GroupTotal]:
    """Totals per category name, with the category's chart color."""
    return _group(
        records,
        lambda r: (r.category,),
        lambda r: r.category_color or default_color,
    )


def aggregate_by_truck(records: Iterable[ExpenseRecord]) -> List[GroupTotal]:
    """Totals per truck registration number."""
    return _group(records, lambda r: dict.fromkeys(r.trucks))


def aggregate_by_trip(records: Iterable[ExpenseRecord]) -> List[GroupTotal]:
    """Totals per trip route label."""
    return _group(records, lambda r: dict.fromkeys(r.trips))


def aggregate_by_driver(records: Iterable[ExpenseRecord]) -> List[GroupTotal]:
    """Totals per driver full name."""
    return _group(records, lambda r: dict.fromkeys(r.drivers))


def _local_date(value: datetime, tz: Optional[str]) -> datetime:
    if tz is None or value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(tz))


def aggregate_by_month(
    records: Iterable[ExpenseRecord],
    tz: Optional[str] = None,
) -> List[MonthTotal]:
    """
    Totals per calendar month, oldest first.

    Args:
        records: Expenses to bucket
        tz: Timezone name used to pick the month of timezone-aware dates
    """
    buckets = {}
    for record in records:
        local = _local_date(record.expense_date, tz)
        key = (local.year, local.month)
        total, count = buckets.get(key, (Decimal("0"), 0))
        buckets[key] = (total + record.amount, count + 1)
    return [
        MonthTotal(
            year=year,
            month=month,
            label=datetime(year, month, 1, tzinfo=dt_timezone.utc).strftime("%b %Y"),
            total_amount=total,
            count=count,
        )
        for (year, month), (total, count) in sorted(buckets.items())
    ]


def compute_total(records: Iterable[ExpenseRecord]) -> Decimal:
    """Sum of all expense amounts."""
    return sum((r.amount for r in records), Decimal("0"))


def compute_shares(groups: Sequence[GroupTotal]) -> List[GroupShare]:
    """
    Attach each group's share of its own breakdown total.

    A truck's share is relative to the sum of all truck totals, not to the
    grand total of expenses.
    """
    denominator = sum((g.total_amount for g in groups), Decimal("0"))
    return [
        GroupShare(
            group=g,
            share=(g.total_amount / denominator) if denominator else Decimal("0"),
        )
        for g in groups
    ]
