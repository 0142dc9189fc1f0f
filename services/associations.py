"""
Association rules for expenses.

An operational expense must be linked to at least one truck, trip or driver,
and only to the kinds its category allows. A business expense is owed to a
supplier and carries no operational links at all.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Optional, Tuple

from core.exceptions import (
    InvalidAmountError,
    InvalidAssociationError,
    MissingAssociationError,
    UnsupportedAssociationTypeError,
)
from database.models import AssociationKind, ExpenseCategory

# Amounts are stored as Numeric(12, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")


def _dedupe(ids: Optional[Iterable[str]]) -> Tuple[str, ...]:
    # dict keeps first-seen order
    return tuple(dict.fromkeys(ids or ()))


@dataclass(frozen=True)
class AssociationSet:
    """Validated, de-duplicated association IDs of one expense."""
    truck_ids: Tuple[str, ...] = field(default_factory=tuple)
    trip_ids: Tuple[str, ...] = field(default_factory=tuple)
    driver_ids: Tuple[str, ...] = field(default_factory=tuple)

    def by_kind(self) -> Dict[AssociationKind, Tuple[str, ...]]:
        return {
            AssociationKind.TRUCK: self.truck_ids,
            AssociationKind.TRIP: self.trip_ids,
            AssociationKind.DRIVER: self.driver_ids,
        }

    @property
    def is_empty(self) -> bool:
        return not (self.truck_ids or self.trip_ids or self.driver_ids)


def validate_associations(
    category: ExpenseCategory,
    is_business_expense: bool,
    truck_ids: Optional[Iterable[str]] = None,
    trip_ids: Optional[Iterable[str]] = None,
    driver_ids: Optional[Iterable[str]] = None,
) -> AssociationSet:
    """
    Check the association shape of an expense against its category.

    Args:
        category: Category the expense is filed under
        is_business_expense: Whether the expense is owed to a supplier
        truck_ids: Linked trucks
        trip_ids: Linked trips
        driver_ids: Linked drivers

    Returns:
        AssociationSet with duplicates removed

    Raises:
        InvalidAssociationError: Business expense with operational links
        MissingAssociationError: Operational expense without any link
        UnsupportedAssociationTypeError: Category does not allow a given kind
    """
    associations = AssociationSet(
        truck_ids=_dedupe(truck_ids),
        trip_ids=_dedupe(trip_ids),
        driver_ids=_dedupe(driver_ids),
    )

    if is_business_expense:
        if not associations.is_empty:
            raise InvalidAssociationError()
        return associations

    if associations.is_empty:
        raise MissingAssociationError()

    for kind, ids in associations.by_kind().items():
        if ids and not category.allows(kind):
            raise UnsupportedAssociationTypeError(kind.value, category.name)

    return associations


def validate_amount(amount) -> Decimal:
    """
    Ensure an expense amount is a positive sum of whole cents.

    The value must fit the ``Numeric(12, 2)`` amount column as-is, so
    nothing is rounded on the way to storage.

    Raises:
        InvalidAmountError: If amount is missing, not a number, <= 0,
            has more than two decimal places or is too large
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError(amount)
    if not value.is_finite() or value <= 0 or value > MAX_AMOUNT:
        raise InvalidAmountError(amount)
    if value != value.quantize(CENT):
        raise InvalidAmountError(amount)
    return value.quantize(CENT)
