"""Database models package."""
from database.models.organization import Organization
from database.models.truck import Truck
from database.models.trip import Trip
from database.models.driver import Driver
from database.models.supplier import Supplier
from database.models.expense_category import ExpenseCategory
from database.models.expense import Expense
from database.models.expense_association import (
    AssociationKind,
    TruckExpense,
    TripExpense,
    DriverExpense,
    ASSOCIATION_MODELS,
)

__all__ = [
    "Organization",
    "Truck",
    "Trip",
    "Driver",
    "Supplier",
    "ExpenseCategory",
    "Expense",
    "AssociationKind",
    "TruckExpense",
    "TripExpense",
    "DriverExpense",
    "ASSOCIATION_MODELS",
]
