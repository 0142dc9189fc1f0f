"""Database repositories package."""
from database.repositories.expense import ExpenseRepository
from database.repositories.expense_category import ExpenseCategoryRepository
from database.repositories.supplier import SupplierRepository
from database.repositories.fleet import (
    TruckRepository,
    TripRepository,
    DriverRepository,
    FLEET_REPOSITORIES,
)

__all__ = [
    "ExpenseRepository",
    "ExpenseCategoryRepository",
    "SupplierRepository",
    "TruckRepository",
    "TripRepository",
    "DriverRepository",
    "FLEET_REPOSITORIES",
]
