"""
Use Cases package for business logic encapsulation.

This package contains use case classes that encapsulate business logic
and orchestrate interactions between repositories and services.
"""

from services.use_cases.categories import (
    CategorySummary,
    CreateExpenseCategoryUseCase,
    UpdateExpenseCategoryUseCase,
    DeleteExpenseCategoryUseCase,
    ListExpenseCategoriesUseCase,
)
from services.use_cases.expenses import (
    CreateExpenseUseCase,
    UpdateExpenseUseCase,
    DeleteExpenseUseCase,
    MarkExpensePaidUseCase,
    GetExpenseUseCase,
)
from services.use_cases.reports import (
    GetExpenseChartsUseCase,
    GetExpenseReportUseCase,
)

__all__ = [
    'CategorySummary',
    'CreateExpenseCategoryUseCase',
    'UpdateExpenseCategoryUseCase',
    'DeleteExpenseCategoryUseCase',
    'ListExpenseCategoriesUseCase',
    'CreateExpenseUseCase',
    'UpdateExpenseUseCase',
    'DeleteExpenseUseCase',
    'MarkExpensePaidUseCase',
    'GetExpenseUseCase',
    'GetExpenseChartsUseCase',
    'GetExpenseReportUseCase',
]
