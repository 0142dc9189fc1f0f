"""
Data Transfer Objects (DTOs) for data validation.

This package contains Pydantic models for validating input data.
"""

from core.dto.expenses import (
    CreateExpenseDTO,
    UpdateExpenseDTO,
)
from core.dto.categories import ExpenseCategoryDTO

__all__ = [
    'CreateExpenseDTO',
    'UpdateExpenseDTO',
    'ExpenseCategoryDTO',
]
