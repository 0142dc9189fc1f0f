"""Expense DTOs for data validation."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _clean_ids(v) -> Optional[List[str]]:
    if v is None:
        return None
    if not isinstance(v, (list, tuple, set, frozenset)):
        raise ValueError("expected a list of IDs")
    return [str(x).strip() for x in v if x is not None and str(x).strip()]


class CreateExpenseDTO(BaseModel):
    """DTO for creating a new expense."""
    
    category_id: str = Field(..., description="Expense category ID")
    amount: Decimal = Field(..., max_digits=12, decimal_places=2, description="Amount in whole cents, must be positive")
    expense_date: datetime = Field(..., description="When the expense occurred")
    notes: Optional[str] = Field(None, max_length=2000, description="Free-text notes")
    truck_ids: List[str] = Field(default_factory=list, description="Linked trucks")
    trip_ids: List[str] = Field(default_factory=list, description="Linked trips")
    driver_ids: List[str] = Field(default_factory=list, description="Linked drivers")
    is_business_expense: bool = Field(False, description="Owed to a supplier, not fleet operations")
    supplier_id: Optional[str] = Field(None, description="Supplier for business expenses")
    is_paid: bool = Field(False, description="Already settled with the supplier")
    
    @field_validator('truck_ids', 'trip_ids', 'driver_ids', mode='before')
    @classmethod
    def validate_ids(cls, v):
        """Drop blank IDs coming from multi-select inputs."""
        return _clean_ids(v) if v is not None else []
    
    @field_validator('notes')
    @classmethod
    def validate_notes(cls, v: Optional[str]) -> Optional[str]:
        """Store blank notes as NULL."""
        if v is None:
            return None
        v = v.strip()
        return v or None


class UpdateExpenseDTO(BaseModel):
    """
    DTO for updating an expense.
    
    Association lists left as ``None`` keep the stored rows; an explicit
    list (even empty) replaces them.
    """
    
    category_id: str = Field(..., description="Expense category ID")
    amount: Decimal = Field(..., max_digits=12, decimal_places=2, description="Amount in whole cents, must be positive")
    expense_date: datetime = Field(..., description="When the expense occurred")
    notes: Optional[str] = Field(None, max_length=2000, description="Free-text notes")
    truck_ids: Optional[List[str]] = Field(None, description="Replacement truck set")
    trip_ids: Optional[List[str]] = Field(None, description="Replacement trip set")
    driver_ids: Optional[List[str]] = Field(None, description="Replacement driver set")
    is_business_expense: bool = Field(False, description="Owed to a supplier, not fleet operations")
    supplier_id: Optional[str] = Field(None, description="Supplier for business expenses")
    
    @field_validator('truck_ids', 'trip_ids', 'driver_ids', mode='before')
    @classmethod
    def validate_ids(cls, v):
        """Drop blank IDs, keep ``None`` meaning untouched."""
        return _clean_ids(v)
    
    @field_validator('notes')
    @classmethod
    def validate_notes(cls, v: Optional[str]) -> Optional[str]:
        """Store blank notes as NULL."""
        if v is None:
            return None
        v = v.strip()
        return v or None
