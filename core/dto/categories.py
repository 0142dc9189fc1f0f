"""Expense category DTOs for data validation."""
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class ExpenseCategoryDTO(BaseModel):
    """DTO for creating or editing an expense category."""
    
    name: str = Field(..., min_length=1, max_length=100, description="Unique within the organization")
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, description="Hex chart color, e.g. #f97316")
    icon: Optional[str] = Field(None, max_length=50)
    is_truck: bool = Field(False, description="Expenses may be linked to trucks")
    is_trip: bool = Field(False, description="Expenses may be linked to trips")
    is_driver: bool = Field(False, description="Expenses may be linked to drivers")
    
    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trim surrounding whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v
    
    @field_validator('color')
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        """Ensure color is a hex code."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not HEX_COLOR.match(v):
            raise ValueError("Color must be a hex code like #f97316")
        return v.lower()
