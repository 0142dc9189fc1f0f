"""Expense model - a monetary outflow of an organization."""
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, String, Numeric, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base, new_id

if TYPE_CHECKING:
    from database.models.expense_category import ExpenseCategory
    from database.models.supplier import Supplier
    from database.models.expense_association import TruckExpense, TripExpense, DriverExpense


class Expense(Base):
    """Expense model."""
    
    __tablename__ = "expenses"
    __table_args__ = (
        Index("ix_expenses_org_date", "organization_id", "expense_date"),
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )
    
    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    
    # Organization relationship
    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    # Expense details
    category_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("expense_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    expense_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    
    # Business expenses are owed to a supplier instead of tied to fleet operations
    is_business_expense: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    supplier_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("suppliers.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    paid_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    
    # Timestamps
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
    
    # Relationships
    category: Mapped["ExpenseCategory"] = relationship()
    supplier: Mapped[Optional["Supplier"]] = relationship()
    truck_expenses: Mapped[List["TruckExpense"]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    trip_expenses: Mapped[List["TripExpense"]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    driver_expenses: Mapped[List["DriverExpense"]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    
    @property
    def owes_supplier(self) -> bool:
        """True when this expense currently counts towards a supplier balance."""
        return self.is_business_expense and self.supplier_id is not None and not self.is_paid
    
    def __repr__(self) -> str:
        return (
            f"<Expense(id={self.id}, organization_id={self.organization_id}, "
            f"category_id={self.category_id}, amount={self.amount})>"
        )
