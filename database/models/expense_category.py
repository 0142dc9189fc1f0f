"""Expense category model - tenant-defined classification with capability flags."""
from datetime import datetime

from sqlalchemy import Boolean, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, new_id


class ExpenseCategory(Base):
    """Expense category model."""
    
    __tablename__ = "expense_categories"
    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_expense_categories_org_name"),
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
    
    # Category details
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True, comment="Hex chart color")
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    
    # Which association types expenses in this category may carry
    is_truck: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_trip: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_driver: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    
    # Timestamps
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
    
    def allows(self, kind: str) -> bool:
        """Check whether expenses in this category may link to ``kind``."""
        return {
            "truck": self.is_truck,
            "trip": self.is_trip,
            "driver": self.is_driver,
        }[str(getattr(kind, "value", kind))]
    
    def __repr__(self) -> str:
        return (
            f"<ExpenseCategory(id={self.id}, name='{self.name}', "
            f"truck={self.is_truck}, trip={self.is_trip}, driver={self.is_driver})>"
        )
