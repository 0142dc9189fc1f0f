"""Join rows linking an expense to trucks, trips and drivers."""
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.base import Base, new_id

if TYPE_CHECKING:
    from database.models.expense import Expense
    from database.models.truck import Truck
    from database.models.trip import Trip
    from database.models.driver import Driver


class AssociationKind(str, Enum):
    """Operational entities an expense can be linked to."""
    TRUCK = "truck"
    TRIP = "trip"
    DRIVER = "driver"


class TruckExpense(Base):
    """Expense ↔ truck link."""
    
    __tablename__ = "truck_expenses"
    __table_args__ = (
        UniqueConstraint("truck_id", "expense_id", name="uq_truck_expenses_pair"),
    )
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    truck_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("trucks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    expense_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    expense: Mapped["Expense"] = relationship(back_populates="truck_expenses")
    truck: Mapped["Truck"] = relationship()


class TripExpense(Base):
    """Expense ↔ trip link."""
    
    __tablename__ = "trip_expenses"
    __table_args__ = (
        UniqueConstraint("trip_id", "expense_id", name="uq_trip_expenses_pair"),
    )
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    trip_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    expense_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    expense: Mapped["Expense"] = relationship(back_populates="trip_expenses")
    trip: Mapped["Trip"] = relationship()


class DriverExpense(Base):
    """Expense ↔ driver link."""
    
    __tablename__ = "driver_expenses"
    __table_args__ = (
        UniqueConstraint("driver_id", "expense_id", name="uq_driver_expenses_pair"),
    )
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    driver_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("drivers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    expense_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    expense: Mapped["Expense"] = relationship(back_populates="driver_expenses")
    driver: Mapped["Driver"] = relationship()


# Join model and target column per association kind
ASSOCIATION_MODELS = {
    AssociationKind.TRUCK: (TruckExpense, "truck_id"),
    AssociationKind.TRIP: (TripExpense, "trip_id"),
    AssociationKind.DRIVER: (DriverExpense, "driver_id"),
}
