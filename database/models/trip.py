"""Trip model - a scheduled haul between two cities."""
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, new_id


class Trip(Base):
    """Trip model."""
    
    __tablename__ = "trips"
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    origin_city: Mapped[str] = mapped_column(String(100), nullable=False)
    destination_city: Mapped[str] = mapped_column(String(100), nullable=False)
    scheduled_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="scheduled", nullable=False)
    
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    
    @property
    def label(self) -> str:
        """Key used in per-trip breakdowns."""
        return f"{self.origin_city}→{self.destination_city}"
    
    def __repr__(self) -> str:
        return f"<Trip(id={self.id}, route='{self.label}')>"
