"""Truck model - a fleet vehicle."""
from datetime import datetime

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, new_id


class Truck(Base):
    """Truck model."""
    
    __tablename__ = "trucks"
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    registration_no: Mapped[str] = mapped_column(String(50), nullable=False)
    make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="available", nullable=False)
    
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    
    @property
    def label(self) -> str:
        """Key used in per-truck breakdowns."""
        return self.registration_no
    
    def __repr__(self) -> str:
        return f"<Truck(id={self.id}, registration_no='{self.registration_no}')>"
