"""Organization model - the tenant every record belongs to."""
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, new_id


class Organization(Base):
    """Organization (tenant) model."""
    
    __tablename__ = "organizations"
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    
    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name='{self.name}')>"
