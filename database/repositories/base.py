"""
Base repository with common tenant-scoped operations.

Provides a generic base class for repositories to reduce code duplication.
"""
from typing import TypeVar, Generic, Iterable, Optional, Set, Type
from abc import ABC

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from database.base import Base

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Abstract base repository for organization-owned models.

    Provides:
    - get_by_id: Get single entity by ID
    - get_for_organization: Get entity by ID only if it belongs to the tenant
    - get_owned_ids: Which of the given IDs exist in the tenant
    - count_for_organization: Count tenant entities
    - add / flush / refresh / delete: Session helpers

    Usage:
        class TruckRepository(BaseRepository[Truck]):
            model_class = Truck
    """

    model_class: Type[ModelType]

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, entity_id: str) -> Optional[ModelType]:
        """
        Get entity by its primary key ID.

        Args:
            entity_id: Primary key ID

        Returns:
            Entity or None if not found
        """
        result = await self.session.execute(
            select(self.model_class).where(self.model_class.id == entity_id)
        )
        return result.scalar_one_or_none()

    async def get_for_organization(
        self,
        entity_id: str,
        organization_id: str
    ) -> Optional[ModelType]:
        """
        Get entity by ID scoped to an organization.

        Returns:
            Entity or None if it does not exist or belongs to another tenant
        """
        result = await self.session.execute(
            select(self.model_class).where(
                self.model_class.id == entity_id,
                self.model_class.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_owned_ids(
        self,
        organization_id: str,
        entity_ids: Iterable[str]
    ) -> Set[str]:
        """
        Filter IDs down to those that exist in the organization.

        Args:
            organization_id: Tenant scope
            entity_ids: Candidate IDs

        Returns:
            Subset of entity_ids present in the tenant
        """
        ids = list(entity_ids)
        if not ids:
            return set()
        result = await self.session.execute(
            select(self.model_class.id).where(
                self.model_class.id.in_(ids),
                self.model_class.organization_id == organization_id,
            )
        )
        return set(result.scalars().all())

    async def count_for_organization(self, organization_id: str) -> int:
        """Count entities of an organization."""
        result = await self.session.execute(
            select(func.count(self.model_class.id)).where(
                self.model_class.organization_id == organization_id
            )
        )
        return result.scalar() or 0

    def add(self, entity: ModelType) -> None:
        """
        Add entity to session (for create operations).

        Args:
            entity: Entity to add
        """
        self.session.add(entity)

    async def flush(self) -> None:
        """Flush session changes to database."""
        await self.session.flush()

    async def refresh(self, entity: ModelType) -> ModelType:
        """Refresh entity from database."""
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Delete an entity and flush."""
        await self.session.delete(entity)
        await self.session.flush()
