"""
Expense category use cases.

Categories are managed by admins and supervisors only.
"""
import logging
from dataclasses import dataclass
from typing import List

from backoffice.config import settings
from core.dto.categories import ExpenseCategoryDTO
from core.exceptions import (
    CategoryInUseError,
    CategoryNameConflictError,
    ConflictError,
    ExpenseCategoryNotFoundError,
)
from core.permissions import Actor, CATEGORY_MANAGERS, require_role
from database.models import ExpenseCategory
from database.repositories import ExpenseCategoryRepository
from services.category_constraints import CategoryConstraintService
from services.use_cases.base import BaseUseCase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorySummary:
    """Category row as shown in category management."""
    id: str
    name: str
    description: str | None
    color: str
    icon: str | None
    is_truck: bool
    is_trip: bool
    is_driver: bool
    expense_count: int


class CategoryUseCase(BaseUseCase):
    def __init__(self, session):
        super().__init__(session)
        self.repo = ExpenseCategoryRepository(session)
        self.constraints = CategoryConstraintService(session)

    async def _get_category(self, organization_id: str, category_id: str) -> ExpenseCategory:
        category = await self.repo.get_for_organization(category_id, organization_id)
        if not category:
            raise ExpenseCategoryNotFoundError(category_id)
        return category

    async def _ensure_name_free(self, organization_id: str, name: str, exclude_id: str | None = None) -> None:
        existing = await self.repo.get_by_name(organization_id, name)
        if existing and existing.id != exclude_id:
            raise CategoryNameConflictError(name)


class CreateExpenseCategoryUseCase(CategoryUseCase):
    """Create a category unique by name within the organization."""

    async def execute(self, actor: Actor, data: ExpenseCategoryDTO) -> ExpenseCategory:
        require_role(actor, CATEGORY_MANAGERS)
        organization_id = actor.organization_id

        try:
            async with self.atomic():
                await self._ensure_name_free(organization_id, data.name)
                category = await self.repo.create(
                    organization_id=organization_id,
                    name=data.name,
                    description=data.description,
                    color=data.color,
                    icon=data.icon,
                    is_truck=data.is_truck,
                    is_trip=data.is_trip,
                    is_driver=data.is_driver,
                )
        except CategoryNameConflictError:
            raise
        except ConflictError as e:
            # Lost a race with a concurrent create of the same name
            raise CategoryNameConflictError(data.name) from e

        logger.info(
            f"Expense category '{category.name}' created",
            extra={"organization_id": organization_id, "category_id": category.id},
        )
        return category


class UpdateExpenseCategoryUseCase(CategoryUseCase):
    """
    Edit a category.

    Turning a capability flag off does not touch existing expenses; a warning
    is logged when expenses in the category still use the dropped kind.
    """

    async def execute(self, actor: Actor, category_id: str, data: ExpenseCategoryDTO) -> ExpenseCategory:
        require_role(actor, CATEGORY_MANAGERS)
        organization_id = actor.organization_id

        try:
            async with self.atomic():
                category = await self._get_category(organization_id, category_id)
                if data.name != category.name:
                    await self._ensure_name_free(organization_id, data.name, exclude_id=category.id)

                dropped = await self.constraints.dropped_capabilities_in_use(
                    category, data.is_truck, data.is_trip, data.is_driver
                )
                if dropped:
                    logger.warning(
                        f"Category '{category.name}' no longer allows "
                        f"{', '.join(kind.value for kind in dropped)} links still used by its expenses",
                        extra={"organization_id": organization_id, "category_id": category.id},
                    )

                category.name = data.name
                category.description = data.description
                category.color = data.color
                category.icon = data.icon
                category.is_truck = data.is_truck
                category.is_trip = data.is_trip
                category.is_driver = data.is_driver
                await self.repo.flush()
                await self.repo.refresh(category)
        except CategoryNameConflictError:
            raise
        except ConflictError as e:
            raise CategoryNameConflictError(data.name) from e

        logger.info(
            f"Expense category '{category.name}' updated",
            extra={"organization_id": organization_id, "category_id": category_id},
        )
        return category


class DeleteExpenseCategoryUseCase(CategoryUseCase):
    """Delete a category nobody references."""

    async def execute(self, actor: Actor, category_id: str) -> None:
        """
        Raises:
            ExpenseCategoryNotFoundError: Category not in the organization
            CategoryInUseError: At least one expense references the category
        """
        require_role(actor, CATEGORY_MANAGERS)
        organization_id = actor.organization_id

        async with self.atomic():
            category = await self._get_category(organization_id, category_id)
            if not await self.constraints.can_delete_category(category):
                raise CategoryInUseError(
                    category.name, await self.repo.count_expenses(category.id)
                )
            await self.repo.delete(category)

        logger.info(
            f"Expense category '{category.name}' deleted",
            extra={"organization_id": organization_id, "category_id": category_id},
        )


class ListExpenseCategoriesUseCase(CategoryUseCase):
    """Categories of the organization with expense counts, ordered by name."""

    async def execute(self, actor: Actor) -> List[CategorySummary]:
        require_role(actor, CATEGORY_MANAGERS)
        rows = await self.repo.get_with_counts(actor.organization_id)
        return [
            CategorySummary(
                id=category.id,
                name=category.name,
                description=category.description,
                color=category.color or settings.default_category_color,
                icon=category.icon,
                is_truck=category.is_truck,
                is_trip=category.is_trip,
                is_driver=category.is_driver,
                expense_count=count,
            )
            for category, count in rows
        ]
