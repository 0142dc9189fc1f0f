"""Repository for ExpenseCategory model operations."""
from typing import List, Optional, Tuple

from sqlalchemy import select, func

from database.models import Expense, ExpenseCategory, AssociationKind, ASSOCIATION_MODELS
from database.repositories.base import BaseRepository


class ExpenseCategoryRepository(BaseRepository[ExpenseCategory]):
    """Repository for managing expense categories."""

    model_class = ExpenseCategory

    async def create(
        self,
        organization_id: str,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        is_truck: bool = False,
        is_trip: bool = False,
        is_driver: bool = False,
    ) -> ExpenseCategory:
        """Create a new category."""
        category = ExpenseCategory(
            organization_id=organization_id,
            name=name,
            description=description,
            color=color,
            icon=icon,
            is_truck=is_truck,
            is_trip=is_trip,
            is_driver=is_driver,
        )
        self.add(category)
        await self.flush()
        return category

    async def get_by_name(self, organization_id: str, name: str) -> Optional[ExpenseCategory]:
        """Get category by its (organization, name) key."""
        result = await self.session.execute(
            select(ExpenseCategory).where(
                ExpenseCategory.organization_id == organization_id,
                ExpenseCategory.name == name,
            )
        )
        return result.scalar_one_or_none()

    async def get_with_counts(self, organization_id: str) -> List[Tuple[ExpenseCategory, int]]:
        """
        Get all categories of an organization with their expense counts.

        Returns:
            List of (category, expense_count) ordered by category name
        """
        stmt = (
            select(ExpenseCategory, func.count(Expense.id))
            .outerjoin(Expense, Expense.category_id == ExpenseCategory.id)
            .where(ExpenseCategory.organization_id == organization_id)
            .group_by(ExpenseCategory.id)
            .order_by(ExpenseCategory.name)
        )
        result = await self.session.execute(stmt)
        return [(category, count) for category, count in result.all()]

    async def count_expenses(self, category_id: str) -> int:
        """Count expenses referencing the category."""
        result = await self.session.execute(
            select(func.count(Expense.id)).where(Expense.category_id == category_id)
        )
        return result.scalar() or 0

    async def count_associations(self, category_id: str, kind: AssociationKind) -> int:
        """Count association rows of ``kind`` on expenses in the category."""
        model, _ = ASSOCIATION_MODELS[AssociationKind(kind)]
        result = await self.session.execute(
            select(func.count(model.id))
            .join(Expense, Expense.id == model.expense_id)
            .where(Expense.category_id == category_id)
        )
        return result.scalar() or 0
