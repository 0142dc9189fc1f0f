"""Rules guarding expense categories that are already in use."""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from database.models import AssociationKind, ExpenseCategory
from database.repositories import ExpenseCategoryRepository

logger = logging.getLogger(__name__)


class CategoryConstraintService:
    """
    Checks on category deletion and capability edits.

    Capability flags are enforced when an expense is written, not when the
    category changes: switching ``is_truck`` off leaves existing truck links
    in place. ``dropped_capabilities_in_use`` only reports such cases.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = ExpenseCategoryRepository(session)

    async def can_delete_category(self, category: ExpenseCategory) -> bool:
        """A category can be deleted only while no expense references it."""
        return await self.repo.count_expenses(category.id) == 0

    async def dropped_capabilities_in_use(
        self,
        category: ExpenseCategory,
        is_truck: bool,
        is_trip: bool,
        is_driver: bool,
    ) -> List[AssociationKind]:
        """
        Kinds being switched off while expenses in the category still use them.

        Args:
            category: Category in its current (stored) state
            is_truck / is_trip / is_driver: Requested flags
        """
        requested = {
            AssociationKind.TRUCK: is_truck,
            AssociationKind.TRIP: is_trip,
            AssociationKind.DRIVER: is_driver,
        }
        in_use = []
        for kind, enabled in requested.items():
            if category.allows(kind) and not enabled:
                if await self.repo.count_associations(category.id, kind) > 0:
                    in_use.append(kind)
        return in_use
