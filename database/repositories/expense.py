"""Repository for Expense model operations."""
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, delete, and_
from sqlalchemy.orm import selectinload

from database.models import (
    Expense,
    TruckExpense,
    TripExpense,
    DriverExpense,
    AssociationKind,
    ASSOCIATION_MODELS,
)
from database.repositories.base import BaseRepository


def _relation_options():
    """Loader options for an expense with everything reports need."""
    return (
        selectinload(Expense.category),
        selectinload(Expense.supplier),
        selectinload(Expense.truck_expenses).selectinload(TruckExpense.truck),
        selectinload(Expense.trip_expenses).selectinload(TripExpense.trip),
        selectinload(Expense.driver_expenses).selectinload(DriverExpense.driver),
    )


class ExpenseRepository(BaseRepository[Expense]):
    """Repository for managing expenses and their associations."""

    model_class = Expense

    async def create(
        self,
        organization_id: str,
        category_id: str,
        amount: Decimal,
        expense_date: datetime,
        notes: Optional[str] = None,
        is_business_expense: bool = False,
        supplier_id: Optional[str] = None,
        is_paid: bool = False,
    ) -> Expense:
        """Create a new expense."""
        expense = Expense(
            organization_id=organization_id,
            category_id=category_id,
            amount=amount,
            expense_date=expense_date,
            notes=notes,
            is_business_expense=is_business_expense,
            supplier_id=supplier_id,
            is_paid=is_paid,
        )
        self.add(expense)
        await self.flush()
        return expense

    async def get_with_relations(
        self,
        expense_id: str,
        organization_id: str
    ) -> Optional[Expense]:
        """
        Get a tenant's expense with category, supplier and linked fleet rows.

        Identity-map copies are overwritten so association rows replaced by
        bulk statements earlier in the session are reflected.
        """
        stmt = (
            select(Expense)
            .where(Expense.id == expense_id, Expense.organization_id == organization_id)
            .options(*_relation_options())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_organization(
        self,
        organization_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> List[Expense]:
        """
        Get expenses for an organization, optionally within a date range.

        Args:
            organization_id: Tenant scope
            start_date: Filter expenses from this date (inclusive)
            end_date: Filter expenses until this date (inclusive)

        Returns:
            Expenses newest first, ties broken by ID
        """
        conditions = [Expense.organization_id == organization_id]

        if start_date:
            conditions.append(Expense.expense_date >= start_date)
        if end_date:
            conditions.append(Expense.expense_date <= end_date)

        stmt = (
            select(Expense)
            .where(and_(*conditions))
            .options(*_relation_options())
            .order_by(Expense.expense_date.desc(), Expense.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_association_ids(self, expense_id: str) -> Dict[AssociationKind, List[str]]:
        """Get linked truck/trip/driver IDs of an expense, per kind."""
        ids: Dict[AssociationKind, List[str]] = {}
        for kind, (model, column) in ASSOCIATION_MODELS.items():
            target = getattr(model, column)
            result = await self.session.execute(
                select(target).where(model.expense_id == expense_id).order_by(target)
            )
            ids[kind] = list(result.scalars().all())
        return ids

    async def add_associations(
        self,
        expense_id: str,
        kind: AssociationKind,
        target_ids: Iterable[str]
    ) -> None:
        """Insert association rows; nothing is issued for an empty set."""
        target_ids = list(target_ids)
        if not target_ids:
            return
        model, column = ASSOCIATION_MODELS[AssociationKind(kind)]
        self.session.add_all(
            [model(expense_id=expense_id, **{column: target_id}) for target_id in target_ids]
        )
        await self.session.flush()

    async def clear_associations(
        self,
        expense_id: str,
        kinds: Optional[Iterable[AssociationKind]] = None
    ) -> None:
        """Delete association rows of the given kinds (all kinds by default)."""
        for kind in (kinds if kinds is not None else ASSOCIATION_MODELS):
            model, _ = ASSOCIATION_MODELS[AssociationKind(kind)]
            await self.session.execute(
                delete(model)
                .where(model.expense_id == expense_id)
                .execution_options(synchronize_session=False)
            )

    async def replace_associations(
        self,
        expense_id: str,
        kind: AssociationKind,
        target_ids: Iterable[str]
    ) -> None:
        """Replace the full row set of one association kind (delete, then insert)."""
        await self.clear_associations(expense_id, [kind])
        await self.add_associations(expense_id, kind, target_ids)

    async def delete_by_id(self, expense_id: str) -> None:
        """
        Delete an expense row.

        Association rows go with it through the ON DELETE CASCADE foreign
        keys, so stale collections in the session are never flushed.
        """
        await self.session.execute(delete(Expense).where(Expense.id == expense_id))
