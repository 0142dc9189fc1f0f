"""
Expense use cases: create, update, delete and mark-as-paid.

Each mutation runs in one transaction that covers the expense row, its
truck/trip/driver links and any supplier balance delta. Notifications go out
after commit and can never fail the mutation.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.dto.expenses import CreateExpenseDTO, UpdateExpenseDTO
from core.exceptions import (
    AssociationTargetNotFoundError,
    ExpenseAlreadyPaidError,
    ExpenseCategoryNotFoundError,
    ExpenseNotFoundError,
    SupplierNotFoundError,
)
from core.permissions import Actor, EXPENSE_MANAGERS, EXPENSE_WRITERS, require_role
from database.models import AssociationKind, Expense, ExpenseCategory
from database.repositories import (
    ExpenseCategoryRepository,
    ExpenseRepository,
    SupplierRepository,
    FLEET_REPOSITORIES,
)
from services.associations import AssociationSet, validate_amount, validate_associations
from services.notifications import (
    ExpenseNotificationData,
    NotificationDispatcher,
    NotificationEventType,
    default_dispatcher,
    expense_event,
)
from services.use_cases.base import BaseUseCase

logger = logging.getLogger(__name__)


class ExpenseUseCase(BaseUseCase[Expense]):
    """Shared lookups and notification plumbing for expense use cases."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        super().__init__(session)
        self.dispatcher = dispatcher or default_dispatcher
        self.expenses = ExpenseRepository(session)
        self.categories = ExpenseCategoryRepository(session)
        self.suppliers = SupplierRepository(session)

    async def _get_expense(self, organization_id: str, expense_id: str) -> Expense:
        expense = await self.expenses.get_for_organization(expense_id, organization_id)
        if not expense:
            raise ExpenseNotFoundError(expense_id)
        return expense

    async def _get_category(self, organization_id: str, category_id: str) -> ExpenseCategory:
        category = await self.categories.get_for_organization(category_id, organization_id)
        if not category:
            raise ExpenseCategoryNotFoundError(category_id)
        return category

    async def _check_supplier(self, organization_id: str, supplier_id: Optional[str]) -> None:
        if supplier_id is None:
            return
        if not await self.suppliers.get_for_organization(supplier_id, organization_id):
            raise SupplierNotFoundError(supplier_id)

    async def _check_targets(self, organization_id: str, associations: AssociationSet) -> None:
        """Every linked truck/trip/driver must exist in the organization."""
        for kind, ids in associations.by_kind().items():
            if not ids:
                continue
            repo = FLEET_REPOSITORIES[kind](self.session)
            missing = set(ids) - await repo.get_owned_ids(organization_id, ids)
            if missing:
                raise AssociationTargetNotFoundError(kind.value, missing)

    @staticmethod
    def _notification_data(expense: Expense, category: ExpenseCategory) -> ExpenseNotificationData:
        return ExpenseNotificationData(
            id=expense.id,
            description=expense.notes or f"{category.name} expense",
            category=category.name,
            amount=Decimal(expense.amount),
            date=expense.expense_date,
        )

    def _notify(
        self,
        event_type: NotificationEventType,
        data: ExpenseNotificationData,
        actor: Actor,
    ) -> None:
        self.dispatcher.dispatch(
            expense_event(event_type, data, actor.organization_id, actor.performed_by)
        )


class CreateExpenseUseCase(ExpenseUseCase):
    """
    Create an expense with its associations.
    """

    async def execute(self, actor: Actor, data: CreateExpenseDTO) -> Expense:
        """
        Validate and store a new expense.

        Args:
            actor: Acting user; their organization scopes every lookup
            data: Validated expense input

        Returns:
            Created Expense

        Raises:
            PermissionDeniedError: Role cannot create expenses
            InvalidAmountError: Amount is not a positive number of cents
            ExpenseCategoryNotFoundError: Category not in the organization
            InvalidAssociationError / MissingAssociationError /
            UnsupportedAssociationTypeError: Association shape is illegal
            SupplierNotFoundError / AssociationTargetNotFoundError: Unknown link target
        """
        require_role(actor, EXPENSE_WRITERS)
        organization_id = actor.organization_id

        async with self.atomic():
            category = await self._get_category(organization_id, data.category_id)
            amount = validate_amount(data.amount)
            associations = validate_associations(
                category,
                data.is_business_expense,
                data.truck_ids,
                data.trip_ids,
                data.driver_ids,
            )
            # Supplier attribution only exists on business expenses
            supplier_id = data.supplier_id if data.is_business_expense else None
            await self._check_supplier(organization_id, supplier_id)
            await self._check_targets(organization_id, associations)

            expense = await self.expenses.create(
                organization_id=organization_id,
                category_id=category.id,
                amount=amount,
                expense_date=data.expense_date,
                notes=data.notes,
                is_business_expense=data.is_business_expense,
                supplier_id=supplier_id,
                is_paid=data.is_paid,
            )
            for kind, ids in associations.by_kind().items():
                await self.expenses.add_associations(expense.id, kind, ids)

            if expense.owes_supplier:
                await self.suppliers.adjust_balance(supplier_id, amount)

            notification = self._notification_data(expense, category)

        logger.info(
            f"Expense {notification.id} created ({category.name}, {amount})",
            extra={"organization_id": organization_id, "expense_id": notification.id},
        )
        self._notify(NotificationEventType.CREATED, notification, actor)
        return expense


class UpdateExpenseUseCase(ExpenseUseCase):
    """
    Update an expense, its associations and the affected supplier balances.
    """

    async def execute(self, actor: Actor, expense_id: str, data: UpdateExpenseDTO) -> Expense:
        """
        Apply new values to an existing expense.

        Association kinds passed as ``None`` keep their stored rows and are
        validated as stored; kinds passed as a list are replaced wholesale.
        Business expenses lose all truck/trip/driver rows.

        Raises:
            ExpenseNotFoundError: Expense not in the organization
            (plus everything CreateExpenseUseCase raises)
        """
        require_role(actor, EXPENSE_WRITERS)
        organization_id = actor.organization_id

        async with self.atomic():
            expense = await self._get_expense(organization_id, expense_id)
            category = await self._get_category(organization_id, data.category_id)
            amount = validate_amount(data.amount)

            requested: Dict[AssociationKind, Optional[list]] = {
                AssociationKind.TRUCK: data.truck_ids,
                AssociationKind.TRIP: data.trip_ids,
                AssociationKind.DRIVER: data.driver_ids,
            }
            effective = {kind: ids or [] for kind, ids in requested.items()}
            if not data.is_business_expense and any(ids is None for ids in requested.values()):
                stored = await self.expenses.get_association_ids(expense.id)
                for kind, ids in requested.items():
                    if ids is None:
                        effective[kind] = stored[kind]

            associations = validate_associations(
                category,
                data.is_business_expense,
                effective[AssociationKind.TRUCK],
                effective[AssociationKind.TRIP],
                effective[AssociationKind.DRIVER],
            )
            supplier_id = data.supplier_id if data.is_business_expense else None
            await self._check_supplier(organization_id, supplier_id)
            await self._check_targets(organization_id, associations)

            # Reverse what the old state contributed, then add the new state
            if expense.owes_supplier:
                await self.suppliers.adjust_balance(expense.supplier_id, -Decimal(expense.amount))

            expense.category_id = category.id
            expense.amount = amount
            expense.expense_date = data.expense_date
            expense.notes = data.notes
            expense.is_business_expense = data.is_business_expense
            expense.supplier_id = supplier_id

            if expense.owes_supplier:
                await self.suppliers.adjust_balance(supplier_id, amount)

            await self.expenses.flush()

            if data.is_business_expense:
                await self.expenses.clear_associations(expense.id)
            else:
                for kind, ids in associations.by_kind().items():
                    if requested[kind] is not None:
                        await self.expenses.replace_associations(expense.id, kind, ids)

            notification = self._notification_data(expense, category)

        logger.info(
            f"Expense {expense_id} updated",
            extra={"organization_id": organization_id, "expense_id": expense_id},
        )
        self._notify(NotificationEventType.UPDATED, notification, actor)
        return expense


class DeleteExpenseUseCase(ExpenseUseCase):
    """
    Delete an expense, reversing its supplier balance contribution.
    """

    async def execute(self, actor: Actor, expense_id: str) -> None:
        """
        Remove an expense and its association rows.

        Raises:
            PermissionDeniedError: Role cannot delete expenses
            ExpenseNotFoundError: Expense not in the organization
        """
        require_role(actor, EXPENSE_MANAGERS)
        organization_id = actor.organization_id

        async with self.atomic():
            expense = await self._get_expense(organization_id, expense_id)
            category = await self.categories.get_by_id(expense.category_id)
            notification = self._notification_data(expense, category)

            if expense.owes_supplier:
                await self.suppliers.adjust_balance(expense.supplier_id, -Decimal(expense.amount))

            await self.expenses.delete_by_id(expense.id)

        logger.info(
            f"Expense {expense_id} deleted",
            extra={"organization_id": organization_id, "expense_id": expense_id},
        )
        self._notify(NotificationEventType.DELETED, notification, actor)


class MarkExpensePaidUseCase(ExpenseUseCase):
    """
    Mark an expense as paid, settling it against its supplier's balance.
    """

    async def execute(self, actor: Actor, expense_id: str) -> Expense:
        """
        Flag an expense as paid.

        Raises:
            ExpenseNotFoundError: Expense not in the organization
            ExpenseAlreadyPaidError: Expense was already paid
        """
        require_role(actor, EXPENSE_MANAGERS)
        organization_id = actor.organization_id

        async with self.atomic():
            expense = await self._get_expense(organization_id, expense_id)
            if expense.is_paid:
                raise ExpenseAlreadyPaidError()

            if expense.owes_supplier:
                await self.suppliers.adjust_balance(expense.supplier_id, -Decimal(expense.amount))

            expense.is_paid = True
            expense.paid_date = datetime.now(timezone.utc)
            await self.expenses.flush()

            category = await self.categories.get_by_id(expense.category_id)
            notification = self._notification_data(expense, category)

        logger.info(
            f"Expense {expense_id} marked as paid",
            extra={"organization_id": organization_id, "expense_id": expense_id},
        )
        self._notify(NotificationEventType.UPDATED, notification, actor)
        return expense


class GetExpenseUseCase(ExpenseUseCase):
    """
    Get one expense with category, supplier and linked fleet records.
    """

    async def execute(self, actor: Actor, expense_id: str) -> Expense:
        require_role(actor, EXPENSE_WRITERS)
        expense = await self.expenses.get_with_relations(expense_id, actor.organization_id)
        if not expense:
            raise ExpenseNotFoundError(expense_id)
        return expense
