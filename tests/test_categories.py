"""Tests for expense category management and deletion guards."""
import logging
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError as DTOValidationError

from core.dto.categories import ExpenseCategoryDTO
from core.dto.expenses import CreateExpenseDTO
from core.exceptions import (
    CategoryInUseError,
    CategoryNameConflictError,
    ConflictError,
    ExpenseCategoryNotFoundError,
    PermissionDeniedError,
)
from database.models import AssociationKind
from database.repositories import ExpenseCategoryRepository, ExpenseRepository
from services.category_constraints import CategoryConstraintService
from services.use_cases import (
    CreateExpenseCategoryUseCase,
    CreateExpenseUseCase,
    DeleteExpenseCategoryUseCase,
    DeleteExpenseUseCase,
    ListExpenseCategoriesUseCase,
    UpdateExpenseCategoryUseCase,
)


def _expense_dto(category_id: str, **kwargs) -> CreateExpenseDTO:
    return CreateExpenseDTO(
        category_id=category_id,
        amount=Decimal("42.00"),
        expense_date=datetime(2026, 6, 1, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_create_category(db_session, organization, admin):
    """Scenario A setup: Fuel allows trucks but not trips."""
    category = await CreateExpenseCategoryUseCase(db_session).execute(
        admin, ExpenseCategoryDTO(name="  Fuel ", color="#F97316", is_truck=True)
    )

    assert category.name == "Fuel"
    assert category.color == "#f97316"
    assert category.allows(AssociationKind.TRUCK)
    assert not category.allows("trip")


@pytest.mark.asyncio
async def test_duplicate_name_in_same_org_conflicts(db_session, organization, admin, fuel_category):
    with pytest.raises(CategoryNameConflictError) as exc_info:
        await CreateExpenseCategoryUseCase(db_session).execute(admin, ExpenseCategoryDTO(name="Fuel"))

    assert isinstance(exc_info.value, ConflictError)
    assert exc_info.value.code == "category_name_conflict"


@pytest.mark.asyncio
async def test_same_name_in_other_org_is_allowed(db_session, organization, other_admin, fuel_category):
    category = await CreateExpenseCategoryUseCase(db_session).execute(
        other_admin, ExpenseCategoryDTO(name="Fuel")
    )

    assert category.organization_id == "org-other"


@pytest.mark.asyncio
async def test_staff_cannot_manage_categories(db_session, organization, staff):
    with pytest.raises(PermissionDeniedError):
        await CreateExpenseCategoryUseCase(db_session).execute(staff, ExpenseCategoryDTO(name="Tolls"))


def test_dto_rejects_bad_color():
    with pytest.raises(DTOValidationError):
        ExpenseCategoryDTO(name="Tolls", color="orange")


@pytest.mark.asyncio
async def test_rename_to_taken_name_conflicts(db_session, admin, fuel_category, office_category):
    with pytest.raises(CategoryNameConflictError):
        await UpdateExpenseCategoryUseCase(db_session).execute(
            admin, office_category.id, ExpenseCategoryDTO(name="Fuel")
        )


@pytest.mark.asyncio
async def test_update_category(db_session, supervisor, fuel_category):
    updated = await UpdateExpenseCategoryUseCase(db_session).execute(
        supervisor,
        fuel_category.id,
        ExpenseCategoryDTO(name="Fuel & AdBlue", is_truck=True, is_trip=True),
    )

    assert updated.name == "Fuel & AdBlue"
    assert updated.is_trip is True


@pytest.mark.asyncio
async def test_update_unknown_category(db_session, admin, organization):
    with pytest.raises(ExpenseCategoryNotFoundError):
        await UpdateExpenseCategoryUseCase(db_session).execute(
            admin, "missing", ExpenseCategoryDTO(name="Anything")
        )


@pytest.mark.asyncio
async def test_dropping_capability_in_use_is_allowed_but_logged(
    db_session, admin, fleet, fuel_category, dispatcher, caplog
):
    expense = await CreateExpenseUseCase(db_session, dispatcher).execute(
        admin, _expense_dto(fuel_category.id, truck_ids=["T1"])
    )

    with caplog.at_level(logging.WARNING, logger="services.use_cases.categories"):
        updated = await UpdateExpenseCategoryUseCase(db_session).execute(
            admin, fuel_category.id, ExpenseCategoryDTO(name="Fuel", is_truck=False)
        )

    assert updated.is_truck is False
    assert "no longer allows truck" in caplog.text
    # Existing links are not re-validated or removed
    ids = await ExpenseRepository(db_session).get_association_ids(expense.id)
    assert ids[AssociationKind.TRUCK] == ["T1"]


@pytest.mark.asyncio
async def test_dropped_capabilities_ignores_unused_kinds(db_session, maintenance_category):
    service = CategoryConstraintService(db_session)

    dropped = await service.dropped_capabilities_in_use(
        maintenance_category, is_truck=False, is_trip=False, is_driver=False
    )

    assert dropped == []


@pytest.mark.asyncio
async def test_category_in_use_cannot_be_deleted(db_session, admin, fleet, fuel_category, dispatcher):
    """Deletion guard: referenced categories stay."""
    category_id = fuel_category.id
    await CreateExpenseUseCase(db_session, dispatcher).execute(
        admin, _expense_dto(category_id, truck_ids=["T1"])
    )
    service = CategoryConstraintService(db_session)
    assert await service.can_delete_category(fuel_category) is False

    with pytest.raises(CategoryInUseError) as exc_info:
        await DeleteExpenseCategoryUseCase(db_session).execute(admin, category_id)

    assert isinstance(exc_info.value, ConflictError)
    assert exc_info.value.expense_count == 1
    assert await ExpenseCategoryRepository(db_session).get_by_id(category_id) is not None


@pytest.mark.asyncio
async def test_category_deletable_once_expenses_are_gone(db_session, admin, fleet, fuel_category, dispatcher):
    category_id = fuel_category.id
    expense = await CreateExpenseUseCase(db_session, dispatcher).execute(
        admin, _expense_dto(category_id, truck_ids=["T1"])
    )
    await DeleteExpenseUseCase(db_session, dispatcher).execute(admin, expense.id)

    await DeleteExpenseCategoryUseCase(db_session).execute(admin, category_id)

    assert await ExpenseCategoryRepository(db_session).get_by_id(category_id) is None


@pytest.mark.asyncio
async def test_list_categories_with_counts(
    db_session, supervisor, admin, fleet, fuel_category, office_category, dispatcher
):
    await CreateExpenseUseCase(db_session, dispatcher).execute(
        admin, _expense_dto(fuel_category.id, truck_ids=["T1"])
    )
    await CreateExpenseUseCase(db_session, dispatcher).execute(
        admin, _expense_dto(fuel_category.id, truck_ids=["T2"])
    )

    summaries = await ListExpenseCategoriesUseCase(db_session).execute(supervisor)

    assert [(s.name, s.expense_count) for s in summaries] == [("Fuel", 2), ("Office", 0)]
    assert summaries[0].color == "#f97316"
    assert summaries[1].color == "#71717a"
