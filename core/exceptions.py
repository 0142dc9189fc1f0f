"""
Custom application exceptions.

These exceptions represent business logic errors that should be handled
gracefully with user-friendly messages. Every class carries a stable ``code``
so the calling layer can tell which invariant or lookup failed.
"""
from typing import Iterable, Optional


class BackofficeError(Exception):
    """Base exception for all application errors."""

    message: str = "Something went wrong"
    code: str = "error"

    def __init__(self, message: Optional[str] = None, **kwargs):
        self.message = message or self.message
        self.details = kwargs
        super().__init__(self.message)


# ============== Authorization ==============

class PermissionDeniedError(BackofficeError):
    """User doesn't have permission for this action."""
    message = "Access denied"
    code = "permission_denied"

    def __init__(self, role: Optional[str] = None, allowed: Iterable[str] = ()):
        self.role = role
        self.allowed = tuple(allowed)
        if role and self.allowed:
            super().__init__(
                f"Role '{role}' cannot perform this action "
                f"(requires one of: {', '.join(self.allowed)})"
            )
        else:
            super().__init__()


# ============== Validation ==============

class ValidationError(BackofficeError):
    """Caller input violates an expense invariant."""
    message = "Invalid expense data"
    code = "validation_error"


class InvalidAssociationError(ValidationError):
    """Business expense submitted with truck/trip/driver associations."""
    message = "Business expenses cannot be linked to trucks, trips or drivers"
    code = "invalid_association"


class MissingAssociationError(ValidationError):
    """Operational expense submitted without any truck/trip/driver."""
    message = "Select at least one truck, trip or driver for this expense"
    code = "missing_association"


class UnsupportedAssociationTypeError(ValidationError):
    """Category does not allow the submitted association type."""
    message = "This category does not allow that association type"
    code = "unsupported_association_type"

    def __init__(self, kind: str, category_name: Optional[str] = None):
        self.kind = kind
        self.category_name = category_name
        if category_name:
            super().__init__(
                f"Category '{category_name}' does not allow {kind} associations",
                kind=kind,
            )
        else:
            super().__init__(kind=kind)


class InvalidAmountError(ValidationError):
    """Amount is not a positive number of whole cents."""
    message = "Amount must be greater than zero, in whole cents"
    code = "invalid_amount"

    def __init__(self, amount=None):
        self.amount = amount
        super().__init__(
            f"Amount must be greater than zero, in whole cents, got {amount}" if amount is not None else None
        )


# ============== Lookups ==============

class NotFoundError(BackofficeError):
    """Referenced entity does not exist in the caller's organization."""
    message = "Not found"
    code = "not_found"


class ExpenseNotFoundError(NotFoundError):
    """Expense not found."""
    message = "Expense not found"
    code = "expense_not_found"

    def __init__(self, expense_id: Optional[str] = None):
        self.expense_id = expense_id
        super().__init__(f"Expense {expense_id} not found" if expense_id else None)


class ExpenseCategoryNotFoundError(NotFoundError):
    """Expense category not found."""
    message = "Category not found"
    code = "category_not_found"

    def __init__(self, category_id: Optional[str] = None):
        self.category_id = category_id
        super().__init__(f"Category {category_id} not found" if category_id else None)


class SupplierNotFoundError(NotFoundError):
    """Supplier not found."""
    message = "Supplier not found"
    code = "supplier_not_found"

    def __init__(self, supplier_id: Optional[str] = None):
        self.supplier_id = supplier_id
        super().__init__(f"Supplier {supplier_id} not found" if supplier_id else None)


class AssociationTargetNotFoundError(NotFoundError):
    """One or more trucks/trips/drivers do not exist in the organization."""
    message = "Linked record not found"
    code = "association_target_not_found"

    def __init__(self, kind: str, missing_ids: Iterable[str]):
        self.kind = kind
        self.missing_ids = sorted(missing_ids)
        super().__init__(
            f"Unknown {kind} id(s): {', '.join(self.missing_ids)}",
            kind=kind,
        )


# ============== Conflicts ==============

class ConflictError(BackofficeError):
    """Operation conflicts with existing data."""
    message = "Conflicting data"
    code = "conflict"


class CategoryNameConflictError(ConflictError):
    """Category with this name already exists in the organization."""
    message = "A category with this name already exists"
    code = "category_name_conflict"

    def __init__(self, name: Optional[str] = None):
        self.name = name
        super().__init__(f"A category named '{name}' already exists" if name else None)


class CategoryInUseError(ConflictError):
    """Category is referenced by expenses and cannot be deleted."""
    message = "Cannot delete category with existing expenses"
    code = "category_in_use"

    def __init__(self, name: Optional[str] = None, expense_count: int = 0):
        self.name = name
        self.expense_count = expense_count
        super().__init__(
            f"Cannot delete category '{name}': {expense_count} expense(s) use it"
            if name else None
        )


class ExpenseAlreadyPaidError(ConflictError):
    """Expense is already marked as paid."""
    message = "Expense is already paid"
    code = "expense_already_paid"


# ============== Infrastructure ==============

class StorageUnavailableError(BackofficeError):
    """Database is unreachable or failed mid-transaction."""
    message = "Storage is temporarily unavailable"
    code = "storage_unavailable"
