"""Roles, per-role capabilities and the acting user passed into use cases."""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

from core.exceptions import PermissionDeniedError


class Role(str, Enum):
    """Organization member roles."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    STAFF = "staff"


ROLE_PERMISSIONS = {
    Role.ADMIN: {
        "can_write_expenses": True,
        "can_manage_expenses": True,
        "can_manage_categories": True,
        "can_view_charts": True,
        "can_view_amounts": True,
    },
    Role.SUPERVISOR: {
        "can_write_expenses": True,
        "can_manage_expenses": True,
        "can_manage_categories": True,
        "can_view_charts": True,
        "can_view_amounts": False,
    },
    Role.STAFF: {
        "can_write_expenses": True,
        "can_manage_expenses": False,
        "can_manage_categories": False,
        "can_view_charts": False,
        "can_view_amounts": True,
    },
}


def roles_with(permission: str) -> Tuple[Role, ...]:
    """Roles whose capability flag is set, in declaration order."""
    return tuple(role for role in Role if ROLE_PERMISSIONS[role].get(permission, False))


# Role groups passed to require_role by the use cases
EXPENSE_WRITERS = roles_with("can_write_expenses")
EXPENSE_MANAGERS = roles_with("can_manage_expenses")
CATEGORY_MANAGERS = roles_with("can_manage_categories")
CHART_VIEWERS = roles_with("can_view_charts")


@dataclass(frozen=True)
class Actor:
    """Authenticated user acting on behalf of one organization."""
    user_id: str
    organization_id: str
    name: str
    email: str
    role: Role

    @property
    def performed_by(self) -> dict:
        """Name, e-mail and role as carried on notifications."""
        return {"name": self.name, "email": self.email, "role": Role(self.role).value}


def has_permission(role: Role, permission: str) -> bool:
    """Check a capability flag for a role."""
    return ROLE_PERMISSIONS[Role(role)].get(permission, False)


def require_role(actor: Actor, roles: Iterable[Role]) -> None:
    """
    Ensure the actor holds one of the allowed roles.

    Raises:
        PermissionDeniedError: If the actor's role is not allowed
    """
    allowed = tuple(Role(r) for r in roles)
    if Role(actor.role) not in allowed:
        raise PermissionDeniedError(Role(actor.role).value, [r.value for r in allowed])
