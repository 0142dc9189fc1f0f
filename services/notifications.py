"""Expense change notifications, delivered in the background after commit."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Set

from backoffice.config import settings
from core.permissions import Role, has_permission

logger = logging.getLogger(__name__)


class NotificationEventType(str, Enum):
    """What happened to the entity."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ExpenseNotificationData:
    """Expense fields carried on a change notification."""
    id: str
    description: str
    category: str
    amount: Decimal
    date: datetime


@dataclass(frozen=True)
class NotificationEvent:
    """A change notification for admins and supervisors of an organization."""
    entity_type: str
    event_type: NotificationEventType
    entity_id: str
    entity_name: str
    organization_id: str
    performed_by: Dict[str, str]
    details: Dict[str, Any] = field(default_factory=dict)
    sensitive_fields: tuple = ()


class NotificationTransport(Protocol):
    """Delivers a notification somewhere (e-mail, chat, log)."""

    async def send(self, event: NotificationEvent) -> None:
        ...


def _display_key(key: str) -> str:
    return key.replace("_", " ").capitalize()


def format_details(
    details: Dict[str, Any],
    sensitive_fields: tuple = (),
    hide_sensitive: bool = False,
) -> List[str]:
    """
    Render notification details as ``Key: value`` lines.

    Args:
        details: Field values to show
        sensitive_fields: Keys holding money amounts
        hide_sensitive: Drop sensitive keys (for roles that cannot see amounts)
    """
    lines = []
    for key, value in details.items():
        if value is None:
            continue
        if hide_sensitive and key in sensitive_fields:
            continue
        if isinstance(value, Decimal) or (isinstance(value, (int, float)) and not isinstance(value, bool)):
            display = f"{Decimal(str(value)):,.2f}" if key in sensitive_fields else str(value)
        elif isinstance(value, datetime):
            display = value.strftime("%B %d, %Y")
        elif isinstance(value, bool):
            display = "Yes" if value else "No"
        else:
            display = str(value)
        lines.append(f"{_display_key(key)}: {display}")
    return lines


def render_message(event: NotificationEvent, recipient_role: Role = Role.ADMIN) -> str:
    """Plain-text body of a notification for a recipient role."""
    hide = not has_permission(recipient_role, "can_view_amounts")
    who = event.performed_by
    header = (
        f"{event.entity_type.capitalize()} {event.event_type.value}: {event.entity_name}\n"
        f"By {who.get('name')} <{who.get('email')}> ({who.get('role')})"
    )
    body = format_details(event.details, event.sensitive_fields, hide_sensitive=hide)
    return "\n".join([header, *body])


class LoggingTransport:
    """Default transport: writes the rendered notification to the log."""

    async def send(self, event: NotificationEvent) -> None:
        logger.info(
            render_message(event),
            extra={
                "organization_id": event.organization_id,
                "expense_id": event.entity_id or None,
                "event_type": event.event_type.value,
            },
        )


class NotificationDispatcher:
    """
    Fire-and-forget delivery of notifications.

    Each event is sent from its own asyncio task. Failures are logged and
    never reach the caller; ``drain()`` waits for in-flight deliveries.
    """

    def __init__(
        self,
        transport: Optional[NotificationTransport] = None,
        enabled: Optional[bool] = None,
    ):
        self.transport = transport or LoggingTransport()
        self.enabled = settings.notifications_enabled if enabled is None else enabled
        self._pending: Set[asyncio.Task] = set()

    def dispatch(self, event: NotificationEvent) -> Optional[asyncio.Task]:
        """Schedule delivery of an event and return immediately."""
        if not self.enabled:
            return None
        task = asyncio.get_running_loop().create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, event: NotificationEvent) -> None:
        try:
            await self.transport.send(event)
        except Exception as e:
            logger.error(
                f"Failed to deliver {event.entity_type} {event.event_type.value} notification: {e}",
                exc_info=True,
                extra={
                    "organization_id": event.organization_id,
                    "event_type": event.event_type.value,
                },
            )

    async def drain(self) -> None:
        """Wait for all in-flight deliveries."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)


def expense_event(
    event_type: NotificationEventType,
    data: ExpenseNotificationData,
    organization_id: str,
    performed_by: Dict[str, str],
) -> NotificationEvent:
    """Build the notification for an expense change."""
    return NotificationEvent(
        entity_type="expense",
        event_type=event_type,
        entity_id=data.id,
        entity_name=data.description,
        organization_id=organization_id,
        performed_by=performed_by,
        details={
            "description": data.description,
            "category": data.category,
            "amount": data.amount,
            "date": data.date,
        },
        sensitive_fields=("amount",),
    )


# Process-wide dispatcher used when a use case is not given one
default_dispatcher = NotificationDispatcher()
