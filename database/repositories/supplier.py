"""Repository for Supplier model operations."""
from decimal import Decimal
from typing import Optional

from sqlalchemy import update

from database.models import Supplier
from database.repositories.base import BaseRepository


class SupplierRepository(BaseRepository[Supplier]):
    """Repository for managing suppliers and their balances."""

    model_class = Supplier

    async def create(
        self,
        organization_id: str,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        payment_terms: int = 30,
        supplier_id: Optional[str] = None,
    ) -> Supplier:
        """Create a supplier with a zero balance."""
        supplier = Supplier(
            id=supplier_id,
            organization_id=organization_id,
            name=name,
            email=email,
            phone=phone,
            payment_terms=payment_terms,
            balance=Decimal("0"),
        )
        self.add(supplier)
        await self.flush()
        return supplier

    async def adjust_balance(self, supplier_id: str, delta: Decimal) -> None:
        """
        Apply a signed delta to a supplier balance.

        Issued as ``balance = balance + delta`` in SQL so concurrent
        transactions never overwrite each other's adjustments. Loaded
        Supplier objects are not refreshed; call ``refresh()`` to read the
        new balance.

        Args:
            supplier_id: Supplier to adjust
            delta: Amount to add (negative to subtract)
        """
        if not delta:
            return
        await self.session.execute(
            update(Supplier)
            .where(Supplier.id == supplier_id)
            .values(balance=Supplier.balance + delta)
            .execution_options(synchronize_session=False)
        )
