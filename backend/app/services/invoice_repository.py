"""
Invoice repository.

Narrow store interface used by the invoice ledger: existence reads,
the two conditional updates and the cash ledger insert.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from backend.app.models.billing_enums import InvoiceStatus
from backend.app.models.invoice import Invoice
from backend.app.models.ledger_entry import CashLedgerEntry


class InvoiceRepository:
    """Parameterized statements over one AsyncSession (one transaction at a time)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_ref(self, ref: str) -> Optional[Invoice]:
        result = await self.session.execute(
            select(Invoice).where(Invoice.external_ref == ref)
        )
        return result.scalar_one_or_none()

    async def mark_paid(
        self,
        ref: str,
        collector: str,
        amount: Decimal,
        method: str,
    ) -> int:
        """
        Record a payment unless the invoice is already paid.

        Returns:
            Number of affected rows (0 when already paid or missing)
        """
        result = await self.session.execute(
            update(Invoice)
            .where(
                Invoice.external_ref == ref,
                Invoice.status != InvoiceStatus.PAID.value,
            )
            .values(
                collector=collector,
                amount_paid=amount,
                payment_date=func.now(),
                status=InvoiceStatus.PAID.value,
                payment_method=method,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def mark_open(self, ref: str) -> int:
        """
        Clear a payment, only if the invoice is currently paid.

        Returns:
            Number of affected rows (0 when not paid or missing)
        """
        result = await self.session.execute(
            update(Invoice)
            .where(
                Invoice.external_ref == ref,
                Invoice.status == InvoiceStatus.PAID.value,
            )
            .values(
                payment_date=None,
                amount_paid=None,
                status=InvoiceStatus.OPEN.value,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def append_cash_entry(
        self,
        actor: str,
        narrative: str,
        credit: Optional[Decimal] = None,
        debit: Optional[Decimal] = None,
    ) -> CashLedgerEntry:
        if (credit is None) == (debit is None):
            raise ValueError("A cash entry needs exactly one of credit or debit")

        entry = CashLedgerEntry(
            actor=actor,
            narrative=narrative,
            credit_amount=credit,
            debit_amount=debit,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def delete_by_ref(self, ref: str) -> int:
        result = await self.session.execute(
            delete(Invoice)
            .where(Invoice.external_ref == ref)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
