"""
Invoice Ledger (Domain Logic).

Performs the two payment transitions of an invoice and appends the
matching cash ledger entry in the same transaction:

    receive: OPEN/OVERDUE -> PAID, one credit entry
    reverse: PAID -> OPEN, one debit entry

The conditional UPDATE (its WHERE clause encodes the required prior state)
is the concurrency guard. When it affects no row the transaction is rolled
back and no ledger entry is written, so replaying a successful call reports
a conflict instead of booking the movement twice.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.core.exceptions import AppException, InvoiceStateConflict, NotFoundError
from backend.app.models.billing_enums import DEFAULT_ACTOR
from backend.app.services.invoice_repository import InvoiceRepository

logger = logging.getLogger("mkauth_api.ledger")


@dataclass(frozen=True)
class LedgerOutcome:
    """Result of a transition; ``error`` is set when nothing was written."""
    invoice_ref: str
    amount: Optional[Decimal] = None
    actor: Optional[str] = None
    payment_method: Optional[str] = None
    entry_uuid: Optional[str] = None
    error: Optional[AppException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class InvoiceLedger:
    """
    Receive/reverse state machine over invoices.

    Each call opens its own session, so every transition is one
    transaction that is committed or rolled back before returning.
    Unexpected store errors are re-raised after the rollback.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def receive(
        self,
        ref: str,
        amount: Decimal,
        method: str,
        collector: Optional[str] = None,
    ) -> LedgerOutcome:
        """
        Record the payment of an invoice.

        Args:
            ref: Invoice external ref
            amount: Amount received, credited to the cash ledger
            method: Payment method label
            collector: Who received the payment (defaults to "API")

        Returns:
            LedgerOutcome, with NotFoundError when the invoice does not exist
            or InvoiceStateConflict when it is already paid
        """
        collector = collector or DEFAULT_ACTOR

        async with self.session_factory() as session:
            repo = InvoiceRepository(session)
            try:
                invoice = await repo.find_by_ref(ref)
                if invoice is None:
                    await repo.rollback()
                    return LedgerOutcome(invoice_ref=ref, error=NotFoundError("Invoice not found"))

                invoice_id = invoice.id
                login = invoice.customer_login

                affected = await repo.mark_paid(ref, collector, amount, method)
                if affected == 0:
                    await repo.rollback()
                    logger.info("Receive rejected for invoice %s: already paid", invoice_id)
                    return LedgerOutcome(
                        invoice_ref=ref,
                        error=InvoiceStateConflict("Invoice already paid or not found"),
                    )

                entry = await repo.append_cash_entry(
                    actor=collector,
                    narrative=f"Payment received for invoice {invoice_id} via API / {login}",
                    credit=amount,
                )
                entry_uuid = entry.uuid
                await repo.commit()
            except Exception:
                await repo.rollback()
                raise

        logger.info("Invoice %s received: amount=%s method=%s collector=%s", invoice_id, amount, method, collector)
        return LedgerOutcome(
            invoice_ref=ref,
            amount=amount,
            actor=collector,
            payment_method=method,
            entry_uuid=entry_uuid,
        )

    async def reverse(self, ref: str, actor: Optional[str] = None) -> LedgerOutcome:
        """
        Undo the payment of an invoice.

        The debit equals the amount read before the update, not a value
        re-derived afterwards.

        Args:
            ref: Invoice external ref
            actor: Who reverses the payment (defaults to "API")

        Returns:
            LedgerOutcome, with NotFoundError when the invoice does not exist
            or InvoiceStateConflict when it is not paid
        """
        actor = actor or DEFAULT_ACTOR

        async with self.session_factory() as session:
            repo = InvoiceRepository(session)
            try:
                invoice = await repo.find_by_ref(ref)
                if invoice is None:
                    await repo.rollback()
                    return LedgerOutcome(invoice_ref=ref, error=NotFoundError("Invoice not found"))

                invoice_id = invoice.id
                login = invoice.customer_login
                paid_amount = invoice.amount_paid

                affected = await repo.mark_open(ref)
                if affected == 0:
                    await repo.rollback()
                    logger.info("Reverse rejected for invoice %s: not paid", invoice_id)
                    return LedgerOutcome(
                        invoice_ref=ref,
                        error=InvoiceStateConflict("Invoice is not paid or not found"),
                    )

                if paid_amount is None:
                    logger.warning("Invoice %s was paid without an amount; reversing 0.00", invoice_id)
                    paid_amount = Decimal("0.00")

                entry = await repo.append_cash_entry(
                    actor=actor,
                    narrative=f"Invoice {invoice_id} reversed via API / {login}",
                    debit=paid_amount,
                )
                entry_uuid = entry.uuid
                await repo.commit()
            except Exception:
                await repo.rollback()
                raise

        logger.info("Invoice %s reversed: amount=%s actor=%s", invoice_id, paid_amount, actor)
        return LedgerOutcome(
            invoice_ref=ref,
            amount=paid_amount,
            actor=actor,
            entry_uuid=entry_uuid,
        )
