"""
Invoice read queries.

Plain parameterized reads behind the listing, lookup and search endpoints.
Soft-deleted invoices are hidden from customer-scoped listings and search.
"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.models.linked_invoice import LinkedInvoice
from backend.app.models.pix_qrcode import PixQrCode
from backend.app.schemas.invoice import InvoiceDetail, InvoiceSummary, LinkedInvoiceRecord


def _summary_query():
    return (
        select(Invoice, Customer, PixQrCode.qrcode)
        .outerjoin(Customer, Customer.login == Invoice.customer_login)
        .outerjoin(PixQrCode, PixQrCode.invoice_ref == Invoice.external_ref)
    )


def _owned_by(customer: str):
    return or_(Invoice.customer_login == customer, Invoice.customer_tax_id == customer)


async def _summaries(db: AsyncSession, query) -> List[InvoiceSummary]:
    result = await db.execute(query.order_by(Invoice.id))
    return [InvoiceSummary.from_row(invoice, customer, qrcode) for invoice, customer, qrcode in result.all()]


async def list_invoices(
    db: AsyncSession,
    limit: int,
    offset: int,
    status: Optional[str] = None,
    customer: Optional[str] = None,
) -> Tuple[List[InvoiceSummary], int]:
    """
    Page through invoices.

    Args:
        db: Database session
        limit: Page size
        offset: Rows to skip
        status: Optional status filter
        customer: Optional login or tax id filter

    Returns:
        (page rows, total matching rows)
    """
    conditions = []
    if status:
        conditions.append(Invoice.status == status)
    if customer:
        conditions.append(_owned_by(customer))

    total = await db.scalar(select(func.count()).select_from(Invoice).where(*conditions))

    rows = await _summaries(db, _summary_query().where(*conditions).limit(limit).offset(offset))
    return rows, total or 0


async def list_customer_invoices(
    db: AsyncSession,
    customer: str,
    status: Optional[str] = None,
) -> List[InvoiceSummary]:
    """Non-deleted invoices owned by a login or tax id."""
    query = _summary_query().where(_owned_by(customer), Invoice.deleted_flag.is_(False))
    if status:
        query = query.where(Invoice.status == status)
    return await _summaries(db, query)


async def search_invoices(
    db: AsyncSession,
    logins: Sequence[str],
    tax_ids: Sequence[str],
    status: Optional[str] = None,
) -> List[InvoiceSummary]:
    """Non-deleted invoices matching any of the logins or tax ids."""
    selectors = []
    if logins:
        selectors.append(Invoice.customer_login.in_(list(logins)))
    if tax_ids:
        selectors.append(Invoice.customer_tax_id.in_(list(tax_ids)))

    query = _summary_query().where(or_(*selectors), Invoice.deleted_flag.is_(False))
    if status:
        query = query.where(Invoice.status == status)
    return await _summaries(db, query)


async def get_invoice_detail(db: AsyncSession, ref: str) -> Optional[InvoiceDetail]:
    """Look an invoice up by internal id or external ref, with its linked invoices."""
    key = Invoice.external_ref == ref
    if ref.isdigit():
        key = or_(Invoice.id == int(ref), key)

    result = await db.execute(
        select(Invoice, PixQrCode.qrcode)
        .outerjoin(PixQrCode, PixQrCode.invoice_ref == Invoice.external_ref)
        .where(key)
        .limit(1)
    )
    row = result.first()
    if row is None:
        return None

    invoice, qrcode = row
    linked = await db.execute(
        select(LinkedInvoice).where(LinkedInvoice.invoice_id == invoice.id).order_by(LinkedInvoice.id)
    )
    return InvoiceDetail.model_validate(invoice).model_copy(update={
        "pix": qrcode,
        "linked": [LinkedInvoiceRecord.model_validate(item) for item in linked.scalars().all()],
    })


async def get_pix_qrcode(db: AsyncSession, ref: str) -> Optional[str]:
    """PIX payload for an invoice external ref, if one was generated."""
    result = await db.execute(
        select(PixQrCode.qrcode).where(PixQrCode.invoice_ref == ref).limit(1)
    )
    return result.scalar_one_or_none()
