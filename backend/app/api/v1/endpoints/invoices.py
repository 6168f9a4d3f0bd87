"""
Invoice (titulo) API Endpoints.

Listing, lookup and deletion are plain queries; receive and reverse go
through the invoice ledger.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.core.context import RequestContext
from backend.app.core.envelope import Reply
from backend.app.core.exceptions import BadRequestError, NotFoundError
from backend.app.core.inputs import page_window, require_fields
from backend.app.domain.billing.invoice_ledger import InvoiceLedger
from backend.app.models.billing_enums import InvoiceStatus
from backend.app.schemas.invoice import InvoiceSearchRequest, ReceiveRequest, ReverseRequest
from backend.app.schemas.pagination import Pagination
from backend.app.services import invoice_queries
from backend.app.services.invoice_repository import InvoiceRepository

INVALID_JSON = "Invalid JSON payload"


class InvoiceController:
    """Handlers for /titulos routes."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], ledger: InvoiceLedger):
        self.session_factory = session_factory
        self.ledger = ledger

    async def index(self, context: RequestContext) -> Reply:
        """GET /titulos?page=&limit=&status=&cliente="""
        page, limit, offset = page_window(
            context.query_param("page"), context.query_param("limit"), default_limit=20
        )

        async with self.session_factory() as db:
            rows, total = await invoice_queries.list_invoices(
                db,
                limit=limit,
                offset=offset,
                status=context.query_param("status") or None,
                customer=context.query_param("cliente") or None,
            )

        return Reply.ok({
            "titulos": [row.dump() for row in rows],
            "pagination": Pagination.of(page, limit, total).dump(),
        })

    async def by_customer(self, context: RequestContext, customer: Optional[str] = None) -> Reply:
        """GET /titulos/cliente/{cliente}?status="""
        customer = customer or context.query_param("cliente")
        if not customer:
            return Reply.failure(BadRequestError('Parameter "cliente" is required'))

        async with self.session_factory() as db:
            rows = await invoice_queries.list_customer_invoices(
                db, customer, status=context.query_param("status") or None
            )

        if not rows:
            return Reply.failure(NotFoundError("No invoices found for this customer"))

        return Reply.ok({"total": len(rows), "titulos": [row.dump() for row in rows]})

    async def _by_customer_with_status(self, customer: str, status: InvoiceStatus) -> Reply:
        async with self.session_factory() as db:
            rows = await invoice_queries.list_customer_invoices(db, customer, status=status.value)
        return Reply.ok({"total": len(rows), "titulos": [row.dump() for row in rows]})

    async def open_for_customer(self, context: RequestContext, customer: str) -> Reply:
        """GET /titulos/cliente/{cliente}/abertos"""
        return await self._by_customer_with_status(customer, InvoiceStatus.OPEN)

    async def overdue_for_customer(self, context: RequestContext, customer: str) -> Reply:
        """GET /titulos/cliente/{cliente}/vencidos"""
        return await self._by_customer_with_status(customer, InvoiceStatus.OVERDUE)

    async def paid_for_customer(self, context: RequestContext, customer: str) -> Reply:
        """GET /titulos/cliente/{cliente}/pagos"""
        return await self._by_customer_with_status(customer, InvoiceStatus.PAID)

    async def search(self, context: RequestContext) -> Reply:
        """POST /titulos/search with {login: [...], cpf_cnpj: [...], status?}"""
        body = context.json_body()
        if not body:
            return Reply.failure(BadRequestError(INVALID_JSON))

        request = InvoiceSearchRequest.model_validate(body)
        if request.is_empty:
            return Reply.failure(BadRequestError("At least one login or CPF/CNPJ must be provided"))

        async with self.session_factory() as db:
            rows = await invoice_queries.search_invoices(
                db, request.logins, request.tax_ids, status=request.status
            )

        return Reply.ok({"total": len(rows), "titulos": [row.dump() for row in rows]})

    async def show(self, context: RequestContext, ref: str) -> Reply:
        """GET /titulos/{ref} (internal id or external ref)"""
        async with self.session_factory() as db:
            detail = await invoice_queries.get_invoice_detail(db, ref)

        if detail is None:
            return Reply.failure(NotFoundError("Invoice not found"))
        return Reply.ok({"titulo": detail.dump()})

    async def pix(self, context: RequestContext, ref: str) -> Reply:
        """GET /titulos/{ref}/pix"""
        async with self.session_factory() as db:
            qrcode = await invoice_queries.get_pix_qrcode(db, ref)

        if not qrcode:
            return Reply.failure(NotFoundError("PIX QR code not found for this invoice"))
        return Reply.ok({"titulo": ref, "qrcode": qrcode, "link_pix": qrcode})

    async def receive(self, context: RequestContext, ref: str) -> Reply:
        """PUT /titulos/{ref}/receber with {valor, forma, coletor?}"""
        body = context.json_body()
        if not body:
            return Reply.failure(BadRequestError(INVALID_JSON))

        missing = require_fields(body, ("valor", "forma"))
        if missing is not None:
            return Reply.failure(missing)

        request = ReceiveRequest.model_validate(body)
        outcome = await self.ledger.receive(ref, request.amount, request.method, request.collector)
        if not outcome.ok:
            return Reply.failure(outcome.error)

        return Reply.ok({
            "message": "Invoice received successfully",
            "titulo": {
                "uuid": ref,
                "valor_pago": float(outcome.amount),
                "forma_pagamento": outcome.payment_method,
                "coletor": outcome.actor,
            },
        })

    async def reverse(self, context: RequestContext, ref: str) -> Reply:
        """PUT /titulos/{ref}/estornar with optional {usuario}"""
        request = ReverseRequest.model_validate(context.json_body() or {})
        outcome = await self.ledger.reverse(ref, request.actor)
        if not outcome.ok:
            return Reply.failure(outcome.error)

        return Reply.ok({
            "message": "Invoice reversed successfully",
            "titulo": {
                "uuid": ref,
                "valor_estornado": float(outcome.amount),
                "usuario": outcome.actor,
            },
        })

    async def delete(self, context: RequestContext, ref: str) -> Reply:
        """DELETE /titulos/{ref} (hard delete, any status)"""
        async with self.session_factory() as db:
            repo = InvoiceRepository(db)
            affected = await repo.delete_by_ref(ref)
            await repo.commit()

        if affected == 0:
            return Reply.failure(NotFoundError("Invoice not found"))
        return Reply.ok({"message": "Invoice deleted successfully"})
