"""
Customer API Endpoints.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.core.context import RequestContext
from backend.app.core.envelope import Reply
from backend.app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from backend.app.core.inputs import page_window, require_fields
from backend.app.models.billing_enums import CustomerActive
from backend.app.schemas.customer import CustomerCreate, CustomerRecord
from backend.app.schemas.pagination import Pagination
from backend.app.services import customer_queries

logger = logging.getLogger("mkauth_api.customers")

DUPLICATE_CODE = "A customer with this code already exists"


class CustomerController:
    """Handlers for /clientes routes."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def index(self, context: RequestContext) -> Reply:
        """GET /clientes?page=&limit=&grupo=&ativo="""
        page, limit, offset = page_window(
            context.query_param("page"), context.query_param("limit"), default_limit=10
        )

        active = context.query_param("ativo")
        if active is not None:
            active = CustomerActive.YES.value if active == "1" else CustomerActive.NO.value

        async with self.session_factory() as db:
            customers, total = await customer_queries.list_customers(
                db,
                limit=limit,
                offset=offset,
                group=context.query_param("grupo") or None,
                active=active,
            )

        return Reply.ok({
            "clientes": [CustomerRecord.model_validate(c).dump() for c in customers],
            "pagination": Pagination.of(page, limit, total).dump(),
        })

    async def find(self, context: RequestContext, code: Optional[str] = None) -> Reply:
        """GET /clientes/{codigo} or /clientes/buscar?codigo="""
        code = code or context.query_param("codigo")
        if not code:
            return Reply.failure(BadRequestError('Parameter "codigo" is required'))

        async with self.session_factory() as db:
            customer = await customer_queries.get_customer_by_code(db, code)

        if customer is None:
            return Reply.failure(NotFoundError("Customer not found"))
        return Reply.ok({"cliente": CustomerRecord.model_validate(customer).dump()})

    async def create(self, context: RequestContext) -> Reply:
        """POST /clientes with {codigo, nome, grupo?, ativo?}"""
        body = context.json_body()
        if not body:
            return Reply.failure(BadRequestError("Invalid JSON payload"))

        missing = require_fields(body, ("codigo", "nome"))
        if missing is not None:
            return Reply.failure(missing)

        data = CustomerCreate.model_validate(body)

        async with self.session_factory() as db:
            if await customer_queries.get_customer_by_code(db, data.code) is not None:
                return Reply.failure(ConflictError(DUPLICATE_CODE))
            try:
                customer = await customer_queries.create_customer(db, data)
            except IntegrityError:
                await db.rollback()
                logger.info("Customer code %s taken concurrently", data.code)
                return Reply.failure(ConflictError(DUPLICATE_CODE))

        return Reply.ok(
            {"message": "Customer created successfully", "cliente_id": customer.id},
            status_code=201,
        )
