"""
FastAPI Application Entry Point.

Every request goes through one catch-all endpoint that builds a
RequestContext and hands it to the RequestRouter, which owns auth,
matching and the response envelope.
"""

from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.requests import Request
from starlette.responses import Response

from backend.app.api.v1.router import build_router
from backend.app.core.config import Settings, settings
from backend.app.core.context import RequestContext
from backend.app.core.envelope import render
from backend.app.core.observability import ObservabilityMiddleware, configure_logging
from backend.app.db.session import AsyncSessionLocal, create_tables, engine

# Import models to ensure they are registered with Base
from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.models.ledger_entry import CashLedgerEntry
from backend.app.models.linked_invoice import LinkedInvoice
from backend.app.models.pix_qrcode import PixQrCode
from backend.app.models.support_ticket import SupportTicket

ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates missing tables on startup and disposes the engine on shutdown.
    """
    await create_tables(engine)
    yield
    await engine.dispose()


def cors_headers(app_settings: Settings) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": app_settings.cors_allow_origin,
        "Access-Control-Allow-Methods": app_settings.cors_allow_methods,
        "Access-Control-Allow-Headers": app_settings.cors_allow_headers,
    }


def create_app(
    app_settings: Settings = settings,
    session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Configuration (API key, base path, timezone, CORS)
        session_factory: Session factory injected into the controllers
    """
    configure_logging(app_settings.log_level)

    request_router = build_router(app_settings, session_factory)
    headers = cors_headers(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
        description="HTTP/JSON access to MK-Auth billing records",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.request_router = request_router
    app.add_middleware(ObservabilityMiddleware)

    @app.api_route("/{full_path:path}", methods=ROUTED_METHODS, include_in_schema=False)
    async def gateway(request: Request) -> Response:
        context = await RequestContext.from_request(request)
        reply = await request_router.dispatch(context)
        return render(reply, app_settings.timezone, headers=headers)

    return app


app = create_app()
