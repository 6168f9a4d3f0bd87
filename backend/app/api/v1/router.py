"""
API v1 Router.

Registers every v1 route on a RequestRouter. Matching is first-registered
wins, so literal routes are registered before the generic patterns that
could shadow them.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.api.v1.endpoints.customers import CustomerController
from backend.app.api.v1.endpoints.info import InfoController
from backend.app.api.v1.endpoints.invoices import InvoiceController
from backend.app.api.v1.endpoints.tickets import TicketController
from backend.app.core.auth import AuthGate
from backend.app.core.config import Settings
from backend.app.core.router import RequestRouter
from backend.app.domain.billing.invoice_ledger import InvoiceLedger


def build_router(app_settings: Settings, session_factory: async_sessionmaker[AsyncSession]) -> RequestRouter:
    """Wire controllers and their collaborators into a RequestRouter."""
    router = RequestRouter(
        auth_gate=AuthGate(app_settings.api_key),
        base_path=app_settings.api_base_path,
        exempt_paths=[app_settings.info_path],
        expose_error_details=app_settings.expose_error_details,
    )

    customers = CustomerController(session_factory)
    tickets = TicketController(session_factory, app_settings.timezone)
    invoices = InvoiceController(session_factory, InvoiceLedger(session_factory))
    info = InfoController(app_settings, router)

    # Customers
    router.register("GET", "/clientes", customers.index, "List customers")
    router.register("GET", "/clientes/buscar", customers.find, "Find customer by ?codigo=")
    router.register("GET", "/clientes/{codigo}", customers.find, "Find customer by code")
    router.register("POST", "/clientes", customers.create, "Create customer")

    # Support tickets
    router.register("GET", "/chamados/abertos", tickets.open_count, "Open tickets")
    router.register("GET", "/chamados/fechados", tickets.closed_count, "Closed tickets in period")
    router.register("GET", "/chamados/fechados/dia", tickets.closed_on_day, "Closed tickets on a day")
    router.register("GET", "/relatorios/grupos", tickets.group_report, "Report per customer group")

    # Invoices
    router.register("GET", "/titulos", invoices.index, "List invoices")
    router.register("GET", "/titulos/cliente/{cliente}", invoices.by_customer, "Invoices of a customer")
    router.register("GET", "/titulos/cliente/{cliente}/abertos", invoices.open_for_customer, "Open invoices of a customer")
    router.register("GET", "/titulos/cliente/{cliente}/vencidos", invoices.overdue_for_customer, "Overdue invoices of a customer")
    router.register("GET", "/titulos/cliente/{cliente}/pagos", invoices.paid_for_customer, "Paid invoices of a customer")
    router.register("POST", "/titulos/search", invoices.search, "Search invoices by logins / CPF-CNPJ")
    router.register("GET", "/titulos/{ref}/pix", invoices.pix, "PIX QR code of an invoice")
    router.register("GET", "/titulos/{ref}", invoices.show, "Find invoice")
    router.register("PUT", "/titulos/{ref}/receber", invoices.receive, "Receive invoice payment")
    router.register("PUT", "/titulos/{ref}/estornar", invoices.reverse, "Reverse invoice payment")
    router.register("DELETE", "/titulos/{ref}", invoices.delete, "Delete invoice")

    # API information
    router.register("GET", app_settings.info_path, info.show, "API information")

    # Legacy script URLs kept for older integrations
    router.register("GET", r"/buscacliente\.php", customers.find)
    router.register("GET", r"/chamadoaberto\.php", tickets.open_count)
    router.register("GET", r"/chamadofechado\.php", tickets.closed_count)
    router.register("GET", r"/chamadofechadodia\.php", tickets.closed_on_day)

    return router
