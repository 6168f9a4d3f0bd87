"""
Centralized Test Configuration.
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.core.config import Settings
from backend.app.db.session import Base
from backend.app.main import create_app
from backend.app.models.billing_enums import InvoiceStatus
from backend.app.models.customer import Customer
from backend.app.models.invoice import Invoice
from backend.app.models.ledger_entry import CashLedgerEntry

TEST_API_KEY = "test-api-key"
AUTH = {"X-API-Key": TEST_API_KEY}
API = "/api/v1"

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

TEST_SETTINGS = Settings(
    _env_file=None,
    api_key=TEST_API_KEY,
    api_base_path=API,
    info_path="/info",
    timezone="America/Sao_Paulo",
    expose_error_details=False,
)


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def app():
    return create_app(TEST_SETTINGS, TestingSessionLocal)


@pytest.fixture
async def client(app):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def make_customer(db_session):
    """Factory committing a customer row."""
    async def _make(**overrides) -> Customer:
        values = {
            "code": f"C{uuid.uuid4().hex[:6]}",
            "name": "Maria Silva",
            "login": "maria",
            "tax_id": "12345678900",
            "email": "maria@example.com",
            "group_name": "Centro",
            "active": "s",
            "city": "Campinas",
            "state": "SP",
        }
        values.update(overrides)
        customer = Customer(**values)
        db_session.add(customer)
        await db_session.commit()
        return customer

    return _make


@pytest.fixture
def make_invoice(db_session):
    """Factory committing an open invoice row."""
    async def _make(**overrides) -> Invoice:
        values = {
            "external_ref": str(uuid.uuid4()),
            "customer_login": "maria",
            "customer_tax_id": "12345678900",
            "amount_due": Decimal("100.00"),
            "due_date": date(2026, 10, 10),
            "status": InvoiceStatus.OPEN.value,
            "kind": "boleto",
            "deleted_flag": False,
        }
        values.update(overrides)
        invoice = Invoice(**values)
        db_session.add(invoice)
        await db_session.commit()
        return invoice

    return _make


@pytest.fixture
def fetch_invoice():
    """Read an invoice through a fresh session (no stale identity map)."""
    async def _fetch(ref: str) -> Invoice:
        async with TestingSessionLocal() as session:
            result = await session.execute(select(Invoice).where(Invoice.external_ref == ref))
            return result.scalar_one_or_none()

    return _fetch


@pytest.fixture
def fetch_cash_entries():
    """All cash ledger entries, oldest first."""
    async def _fetch() -> list:
        async with TestingSessionLocal() as session:
            result = await session.execute(select(CashLedgerEntry).order_by(CashLedgerEntry.id))
            return list(result.scalars().all())

    return _fetch


@pytest.fixture
def auth_headers():
    return dict(AUTH)
