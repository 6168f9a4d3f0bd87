"""
Database engine and session factory.

The API runs against the MK-Auth database (PostgreSQL via asyncpg in
production). SQLite URLs are accepted for local runs and get no pool sizing.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from backend.app.core.config import settings


def build_engine(database_url: str, echo: bool = False, pool_size: int = 20, max_overflow: int = 10) -> AsyncEngine:
    options = {"echo": echo, "future": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=pool_size, max_overflow=max_overflow, pool_pre_ping=True)
    return create_async_engine(database_url, **options)


engine = build_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
)

# One session per ledger transition or query handler
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Declarative base for the sis_* tables
Base = declarative_base()


async def create_tables(bind: AsyncEngine) -> None:
    """Create any missing sis_* tables (existing MK-Auth tables are left alone)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
