"""
Customer queries.

Listing, lookup by code and creation of ``sis_cliente`` rows.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.customer import Customer
from backend.app.schemas.customer import CustomerCreate


async def list_customers(
    db: AsyncSession,
    limit: int,
    offset: int,
    group: Optional[str] = None,
    active: Optional[str] = None,
) -> Tuple[List[Customer], int]:
    """
    Page through customers, newest code first.

    Returns:
        (page rows, total matching rows)
    """
    conditions = []
    if group:
        conditions.append(Customer.group_name == group)
    if active is not None:
        conditions.append(Customer.active == active)

    total = await db.scalar(select(func.count()).select_from(Customer).where(*conditions))

    result = await db.execute(
        select(Customer)
        .where(*conditions)
        .order_by(Customer.code.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total or 0


async def get_customer_by_code(db: AsyncSession, code: str) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.code == code).limit(1))
    return result.scalar_one_or_none()


async def create_customer(db: AsyncSession, data: CustomerCreate) -> Customer:
    """
    Insert a customer and commit.

    Raises:
        IntegrityError: If the code was taken concurrently
    """
    customer = Customer(
        code=data.code,
        name=data.name,
        group_name=data.group_name,
        active=data.active,
        installed_at=datetime.now(),
    )
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer
