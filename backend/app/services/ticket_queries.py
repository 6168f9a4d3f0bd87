"""
Support ticket counters and per-group report.

Period filters match the textual form of the timestamp column, so
``"2026-10"`` selects a month and ``"2026-10-05"`` a day.
"""

from typing import Dict, List, Optional

from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.billing_enums import CustomerActive, TicketStatus
from backend.app.models.customer import Customer
from backend.app.models.support_ticket import SupportTicket


def _period(column, period: str):
    return cast(column, String).like(f"%{period}%")


def _ticket_count():
    return (
        select(func.count(SupportTicket.id))
        .select_from(SupportTicket)
        .outerjoin(Customer, Customer.login == SupportTicket.customer_login)
    )


async def count_open_tickets(db: AsyncSession) -> int:
    """Open tickets of active customers."""
    total = await db.scalar(
        _ticket_count().where(
            SupportTicket.status == TicketStatus.OPEN.value,
            Customer.active == CustomerActive.YES.value,
        )
    )
    return total or 0


async def count_closed_tickets(db: AsyncSession, period: str, group: Optional[str] = None) -> int:
    query = _ticket_count().where(
        SupportTicket.status == TicketStatus.CLOSED.value,
        _period(SupportTicket.closed_at, period),
    )
    if group:
        query = query.where(Customer.group_name == group)
    total = await db.scalar(query)
    return total or 0


async def count_closed_tickets_on_day(db: AsyncSession, day: str) -> int:
    """Closed tickets of active customers on one day (``YYYY-MM-DD``)."""
    total = await db.scalar(
        _ticket_count().where(
            SupportTicket.status == TicketStatus.CLOSED.value,
            _period(SupportTicket.closed_at, day),
            Customer.active == CustomerActive.YES.value,
        )
    )
    return total or 0


async def group_report(db: AsyncSession, period: str) -> List[Dict[str, object]]:
    """
    Per customer group: closed tickets, installations and deactivations.

    Returns:
        One dict per non-empty group, in group name order
    """
    result = await db.execute(
        select(Customer.group_name)
        .where(Customer.group_name.is_not(None), Customer.group_name != "")
        .distinct()
        .order_by(Customer.group_name)
    )
    groups = [row[0] for row in result.all()]

    report = []
    for group in groups:
        installs = await db.scalar(
            select(func.count(Customer.id)).where(
                Customer.group_name == group,
                _period(Customer.installed_at, period),
            )
        )
        deactivations = await db.scalar(
            select(func.count(Customer.id)).where(
                Customer.group_name == group,
                _period(Customer.deactivated_at, period),
            )
        )
        report.append({
            "grupo": group,
            "chamados_fechados": await count_closed_tickets(db, period, group),
            "instalacoes": installs or 0,
            "desativacoes": deactivations or 0,
        })
    return report
