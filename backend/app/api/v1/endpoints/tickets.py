"""
Support Ticket API Endpoints.

Counters and the per-group report. Missing period parameters default to
the current month or day in the configured timezone.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.core.context import RequestContext
from backend.app.core.envelope import Reply
from backend.app.services import ticket_queries


class TicketController:
    """Handlers for /chamados and /relatorios routes."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], timezone: str):
        self.session_factory = session_factory
        self.timezone = timezone

    def _today(self) -> datetime:
        return datetime.now(ZoneInfo(self.timezone))

    async def open_count(self, context: RequestContext) -> Reply:
        """GET /chamados/abertos"""
        async with self.session_factory() as db:
            total = await ticket_queries.count_open_tickets(db)
        return Reply.ok({"chamados_abertos": total})

    async def closed_count(self, context: RequestContext) -> Reply:
        """GET /chamados/fechados?data=YYYY-MM&grupo="""
        period = context.query_param("data") or self._today().strftime("%Y-%m")
        group = context.query_param("grupo") or None

        async with self.session_factory() as db:
            total = await ticket_queries.count_closed_tickets(db, period, group)

        return Reply.ok({"chamados_fechados": total, "periodo": period, "grupo": group})

    async def closed_on_day(self, context: RequestContext) -> Reply:
        """GET /chamados/fechados/dia?dia=&mes=&ano="""
        today = self._today()
        day = context.query_param("dia") or today.strftime("%d")
        month = context.query_param("mes") or today.strftime("%m")
        year = context.query_param("ano") or today.strftime("%Y")

        async with self.session_factory() as db:
            total = await ticket_queries.count_closed_tickets_on_day(db, f"{year}-{month}-{day}")

        return Reply.ok({"chamados_fechados_dia": total, "data": f"{day}/{month}/{year}"})

    async def group_report(self, context: RequestContext) -> Reply:
        """GET /relatorios/grupos?data=YYYY-MM"""
        period = context.query_param("data") or self._today().strftime("%Y-%m")

        async with self.session_factory() as db:
            report = await ticket_queries.group_report(db, period)

        return Reply.ok({"relatorio_por_grupo": report, "periodo": period})
