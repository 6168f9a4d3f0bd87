"""
Support ticket (chamado) database model (``sis_suporte``).
"""

from sqlalchemy import Column, Integer, String, DateTime
from backend.app.db.session import Base
from backend.app.models.billing_enums import TicketStatus


class SupportTicket(Base):
    """Support ticket. Group and activation come from the owning customer."""
    __tablename__ = "sis_suporte"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_login = Column("login", String(64), index=True, nullable=False)
    subject = Column("assunto", String(255), nullable=True)
    status = Column(String(16), nullable=False, default=TicketStatus.OPEN.value, index=True)
    opened_at = Column("abertura", DateTime, nullable=True)
    closed_at = Column("fechamento", DateTime, nullable=True)

    def __repr__(self):
        return f"<SupportTicket(id={self.id}, login='{self.customer_login}', status='{self.status}')>"
