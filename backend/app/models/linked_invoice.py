"""
Linked invoice database model (``sis_mlanc``).

Rows attached to a parent invoice, shown as ``atrelados`` on the invoice
detail. Read-only for this API.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String
from backend.app.db.session import Base


class LinkedInvoice(Base):
    """Invoice linked to a parent ``sis_lanc`` row through ``idlanc``."""
    __tablename__ = "sis_mlanc"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    invoice_id = Column("idlanc", Integer, ForeignKey("sis_lanc.id", ondelete="CASCADE"), index=True, nullable=False)

    customer_login = Column("login", String(64), nullable=True)
    description = Column("descricao", String(255), nullable=True)
    amount = Column("valor", Numeric(12, 2), nullable=True)
    due_date = Column("datavenc", Date, nullable=True)
    status = Column(String(16), nullable=True)

    def __repr__(self):
        return f"<LinkedInvoice(id={self.id}, invoice_id={self.invoice_id})>"
