"""
Invoice (titulo) database model.

Maps the legacy ``sis_lanc`` table onto English attribute names.
"""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, Numeric, String
from backend.app.db.session import Base
from backend.app.models.billing_enums import InvoiceStatus


class Invoice(Base):
    """
    Invoice model.

    Payment state (status, amount_paid, payment_date, collector,
    payment_method) is only written by the invoice ledger:
    OPEN -> PAID via receive, PAID -> OPEN via reverse.
    amount_paid and payment_date are set if and only if status is PAID.
    """
    __tablename__ = "sis_lanc"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Public handle; the internal id is never used in routes
    external_ref = Column("uuid_lanc", String(48), unique=True, index=True, nullable=False)

    # Owing customer (not unique per invoice)
    customer_login = Column("login", String(64), index=True, nullable=False)
    customer_tax_id = Column("cpf_cnpj", String(32), index=True, nullable=True)

    # Financials
    amount_due = Column("valor", Numeric(12, 2), nullable=False, default=0)
    amount_paid = Column("valorpag", Numeric(12, 2), nullable=True)
    due_date = Column("datavenc", Date, nullable=True)
    payment_date = Column("datapag", DateTime, nullable=True)

    status = Column(String(16), nullable=False, default=InvoiceStatus.OPEN.value, index=True)
    collector = Column("coletor", String(64), nullable=True)
    payment_method = Column("formapag", String(64), nullable=True)

    # Presentation fields for listings
    kind = Column("tipo", String(32), nullable=True)
    bank_number = Column("nossonum", String(64), nullable=True)
    digitable_line = Column("linhadig", String(128), nullable=True)

    # Soft delete, honoured by list/search queries only
    deleted_flag = Column("deltitulo", Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<Invoice(id={self.id}, ref='{self.external_ref}', status='{self.status}')>"
