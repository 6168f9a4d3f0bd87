"""
Cash ledger (caixa) database model.

Append-only record of cash movements.
"""

import uuid

from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String, DateTime
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.billing_enums import CASH_ACCOUNT_OTHER, CASH_MOVEMENT_AUTOMATIC


class CashLedgerEntry(Base):
    """
    Cash ledger entry model.

    Exactly one of credit_amount / debit_amount is populated.
    NO updates or deletions allowed: a payment is corrected by appending
    a reversal entry.
    """
    __tablename__ = "sis_caixa"
    __table_args__ = (
        CheckConstraint(
            "(entrada IS NULL) <> (saida IS NULL)",
            name="ck_sis_caixa_one_side",
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    uuid = Column("uuid_caixa", String(48), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    actor = Column("usuario", String(64), nullable=False)
    timestamp = Column("data", DateTime, server_default=func.now(), nullable=False)
    narrative = Column("historico", String(255), nullable=False)

    # Financials (one side only)
    credit_amount = Column("entrada", Numeric(12, 2), nullable=True)
    debit_amount = Column("saida", Numeric(12, 2), nullable=True)

    movement_type = Column("tipomov", String(8), nullable=False, default=CASH_MOVEMENT_AUTOMATIC)
    account_category = Column("planodecontas", String(64), nullable=False, default=CASH_ACCOUNT_OTHER)

    def __repr__(self):
        side = "credit" if self.credit_amount is not None else "debit"
        amount = self.credit_amount if self.credit_amount is not None else self.debit_amount
        return f"<CashLedgerEntry(id={self.id}, {side}={amount}, actor='{self.actor}')>"
