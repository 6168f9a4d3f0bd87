"""
PIX QR code database model (``sis_qrpix``).
"""

from sqlalchemy import Column, Integer, String, Text
from backend.app.db.session import Base


class PixQrCode(Base):
    """PIX payload generated for an invoice, keyed by the invoice's external ref."""
    __tablename__ = "sis_qrpix"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    invoice_ref = Column("titulo", String(48), index=True, nullable=False)
    qrcode = Column(Text, nullable=True)

    def __repr__(self):
        return f"<PixQrCode(id={self.id}, invoice_ref='{self.invoice_ref}')>"
