"""
Customer database model.

Maps the legacy ``sis_cliente`` table.
"""

from sqlalchemy import Column, Integer, String, DateTime
from backend.app.db.session import Base
from backend.app.models.billing_enums import CustomerActive


class Customer(Base):
    """ISP customer. ``code`` is the public lookup key."""
    __tablename__ = "sis_cliente"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    code = Column("codigo", String(32), unique=True, index=True, nullable=False)
    name = Column("nome", String(255), nullable=False)
    login = Column(String(64), index=True, nullable=True)
    tax_id = Column("cpf_cnpj", String(32), index=True, nullable=True)
    email = Column(String(255), nullable=True)

    group_name = Column("grupo", String(64), index=True, nullable=True)
    active = Column("cli_ativado", String(1), nullable=False, default=CustomerActive.NO.value)

    # Address
    street = Column("endereco", String(255), nullable=True)
    number = Column("numero", String(16), nullable=True)
    district = Column("bairro", String(128), nullable=True)
    complement = Column("complemento", String(128), nullable=True)
    city = Column("cidade", String(128), nullable=True)
    state = Column("estado", String(2), nullable=True)
    zip_code = Column("cep", String(16), nullable=True)

    installed_at = Column("data_ins", DateTime, nullable=True)
    deactivated_at = Column("data_desativacao", DateTime, nullable=True)

    def __repr__(self):
        return f"<Customer(id={self.id}, code='{self.code}', login='{self.login}')>"
