"""
Customer Schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.core.inputs import sanitize_text
from backend.app.models.billing_enums import CustomerActive
from backend.app.schemas.invoice import WireModel


class CustomerRecord(WireModel):
    """Schema for displaying a customer."""
    id: int
    code: str = Field(serialization_alias="codigo")
    name: str = Field(serialization_alias="nome")
    login: Optional[str] = None
    tax_id: Optional[str] = Field(None, serialization_alias="cpf_cnpj")
    email: Optional[str] = None
    group_name: Optional[str] = Field(None, serialization_alias="grupo")
    active: str = Field(serialization_alias="cli_ativado")
    street: Optional[str] = Field(None, serialization_alias="endereco")
    number: Optional[str] = Field(None, serialization_alias="numero")
    district: Optional[str] = Field(None, serialization_alias="bairro")
    complement: Optional[str] = Field(None, serialization_alias="complemento")
    city: Optional[str] = Field(None, serialization_alias="cidade")
    state: Optional[str] = Field(None, serialization_alias="estado")
    zip_code: Optional[str] = Field(None, serialization_alias="cep")
    installed_at: Optional[datetime] = Field(None, serialization_alias="data_ins")
    deactivated_at: Optional[datetime] = Field(None, serialization_alias="data_desativacao")


class CustomerCreate(BaseModel):
    """Body of POST /clientes (already checked for codigo/nome)."""
    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(validation_alias="codigo")
    name: str = Field(validation_alias="nome")
    group_name: str = Field("", validation_alias="grupo")
    active: str = Field(CustomerActive.NO.value, validation_alias="ativo")

    @field_validator("code", "name", "group_name", mode="before")
    @classmethod
    def clean_text(cls, value: Any) -> str:
        return sanitize_text(value or "")

    @field_validator("active", mode="before")
    @classmethod
    def active_flag(cls, value: Any) -> str:
        return CustomerActive.YES.value if value else CustomerActive.NO.value
