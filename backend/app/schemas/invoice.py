"""
Invoice Schemas.

Attribute names are English; wire names (serialization aliases) keep the
field names existing API clients read. Request bodies are read through
validation aliases with the same legacy names.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.core.inputs import parse_amount, sanitize_text
from backend.app.models.billing_enums import DEFAULT_ACTOR


class WireModel(BaseModel):
    """Base for response rows; ``dump`` yields JSON-ready wire dicts."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class PixRow(WireModel):
    """Row carrying a PIX payload; the payload is repeated as pix_link and pix_qr when present."""
    pix: Optional[str] = None

    def dump(self) -> Dict[str, Any]:
        data = super().dump()
        if self.pix:
            data["pix_link"] = self.pix
            data["pix_qr"] = self.pix
        return data


class InvoiceSummary(PixRow):
    """Invoice row joined with its customer and PIX payload, for listings."""
    external_ref: str = Field(serialization_alias="uuid")
    id: int = Field(serialization_alias="titulo")
    amount_due: Decimal = Field(serialization_alias="valor")
    amount_paid: Optional[Decimal] = Field(None, serialization_alias="valorpag")
    due_date: Optional[date] = Field(None, serialization_alias="datavenc")
    bank_number: Optional[str] = Field(None, serialization_alias="nossonum")
    digitable_line: Optional[str] = Field(None, serialization_alias="linhadig")
    customer_name: Optional[str] = Field(None, serialization_alias="nome")
    customer_login: str = Field(serialization_alias="login")
    customer_tax_id: Optional[str] = Field(None, serialization_alias="cpf_cnpj")
    kind: Optional[str] = Field(None, serialization_alias="tipo")
    email: Optional[str] = None
    street: Optional[str] = Field(None, serialization_alias="endereco")
    number: Optional[str] = Field(None, serialization_alias="numero")
    district: Optional[str] = Field(None, serialization_alias="bairro")
    complement: Optional[str] = Field(None, serialization_alias="complemento")
    city: Optional[str] = Field(None, serialization_alias="cidade")
    state: Optional[str] = Field(None, serialization_alias="estado")
    zip_code: Optional[str] = Field(None, serialization_alias="cep")
    status: str
    customer_active: Optional[str] = Field(None, serialization_alias="cli_ativado")

    @classmethod
    def from_row(cls, invoice, customer=None, qrcode: Optional[str] = None) -> "InvoiceSummary":
        values = {
            "external_ref": invoice.external_ref,
            "id": invoice.id,
            "amount_due": invoice.amount_due,
            "amount_paid": invoice.amount_paid,
            "due_date": invoice.due_date,
            "bank_number": invoice.bank_number,
            "digitable_line": invoice.digitable_line,
            "customer_login": invoice.customer_login,
            "customer_tax_id": invoice.customer_tax_id,
            "kind": invoice.kind,
            "status": invoice.status,
            "pix": qrcode,
        }
        if customer is not None:
            values.update(
                customer_name=customer.name,
                email=customer.email,
                street=customer.street,
                number=customer.number,
                district=customer.district,
                complement=customer.complement,
                city=customer.city,
                state=customer.state,
                zip_code=customer.zip_code,
                customer_active=customer.active,
            )
        return cls(**values)


class LinkedInvoiceRecord(WireModel):
    """One ``sis_mlanc`` row attached to an invoice."""
    id: int
    invoice_id: int = Field(serialization_alias="idlanc")
    customer_login: Optional[str] = Field(None, serialization_alias="login")
    description: Optional[str] = Field(None, serialization_alias="descricao")
    amount: Optional[Decimal] = Field(None, serialization_alias="valor")
    due_date: Optional[date] = Field(None, serialization_alias="datavenc")
    status: Optional[str] = None


class InvoiceDetail(PixRow):
    """Every stored column of one invoice plus its PIX payload and linked invoices."""
    id: int
    external_ref: str = Field(serialization_alias="uuid_lanc")
    customer_login: str = Field(serialization_alias="login")
    customer_tax_id: Optional[str] = Field(None, serialization_alias="cpf_cnpj")
    amount_due: Decimal = Field(serialization_alias="valor")
    amount_paid: Optional[Decimal] = Field(None, serialization_alias="valorpag")
    due_date: Optional[date] = Field(None, serialization_alias="datavenc")
    payment_date: Optional[datetime] = Field(None, serialization_alias="datapag")
    status: str
    collector: Optional[str] = Field(None, serialization_alias="coletor")
    payment_method: Optional[str] = Field(None, serialization_alias="formapag")
    kind: Optional[str] = Field(None, serialization_alias="tipo")
    bank_number: Optional[str] = Field(None, serialization_alias="nossonum")
    digitable_line: Optional[str] = Field(None, serialization_alias="linhadig")
    deleted_flag: bool = Field(False, serialization_alias="deltitulo")
    linked: List[LinkedInvoiceRecord] = Field(default_factory=list, serialization_alias="atrelados")

    def dump(self) -> Dict[str, Any]:
        data = super().dump()
        # Only invoices with linked rows carry the key
        if not self.linked:
            data.pop("atrelados", None)
        return data


class ReceiveRequest(BaseModel):
    """Body of PUT /titulos/{ref}/receber, already checked for valor and forma."""
    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal = Field(validation_alias="valor")
    method: str = Field(validation_alias="forma")
    collector: str = Field(DEFAULT_ACTOR, validation_alias="coletor")

    @field_validator("amount", mode="before")
    @classmethod
    def lenient_amount(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("method", mode="before")
    @classmethod
    def clean_method(cls, value: Any) -> str:
        return sanitize_text(value)

    @field_validator("collector", mode="before")
    @classmethod
    def clean_collector(cls, value: Any) -> str:
        return sanitize_text(value) if value else DEFAULT_ACTOR


class ReverseRequest(BaseModel):
    """Body of PUT /titulos/{ref}/estornar (the body is optional)."""
    model_config = ConfigDict(populate_by_name=True)

    actor: str = Field(DEFAULT_ACTOR, validation_alias="usuario")

    @field_validator("actor", mode="before")
    @classmethod
    def clean_actor(cls, value: Any) -> str:
        return sanitize_text(value) if value else DEFAULT_ACTOR


def _string_list(value: Any) -> List[str]:
    return [str(v) for v in value] if isinstance(value, list) else []


class InvoiceSearchRequest(BaseModel):
    """Body of POST /titulos/search; non-list selectors are ignored."""
    model_config = ConfigDict(populate_by_name=True)

    logins: List[str] = Field(default_factory=list, validation_alias="login")
    tax_ids: List[str] = Field(default_factory=list, validation_alias="cpf_cnpj")
    status: Optional[str] = None

    @field_validator("logins", "tax_ids", mode="before")
    @classmethod
    def only_lists(cls, value: Any) -> List[str]:
        return _string_list(value)

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, value: Any) -> Optional[str]:
        return sanitize_text(value) if value else None

    @property
    def is_empty(self) -> bool:
        return not self.logins and not self.tax_ids
