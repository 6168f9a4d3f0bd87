"""
Billing enumerations.

Values are the literal strings stored by the MK-Auth schema.
"""

import enum


class InvoiceStatus(str, enum.Enum):
    """Invoice (titulo) status enumeration."""
    OPEN = "aberto"  # Awaiting payment; also the state a reversal returns to
    PAID = "pago"  # Payment recorded through receive
    OVERDUE = "vencido"  # Past due date, still unpaid


class TicketStatus(str, enum.Enum):
    """Support ticket status enumeration."""
    OPEN = "aberto"
    CLOSED = "fechado"


class CustomerActive(str, enum.Enum):
    """Customer activation flag (cli_ativado)."""
    YES = "s"
    NO = "n"


# Fixed classification of entries written by the API
CASH_MOVEMENT_AUTOMATIC = "aut"
CASH_ACCOUNT_OTHER = "Outros"

# Actor recorded when the caller does not name one
DEFAULT_ACTOR = "API"
