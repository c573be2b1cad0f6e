"""
Schemas Pydantic per la Fatturazione
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene:
- Schemas per Payment
- Schemas per Invoice
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, Field

from app.models.invoice import InvoiceStatus, PaymentMethod, PaymentStatus
from app.schemas.common import ApiModel, Money
from app.schemas.document import DocumentCreateBase, DocumentReadBase


# -------------------------------------------------------------------
# Schemas per Payment
# -------------------------------------------------------------------

class PaymentCreate(ApiModel):
    """
    Registrazione di un pagamento.

    L'importo deve essere positivo e non superiore al residuo;
    il controllo sul residuo avviene nel servizio sotto lock.
    """

    amount: Decimal = Field(..., max_digits=12, decimal_places=2, description="Importo")
    method: PaymentMethod = Field(
        PaymentMethod.CASH,
        validation_alias=AliasChoices("paymentMethod", "payment_method", "method"),
        description="Metodo di pagamento",
    )
    notes: Optional[str] = None
    paid_at: Optional[datetime] = Field(None, description="Data/ora incasso (default: ora)")


class PaymentRead(ApiModel):
    """Pagamento registrato."""

    id: uuid.UUID
    amount: Money
    method: PaymentMethod = Field(..., serialization_alias="paymentMethod")
    notes: Optional[str] = None
    paid_at: datetime


# -------------------------------------------------------------------
# Schemas per Invoice
# -------------------------------------------------------------------

class InvoiceCreate(DocumentCreateBase):
    """Creazione diretta di una fattura (senza preventivo)."""

    due_date: Optional[date] = Field(None, description="Scadenza pagamento")


class InvoiceStatusUpdate(ApiModel):
    """
    Richiesta di riallineamento dello stato.

    Lo stato è derivato dal registro pagamenti: viene accettato solo il
    valore coerente con i pagamenti registrati.
    """

    status: PaymentStatus


class AppointmentBrief(ApiModel):
    """Appuntamento collegato, in forma ridotta."""

    id: uuid.UUID
    title: str
    appointment_date: date
    appointment_type: str
    status: str


class InvoiceRead(DocumentReadBase):
    """Schema per la lettura di una fattura."""

    invoice_number: str
    quotation_id: Optional[uuid.UUID] = None
    quotation_number: Optional[str] = None
    due_date: Optional[date] = None
    payment_status: PaymentStatus
    status: InvoiceStatus
    paid_amount: Money
    remaining_amount: Money
    payments: List[PaymentRead] = Field(default_factory=list)
    appointments: List[AppointmentBrief] = Field(default_factory=list)


__all__ = [
    "PaymentCreate",
    "PaymentRead",
    "InvoiceCreate",
    "InvoiceStatusUpdate",
    "InvoiceRead",
]
