"""
Schemas Pydantic per i Preventivi
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid
from datetime import date
from typing import Optional

from pydantic import Field

from app.models.quotation import QuotationStatus
from app.schemas.common import ApiModel
from app.schemas.document import DocumentCreateBase, DocumentReadBase, DocumentUpdateBase


# -------------------------------------------------------------------
# Transizioni di stato consentite
# -------------------------------------------------------------------
# 'converted' non compare mai come destinazione: lo imposta solo la conversione.

VALID_TRANSITIONS: dict[QuotationStatus, list[QuotationStatus]] = {
    QuotationStatus.DRAFT: [
        QuotationStatus.SENT,
        QuotationStatus.ACCEPTED,
        QuotationStatus.REJECTED,
    ],
    QuotationStatus.SENT: [QuotationStatus.ACCEPTED, QuotationStatus.REJECTED],
    QuotationStatus.ACCEPTED: [],
    QuotationStatus.REJECTED: [],
    QuotationStatus.CONVERTED: [],  # Stato finale
}


def can_transition(current: QuotationStatus, target: QuotationStatus) -> bool:
    return target in VALID_TRANSITIONS.get(current, [])


# -------------------------------------------------------------------
# Schemas
# -------------------------------------------------------------------

class QuotationCreate(DocumentCreateBase):
    """Schema per la creazione di un preventivo."""

    valid_until: Optional[date] = Field(None, description="Scadenza dell'offerta")


class QuotationUpdate(DocumentUpdateBase):
    """Schema per l'aggiornamento di un preventivo non ancora convertito."""

    valid_until: Optional[date] = None


class QuotationStatusUpdate(ApiModel):
    """Richiesta di cambio stato."""

    status: QuotationStatus = Field(..., description="Nuovo stato")


class QuotationRead(DocumentReadBase):
    """Schema per la lettura di un preventivo."""

    quotation_number: str
    status: QuotationStatus
    valid_until: Optional[date] = None
    invoice_id: Optional[uuid.UUID] = None


__all__ = [
    "VALID_TRANSITIONS",
    "can_transition",
    "QuotationCreate",
    "QuotationUpdate",
    "QuotationStatusUpdate",
    "QuotationRead",
]
