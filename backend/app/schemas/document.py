"""
Schemas Pydantic condivisi da preventivi e fatture
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene:
- LineItemCreate / LineItemRead: righe documento
- DocumentCreateBase: campi comuni in creazione (cliente, righe, sconto, IVA)
- DocumentReadBase: campi comuni in lettura (istantanea cliente, totali, allegati)
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, Field

from app.schemas.attachment import ImageAttach, ImageRead, SignatureRead
from app.schemas.common import ApiModel, Money


# -------------------------------------------------------------------
# Righe
# -------------------------------------------------------------------

class LineItemCreate(ApiModel):
    """
    Riga in ingresso.

    Se `product_id` è indicato e nome o prezzo sono omessi, vengono copiati
    dal prodotto di listino.
    """

    product_id: Optional[uuid.UUID] = Field(None, description="Prodotto di listino")
    product_name: Optional[str] = Field(None, max_length=255, description="Nome riga")
    description: Optional[str] = Field(None, description="Descrizione riga")
    quantity: int = Field(..., description="Quantità (intero positivo)")
    price: Optional[Decimal] = Field(
        None,
        max_digits=12,
        decimal_places=2,
        description="Prezzo unitario",
    )


class LineItemRead(ApiModel):
    """Riga in uscita."""

    id: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    product_name: str
    description: Optional[str] = None
    quantity: int
    price: Money
    total: Money


# -------------------------------------------------------------------
# Documento
# -------------------------------------------------------------------

class DocumentCreateBase(ApiModel):
    """Campi comuni alla creazione di preventivi e fatture."""

    customer_id: Optional[uuid.UUID] = Field(None, description="Cliente in anagrafica")
    customer_name: Optional[str] = Field(None, max_length=255, description="Nome cliente")
    customer_phone: Optional[str] = Field(None, max_length=50)
    customer_address: Optional[str] = None
    customer_tax_id: Optional[str] = Field(None, max_length=50)

    items: List[LineItemCreate] = Field(default_factory=list, description="Righe del documento")
    discount: Decimal = Field(
        Decimal("0"),
        max_digits=12,
        decimal_places=2,
        description="Sconto a importo fisso",
    )
    vat_rate: Optional[Decimal] = Field(
        None,
        ge=0,
        le=100,
        max_digits=5,
        decimal_places=2,
        validation_alias=AliasChoices("vatRate", "vat_rate", "vat"),
        description="Aliquota IVA in percentuale (default da configurazione)",
    )
    notes: Optional[str] = None
    images: List[ImageAttach] = Field(default_factory=list, description="Immagini già caricate")


class DocumentUpdateBase(ApiModel):
    """
    Campi modificabili di un documento.

    L'istantanea cliente non è modificabile dopo la creazione.
    """

    items: Optional[List[LineItemCreate]] = None
    discount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    vat_rate: Optional[Decimal] = Field(
        None,
        ge=0,
        le=100,
        max_digits=5,
        decimal_places=2,
        validation_alias=AliasChoices("vatRate", "vat_rate", "vat"),
    )
    notes: Optional[str] = None


class DocumentReadBase(ApiModel):
    """Campi comuni in lettura."""

    id: uuid.UUID
    customer_id: Optional[uuid.UUID] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    customer_tax_id: Optional[str] = None

    items: List[LineItemRead] = Field(default_factory=list)
    discount: Money
    vat_rate: Money
    subtotal: Money
    vat_amount: Money
    total: Money
    notes: Optional[str] = None

    images: List[ImageRead] = Field(default_factory=list)
    signatures: List[SignatureRead] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime


__all__ = [
    "LineItemCreate",
    "LineItemRead",
    "DocumentCreateBase",
    "DocumentUpdateBase",
    "DocumentReadBase",
]
