"""
Schemas Pydantic per il catalogo prodotti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from app.models.product import DEFAULT_UNIT
from app.schemas.common import ApiModel, Money


class ProductBase(ApiModel):
    """Campi comuni del prodotto."""

    name: str = Field(..., min_length=1, max_length=255, description="Nome prodotto")
    description: Optional[str] = Field(None, description="Descrizione estesa")
    price: Money = Field(..., ge=0, max_digits=12, decimal_places=2, description="Prezzo unitario")
    unit: str = Field(DEFAULT_UNIT, min_length=1, max_length=50, description="Unità di misura")


class ProductCreate(ProductBase):
    """Schema per la creazione di un prodotto."""
    pass


class ProductUpdate(ApiModel):
    """Aggiornamento parziale di un prodotto."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    unit: Optional[str] = Field(None, min_length=1, max_length=50)
    is_active: Optional[bool] = None


class ProductRead(ProductBase):
    """Schema per la lettura di un prodotto."""

    id: uuid.UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


__all__ = ["ProductCreate", "ProductUpdate", "ProductRead"]
