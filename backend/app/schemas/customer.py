"""
Schemas Pydantic per l'anagrafica clienti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import ApiModel


class CustomerBase(ApiModel):
    """Campi comuni del cliente."""

    name: str = Field(..., min_length=1, max_length=255, description="Nome o ragione sociale")
    email: Optional[EmailStr] = Field(None, description="Email di contatto")
    phone: Optional[str] = Field(None, max_length=50, description="Telefono")
    address: Optional[str] = Field(None, description="Indirizzo completo")
    tax_id: Optional[str] = Field(None, max_length=50, description="Identificativo fiscale")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Il nome del cliente è obbligatorio")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_to_none(cls, v):
        """Il frontend invia stringa vuota per email non compilata."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CustomerCreate(CustomerBase):
    """Schema per la creazione di un cliente."""
    pass


class CustomerUpdate(ApiModel):
    """Aggiornamento parziale di un cliente."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    tax_id: Optional[str] = Field(None, max_length=50)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CustomerRead(CustomerBase):
    """Schema per la lettura di un cliente."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


__all__ = ["CustomerCreate", "CustomerUpdate", "CustomerRead"]
