"""
Schemas Pydantic per l'entità User
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, EmailStr, Field, field_validator

from app.models.user import UserRole
from app.schemas.common import ApiModel


class UserCreate(ApiModel):
    """
    Schema per la registrazione di un nuovo utente.

    Il primo utente registrato diventa sempre admin; i successivi
    vengono creati da un admin con il ruolo indicato.
    """

    email: EmailStr = Field(..., description="Email univoca dell'utente")
    password: str = Field(
        min_length=8,
        max_length=100,
        description="Password in chiaro (min 8, max 100 caratteri)",
    )
    full_name: str = Field(
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("fullName", "full_name", "name"),
        description="Nome completo dell'utente",
    )
    role: UserRole = Field(
        default=UserRole.STAFF,
        description="Ruolo dell'utente",
    )

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Il nome non può essere vuoto")
        return v


class UserLogin(ApiModel):
    """Credenziali di login."""

    email: EmailStr = Field(..., description="Email dell'utente")
    password: str = Field(..., description="Password in chiaro")


class UserResponse(ApiModel):
    """Dati utente esposti dall'API."""

    id: UUID = Field(..., description="UUID dell'utente")
    email: str = Field(..., description="Email dell'utente")
    full_name: str = Field(..., description="Nome completo dell'utente")
    role: UserRole = Field(..., description="Ruolo dell'utente")
    is_active: bool = Field(..., description="Indica se l'utente è attivo")
    created_at: Optional[datetime] = Field(None, description="Data/ora di creazione")


__all__ = [
    "UserCreate",
    "UserLogin",
    "UserResponse",
]
