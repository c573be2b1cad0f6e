"""
Schemas Pydantic per l'autenticazione JWT
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import ApiModel
from app.schemas.user import UserResponse


class TokenResponse(ApiModel):
    """
    Coppia di token JWT.

    Attributes:
        access_token: Token di accesso JWT
        refresh_token: Token di refresh JWT
        token_type: Tipo di token (default: bearer)
    """

    access_token: str = Field(..., description="Token di accesso JWT")
    refresh_token: str = Field(..., description="Token di refresh JWT")
    token_type: str = Field(default="bearer", description="Tipo di token")


class AuthResponse(TokenResponse):
    """Risposta di login: utente autenticato e token."""

    user: UserResponse = Field(..., description="Utente autenticato")
    token: str = Field(..., description="Alias dell'access token")


class TokenRefresh(ApiModel):
    """Richiesta di refresh token."""

    refresh_token: str = Field(..., description="Token di refresh JWT")


class TokenPayload(BaseModel):
    """
    Payload contenuto nei token JWT.

    Attributes:
        sub: Subject - ID dell'utente come stringa
        role: Ruolo dell'utente
        exp: Expiration - Data/ora di scadenza
        type: Tipo di token ("access" o "refresh")
    """

    sub: str = Field(..., description="ID utente")
    role: str = Field(..., description="Ruolo dell'utente")
    exp: datetime = Field(..., description="Data/ora di scadenza")
    type: str = Field(..., description="Tipo di token (access/refresh)")


__all__ = [
    "AuthResponse",
    "TokenResponse",
    "TokenRefresh",
    "TokenPayload",
]
