"""
Dependency Injection per autenticazione
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Le credenziali della richiesta viaggiano in un RequestContext esplicito,
iniettato per chiamata: non esiste stato di autenticazione globale.
"""

from dataclasses import dataclass
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import ACCESS_TOKEN, decode_token
from app.models.user import User, UserRole

# Estrae il token dall'header Authorization: Bearer <token>
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Utente autenticato e token della richiesta corrente."""

    user: User
    token: str

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN.value


async def resolve_user(db: AsyncSession, token: str) -> User:
    """
    Risolve l'utente a partire da un access token.

    Raises:
        AuthenticationError: token non valido, utente inesistente o disattivato
    """
    token_data = decode_token(token)

    if token_data.type != ACCESS_TOKEN:
        raise AuthenticationError("Token di refresh non valido per questa operazione")

    try:
        user_id = UUID(token_data.sub)
    except ValueError:
        raise AuthenticationError("ID utente invalido nel token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("Utente non trovato")

    if not user.is_active:
        raise AuthenticationError("Utente disattivato")

    return user


async def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    """
    Dependency che autentica la richiesta.

    Raises:
        AuthenticationError 401: token mancante, invalido o scaduto
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token di autenticazione non fornito")

    user = await resolve_user(db, credentials.credentials)
    return RequestContext(user=user, token=credentials.credentials)


async def get_optional_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[RequestContext]:
    """Come get_request_context, ma restituisce None se il token manca."""
    if credentials is None or not credentials.credentials:
        return None
    user = await resolve_user(db, credentials.credentials)
    return RequestContext(user=user, token=credentials.credentials)


def require_role(*allowed_roles: str):
    """
    Factory per una dependency che verifica il ruolo.

    Example:
        @router.post("/admin-only")
        async def admin_endpoint(ctx: RequestContext = Depends(require_role("admin"))):
            ...
    """
    async def role_checker(
        ctx: Annotated[RequestContext, Depends(get_request_context)]
    ) -> RequestContext:
        if ctx.user.role not in allowed_roles:
            raise AuthorizationError(
                f"Accesso negato. Ruolo richiesto: {', '.join(allowed_roles)}"
            )
        return ctx

    return role_checker


# Type aliases per uso comune
CurrentContext = Annotated[RequestContext, Depends(get_request_context)]
OptionalContext = Annotated[Optional[RequestContext], Depends(get_optional_context)]
AdminContext = Annotated[RequestContext, Depends(require_role(UserRole.ADMIN.value))]


__all__ = [
    "RequestContext",
    "bearer_scheme",
    "resolve_user",
    "get_request_context",
    "get_optional_context",
    "require_role",
    "CurrentContext",
    "OptionalContext",
    "AdminContext",
]
