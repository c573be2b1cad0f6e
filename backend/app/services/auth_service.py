"""
Servizio per l'autenticazione
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Business logic per registrazione, login e refresh token.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import RequestContext
from app.core.exceptions import AuthenticationError, AuthorizationError, DuplicateError
from app.core.security import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User, UserRole
from app.schemas.token import AuthResponse, TokenResponse
from app.schemas.user import UserCreate, UserLogin, UserResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email o password non corretti"


class AuthService:
    """Servizio per la gestione dell'autenticazione."""

    async def _count_users(self, db: AsyncSession) -> int:
        return int(await db.scalar(select(func.count(User.id))) or 0)

    async def register(
        self,
        db: AsyncSession,
        data: UserCreate,
        ctx: Optional[RequestContext] = None,
    ) -> User:
        """
        Registra un nuovo utente nel sistema.

        Se non esistono utenti la registrazione è libera e il ruolo è
        forzato ad admin. Altrimenti serve il contesto di un admin.

        Raises:
            AuthenticationError: Utenti già presenti e richiesta non autenticata
            AuthorizationError: L'utente corrente non è admin
            DuplicateError: Se l'email è già registrata
        """
        user_count = await self._count_users(db)

        role = data.role
        if user_count == 0:
            role = UserRole.ADMIN
        elif ctx is None:
            raise AuthenticationError("Autenticazione richiesta per registrare nuovi utenti")
        elif not ctx.is_admin:
            raise AuthorizationError("Solo gli admin possono registrare nuovi utenti")

        existing = await db.scalar(select(User).where(User.email == data.email))
        if existing:
            raise DuplicateError(f"L'email {data.email} è già registrata")

        user = User(
            email=data.email,
            hashed_password=hash_password(data.password),
            full_name=data.full_name,
            role=role.value,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError(f"L'email {data.email} è già registrata")
        await db.refresh(user)

        logger.info("Utente registrato: %s (%s)", user.email, user.role)
        return user

    def _issue_tokens(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(str(user.id), user.role),
            refresh_token=create_refresh_token(str(user.id), user.role),
            token_type="bearer",
        )

    async def login(self, db: AsyncSession, data: UserLogin) -> AuthResponse:
        """
        Autentica un utente e restituisce utente e token JWT.

        Raises:
            AuthenticationError: Credenziali invalide o utente disattivato
        """
        user = await db.scalar(select(User).where(User.email == data.email))

        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Login fallito per %s", data.email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not user.is_active:
            raise AuthenticationError("Utente disattivato")

        tokens = self._issue_tokens(user)
        return AuthResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            token=tokens.access_token,
            user=UserResponse.model_validate(user),
        )

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenResponse:
        """
        Aggiorna i token JWT usando un refresh token.

        Raises:
            AuthenticationError: Token invalido, di tipo errato o utente non valido
        """
        token_data = decode_token(refresh_token)

        if token_data.type != REFRESH_TOKEN:
            raise AuthenticationError("Token di accesso non valido per il refresh")

        try:
            user_id = UUID(token_data.sub)
        except ValueError:
            raise AuthenticationError("ID utente invalido nel token")

        user = await db.get(User, user_id)
        if not user:
            raise AuthenticationError("Utente non trovato")
        if not user.is_active:
            raise AuthenticationError("Utente disattivato")

        return self._issue_tokens(user)


auth_service = AuthService()


__all__ = [
    "AuthService",
    "auth_service",
]
