"""
Router per l'autenticazione
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Endpoints per registrazione, login, refresh token e profilo utente.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentContext, OptionalContext
from app.schemas.common import DataResponse
from app.schemas.token import AuthResponse, TokenRefresh, TokenResponse
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.services.auth_service import auth_service

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/register",
    response_model=DataResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Registra un nuovo utente",
)
async def register(
    data: UserCreate,
    ctx: OptionalContext,
    db: AsyncSession = Depends(get_db),
):
    """
    Registra un nuovo utente nel sistema.

    Il primo utente è libero e diventa admin; i successivi richiedono
    il token di un admin.
    """
    user = await auth_service.register(db, data, ctx)
    return {"data": user}


@router.post(
    "/login",
    response_model=DataResponse[AuthResponse],
    summary="Effettua il login",
)
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Effettua il login e restituisce utente e token JWT."""
    return {"data": await auth_service.login(db, data)}


@router.post(
    "/refresh",
    response_model=DataResponse[TokenResponse],
    summary="Aggiorna i token",
)
async def refresh(data: TokenRefresh, db: AsyncSession = Depends(get_db)):
    """Aggiorna i token JWT usando un refresh token."""
    return {"data": await auth_service.refresh(db, data.refresh_token)}


@router.get(
    "/me",
    response_model=DataResponse[UserResponse],
    summary="Ottieni il profilo utente corrente",
)
async def get_me(ctx: CurrentContext):
    """Restituisce i dati dell'utente corrente."""
    return {"data": ctx.user}


__all__ = ["router"]
