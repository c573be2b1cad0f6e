"""
Modulo di sicurezza per autenticazione JWT
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Funzioni per hashing password e gestione token JWT.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.schemas.token import TokenPayload

# Context per hashing password
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def hash_password(password: str) -> str:
    """
    Hasha una password in chiaro.

    Args:
        password: Password in chiaro

    Returns:
        Password hashata
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica una password in chiaro contro una hashata.

    Args:
        plain_password: Password in chiaro
        hashed_password: Password hashata

    Returns:
        True se la password corrisponde, False altrimenti
    """
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user_id: str, role: str, token_type: str, lifetime: timedelta) -> str:
    payload = {
        "sub": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": token_type,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str, role: str) -> str:
    """
    Crea un token di accesso JWT.

    Args:
        user_id: ID dell'utente
        role: Ruolo dell'utente

    Returns:
        Token JWT codificato
    """
    return _create_token(
        user_id,
        role,
        ACCESS_TOKEN,
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: str, role: str) -> str:
    """Crea un token di refresh JWT."""
    return _create_token(
        user_id,
        role,
        REFRESH_TOKEN,
        timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decodifica e valida un token JWT.

    Args:
        token: Token JWT da decodificare

    Returns:
        TokenPayload con i dati del token

    Raises:
        AuthenticationError: Se il token è invalido o scaduto
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Token invalido o scaduto: {e}")

    if not payload.get("sub") or not payload.get("type"):
        raise AuthenticationError("Token invalido: dati mancanti")

    return TokenPayload(
        sub=payload["sub"],
        role=payload.get("role") or "",
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        type=payload["type"],
    )


__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "ACCESS_TOKEN",
    "REFRESH_TOKEN",
]
