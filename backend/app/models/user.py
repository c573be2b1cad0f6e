"""
Modello SQLAlchemy per l'entità User
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Modello per l'autenticazione e gestione utenti del sistema.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin


class UserRole(str, Enum):
    """Ruoli utente nel sistema (unico flag di autorizzazione)."""
    ADMIN = "admin"
    STAFF = "staff"


class User(Base, UUIDMixin, TimestampMixin):
    """
    Modello per gli utenti del sistema.

    Attributes:
        id: UUID primary key, generato automaticamente
        email: Email univoca dell'utente
        hashed_password: Password hashata
        full_name: Nome completo dell'utente
        role: Ruolo dell'utente (admin, staff)
        is_active: Indica se l'utente è attivo
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        doc="Email univoca dell'utente",
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Password hashata",
    )

    full_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Nome completo dell'utente",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.STAFF.value,
        doc="Ruolo dell'utente",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Indica se l'utente è attivo",
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
