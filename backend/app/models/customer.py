"""
Modello SQLAlchemy per l'anagrafica clienti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from __future__ import annotations

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin


class Customer(Base, UUIDMixin, TimestampMixin):
    """
    Modello per i clienti.

    I documenti non leggono i dati del cliente da qui: al momento della
    creazione ne copiano un'istantanea (vedi CustomerSnapshotMixin), quindi
    modificare o eliminare un cliente non altera preventivi e fatture emessi.

    Attributes:
        name: Nome o ragione sociale
        email: Email di contatto
        phone: Telefono
        address: Indirizzo completo
        tax_id: Codice fiscale / numero identificativo fiscale
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Nome o ragione sociale del cliente",
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Email di contatto",
    )

    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        doc="Telefono",
    )

    address: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Indirizzo completo",
    )

    tax_id: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        doc="Identificativo fiscale",
    )

    __table_args__ = (
        Index("ix_customers_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name})>"
