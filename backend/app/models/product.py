"""
Modello SQLAlchemy per il catalogo prodotti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import SoftDeleteMixin, TimestampMixin, UUIDMixin

DEFAULT_UNIT = "ชิ้น"


class Product(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Modello per prodotti e servizi a listino.

    Le righe dei documenti copiano nome, descrizione e prezzo al momento
    dell'inserimento: variazioni di listino non toccano i documenti esistenti.
    L'eliminazione è logica (is_active = False).

    Attributes:
        name: Nome prodotto
        description: Descrizione estesa
        price: Prezzo unitario
        unit: Unità di misura (default "ชิ้น", pezzo)
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Nome prodotto",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Descrizione estesa",
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Prezzo unitario di listino",
    )

    unit: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_UNIT,
        doc="Unità di misura",
    )

    __table_args__ = (
        Index("ix_products_name", "name"),
        CheckConstraint("price >= 0", name="ck_products_price_positive"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name}, price={self.price})>"
