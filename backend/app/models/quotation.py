"""
Modelli SQLAlchemy per i Preventivi
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene:
- Quotation: Preventivo
- QuotationItem: Righe del preventivo
"""

from __future__ import annotations

import uuid
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.document import CustomerSnapshotMixin, DocumentTotalsMixin, LineItemMixin
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.attachment import DocumentImage, Signature
    from app.models.invoice import Invoice


class QuotationStatus(str, Enum):
    """Stati del preventivo."""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CONVERTED = "converted"


class Quotation(Base, UUIDMixin, TimestampMixin, CustomerSnapshotMixin, DocumentTotalsMixin):
    """
    Modello per i preventivi.

    Un preventivo nasce in bozza, può essere inviato, accettato o rifiutato
    e viene infine convertito in fattura. Una volta convertito è immutabile.

    Attributes:
        quotation_number: Numero progressivo (formato: QT-YYYY-NNNN)
        status: Stato corrente (draft, sent, accepted, rejected, converted)
        valid_until: Data di scadenza dell'offerta

    Relationships:
        items: Righe del preventivo
        images: Immagini allegate
        signatures: Firme raccolte
        invoice: Fattura generata dalla conversione
    """

    __tablename__ = "quotations"

    quotation_number: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        unique=True,
        doc="Numero preventivo (formato: QT-YYYY-NNNN)",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=QuotationStatus.DRAFT.value,
        doc="Stato del preventivo",
    )

    valid_until: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data di scadenza dell'offerta",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    items: Mapped[List["QuotationItem"]] = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.position",
        lazy="selectin",
    )

    images: Mapped[List["DocumentImage"]] = relationship(
        "DocumentImage",
        back_populates="quotation",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    signatures: Mapped[List["Signature"]] = relationship(
        "Signature",
        back_populates="quotation",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    invoice: Mapped[Optional["Invoice"]] = relationship(
        "Invoice",
        back_populates="quotation",
        uselist=False,
        lazy="selectin",
    )

    @property
    def is_converted(self) -> bool:
        return self.status == QuotationStatus.CONVERTED.value

    @property
    def invoice_id(self) -> Optional[uuid.UUID]:
        return self.invoice.id if self.invoice is not None else None

    __table_args__ = (
        Index("ix_quotations_status", "status"),
        Index("ix_quotations_created_at", "created_at"),
        CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected', 'converted')",
            name="ck_quotations_status",
        ),
        CheckConstraint("discount >= 0", name="ck_quotations_discount_positive"),
        CheckConstraint("total >= 0", name="ck_quotations_total_positive"),
    )

    def __repr__(self) -> str:
        return f"<Quotation(id={self.id}, number={self.quotation_number}, status={self.status})>"


class QuotationItem(Base, UUIDMixin, LineItemMixin):
    """Riga del preventivo."""

    __tablename__ = "quotation_items"

    quotation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    quotation: Mapped["Quotation"] = relationship(
        "Quotation",
        back_populates="items",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_quotation_items_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_quotation_items_price_positive"),
    )

    def __repr__(self) -> str:
        return f"<QuotationItem(id={self.id}, product={self.product_name}, qty={self.quantity})>"
