"""
Modelli SQLAlchemy per firme e immagini allegate
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Entrambi appartengono a esattamente un documento: un preventivo
oppure una fattura.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from app.models.invoice import Invoice
    from app.models.quotation import Quotation

ONE_PARENT_CHECK = "(quotation_id IS NULL) <> (invoice_id IS NULL)"


class SignatureType(str, Enum):
    """Chi ha firmato il documento."""
    SHOP = "shop"
    CUSTOMER = "customer"


class Signature(Base, UUIDMixin, TimestampMixin):
    """
    Firma digitale raccolta su un documento.

    L'immagine è salvata nello storage; qui restano URL, firmatario e data.
    Al più una firma per tipo per documento.
    """

    __tablename__ = "signatures"

    quotation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    signature_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    image_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        doc="URL pubblico dell'immagine della firma",
    )

    signer_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    signed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    quotation: Mapped[Optional["Quotation"]] = relationship(
        "Quotation",
        back_populates="signatures",
    )

    invoice: Mapped[Optional["Invoice"]] = relationship(
        "Invoice",
        back_populates="signatures",
    )

    __table_args__ = (
        CheckConstraint(ONE_PARENT_CHECK, name="ck_signatures_one_parent"),
        CheckConstraint(
            "signature_type IN ('shop', 'customer')",
            name="ck_signatures_type",
        ),
        UniqueConstraint("quotation_id", "signature_type", name="uq_signatures_quotation_type"),
        UniqueConstraint("invoice_id", "signature_type", name="uq_signatures_invoice_type"),
    )

    def __repr__(self) -> str:
        return f"<Signature(id={self.id}, type={self.signature_type}, signer={self.signer_name})>"


class DocumentImage(Base, UUIDMixin, TimestampMixin):
    """
    Immagine allegata a un documento.

    Il file viene caricato prima tramite /upload e poi collegato.
    """

    __tablename__ = "document_images"

    quotation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    caption: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    quotation: Mapped[Optional["Quotation"]] = relationship(
        "Quotation",
        back_populates="images",
    )

    invoice: Mapped[Optional["Invoice"]] = relationship(
        "Invoice",
        back_populates="images",
    )

    __table_args__ = (
        CheckConstraint(ONE_PARENT_CHECK, name="ck_document_images_one_parent"),
    )

    def __repr__(self) -> str:
        return f"<DocumentImage(id={self.id}, filename={self.filename})>"
