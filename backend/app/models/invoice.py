"""
Modelli SQLAlchemy per la Fatturazione
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene:
- Invoice: Fattura
- InvoiceItem: Righe della fattura
- Payment: Pagamenti registrati sulla fattura (solo inserimento)
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.document import CustomerSnapshotMixin, DocumentTotalsMixin, LineItemMixin
from app.models.mixins import TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from app.models.appointment import Appointment
    from app.models.attachment import DocumentImage, Signature
    from app.models.quotation import Quotation


class PaymentStatus(str, Enum):
    """Stato di pagamento memorizzato (derivato dal registro pagamenti)."""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class InvoiceStatus(str, Enum):
    """Stato esposto al client: include 'overdue', calcolato in lettura."""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentMethod(str, Enum):
    """Metodi di pagamento."""
    CASH = "cash"
    TRANSFER = "transfer"
    CREDIT = "credit"


def derive_payment_status(total: Decimal, paid: Decimal) -> PaymentStatus:
    """Stato di pagamento coerente con totale e incassato."""
    if paid <= 0:
        return PaymentStatus.UNPAID
    if paid >= total:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


def compute_invoice_status(
    payment_status: str,
    due_date: Optional[date],
    today: Optional[date] = None,
) -> InvoiceStatus:
    """Stato esposto: 'overdue' se scaduta e non saldata, altrimenti lo stato memorizzato."""
    today = today or date.today()
    if (
        due_date is not None
        and today > due_date
        and payment_status != PaymentStatus.PAID.value
    ):
        return InvoiceStatus.OVERDUE
    return InvoiceStatus(payment_status)


class Invoice(Base, UUIDMixin, TimestampMixin, CustomerSnapshotMixin, DocumentTotalsMixin):
    """
    Modello per le fatture.

    Una fattura nasce dalla conversione di un preventivo oppure per
    inserimento diretto. I pagamenti si accumulano nel registro `payments`;
    `payment_status` è memorizzato e aggiornato nella stessa transazione
    dell'inserimento di un pagamento. Lo stato 'overdue' non è mai
    memorizzato ma calcolato in lettura dalla data di scadenza.

    Attributes:
        invoice_number: Numero progressivo (formato: INV-YYYY-NNNN)
        quotation_id: Preventivo di origine (al più una fattura per preventivo)
        payment_status: unpaid, partial, paid
        due_date: Data scadenza pagamento

    Relationships:
        items: Righe della fattura
        payments: Pagamenti registrati
        appointments: Appuntamenti collegati
        images: Immagini allegate
        signatures: Firme raccolte
    """

    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        unique=True,
        doc="Numero fattura (formato: INV-YYYY-NNNN)",
    )

    quotation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
        doc="Preventivo di origine (relazione 1:1)",
    )

    payment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.UNPAID.value,
        doc="Stato di pagamento memorizzato",
    )

    due_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="Data scadenza pagamento",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    items: Mapped[List["InvoiceItem"]] = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
        lazy="selectin",
    )

    payments: Mapped[List["Payment"]] = relationship(
        "Payment",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="Payment.paid_at",
        lazy="selectin",
    )

    quotation: Mapped[Optional["Quotation"]] = relationship(
        "Quotation",
        back_populates="invoice",
        lazy="selectin",
    )

    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment",
        back_populates="invoice",
        lazy="selectin",
    )

    images: Mapped[List["DocumentImage"]] = relationship(
        "DocumentImage",
        back_populates="invoice",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    signatures: Mapped[List["Signature"]] = relationship(
        "Signature",
        back_populates="invoice",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # ------------------------------------------------------------
    # Properties Calcolate
    # ------------------------------------------------------------
    @property
    def paid_amount(self) -> Decimal:
        """Somma dei pagamenti registrati."""
        return sum((p.amount for p in self.payments), Decimal("0.00"))

    @property
    def remaining_amount(self) -> Decimal:
        """Importo residuo da incassare."""
        return self.total - self.paid_amount

    @property
    def quotation_number(self) -> Optional[str]:
        return self.quotation.quotation_number if self.quotation is not None else None

    def effective_status(self, today: Optional[date] = None) -> InvoiceStatus:
        return compute_invoice_status(self.payment_status, self.due_date, today)

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """True se scaduta e non completamente pagata."""
        return self.effective_status(today) == InvoiceStatus.OVERDUE

    @property
    def status(self) -> str:
        """
        Stato esposto:
        - 'paid': totalmente pagata
        - 'overdue': scaduta e non pagata
        - 'partial': parzialmente pagata
        - 'unpaid': non pagata
        """
        return self.effective_status().value

    # ------------------------------------------------------------
    # Indici e Vincoli
    # ------------------------------------------------------------
    __table_args__ = (
        Index("ix_invoices_payment_status", "payment_status"),
        Index("ix_invoices_due_date", "due_date"),
        Index("ix_invoices_created_at", "created_at"),
        CheckConstraint(
            "payment_status IN ('unpaid', 'partial', 'paid')",
            name="ck_invoices_payment_status",
        ),
        CheckConstraint("discount >= 0", name="ck_invoices_discount_positive"),
        CheckConstraint("vat_rate >= 0", name="ck_invoices_vat_rate_positive"),
        CheckConstraint("total >= 0", name="ck_invoices_total_positive"),
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number={self.invoice_number}, total={self.total})>"


class InvoiceItem(Base, UUIDMixin, LineItemMixin):
    """Riga della fattura (copia indipendente della riga di preventivo)."""

    __tablename__ = "invoice_items"

    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    invoice: Mapped["Invoice"] = relationship(
        "Invoice",
        back_populates="items",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_invoice_items_price_positive"),
    )

    def __repr__(self) -> str:
        return f"<InvoiceItem(id={self.id}, product={self.product_name}, qty={self.quantity})>"


class Payment(Base, UUIDMixin, TimestampMixin):
    """
    Pagamento registrato su una fattura.

    Il registro è solo in inserimento: non esistono operazioni di modifica
    o cancellazione di un pagamento.
    """

    __tablename__ = "payments"

    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Importo incassato",
    )

    method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentMethod.CASH.value,
        doc="Metodo di pagamento: cash, transfer, credit",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    paid_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        doc="Data/ora dell'incasso",
    )

    invoice: Mapped["Invoice"] = relationship(
        "Invoice",
        back_populates="payments",
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        CheckConstraint(
            "method IN ('cash', 'transfer', 'credit')",
            name="ck_payments_method",
        ),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
