"""
Mixin condivisi da preventivi e fatture
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene:
- CustomerSnapshot: istantanea immutabile dei dati cliente
- CustomerSnapshotMixin: colonne dell'istantanea cliente
- DocumentTotalsMixin: sconto, aliquota e totali memorizzati
- LineItemMixin: colonne comuni delle righe documento
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.core.money import DocumentTotals, to_money


@dataclass(frozen=True)
class CustomerSnapshot:
    """Dati del cliente così come erano alla creazione del documento."""

    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None


class CustomerSnapshotMixin:
    """
    Colonne dell'istantanea cliente.

    Vengono valorizzate una sola volta alla creazione del documento;
    nessun servizio le aggiorna in seguito.
    """

    @declared_attr
    def customer_id(cls) -> Mapped[Optional[uuid.UUID]]:
        return mapped_column(
            Uuid,
            ForeignKey("customers.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
            doc="Cliente di origine (solo riferimento, i dati sono copiati)",
        )

    customer_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Nome cliente al momento della creazione",
    )

    customer_phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    customer_address: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    customer_tax_id: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    @property
    def customer(self) -> CustomerSnapshot:
        return CustomerSnapshot(
            name=self.customer_name,
            phone=self.customer_phone,
            address=self.customer_address,
            tax_id=self.customer_tax_id,
        )

    def set_customer_snapshot(self, snapshot: CustomerSnapshot) -> None:
        self.customer_name = snapshot.name
        self.customer_phone = snapshot.phone
        self.customer_address = snapshot.address
        self.customer_tax_id = snapshot.tax_id


class DocumentTotalsMixin:
    """Sconto, aliquota IVA e totali calcolati del documento."""

    discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Sconto a importo fisso sul subtotale",
    )

    vat_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
        default=Decimal("7.00"),
        doc="Aliquota IVA in percentuale",
    )

    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Somma di quantità × prezzo delle righe",
    )

    vat_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Importo IVA",
    )

    total: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Totale documento (imponibile + IVA)",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note stampate sul documento",
    )

    def apply_totals(self, totals: DocumentTotals) -> None:
        self.subtotal = totals.subtotal
        self.discount = totals.discount
        self.vat_amount = totals.vat_amount
        self.total = totals.total

    @property
    def taxable_amount(self) -> Decimal:
        return to_money(self.subtotal - self.discount)


class LineItemMixin:
    """
    Colonne comuni delle righe documento.

    Nome, descrizione e prezzo sono copie: la riga resta invariata anche se
    il prodotto di listino cambia o viene disattivato.
    """

    @declared_attr
    def product_id(cls) -> Mapped[Optional[uuid.UUID]]:
        return mapped_column(
            Uuid,
            ForeignKey("products.id", ondelete="SET NULL"),
            nullable=True,
            doc="Prodotto di listino di origine",
        )

    product_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Nome prodotto copiato alla creazione della riga",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Quantità (intero positivo)",
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Prezzo unitario",
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Ordine della riga nel documento",
    )

    @property
    def total(self) -> Decimal:
        """Totale riga (quantità × prezzo), senza arrotondamenti."""
        return self.quantity * self.price
