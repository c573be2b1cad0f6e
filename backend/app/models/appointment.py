"""
Modello SQLAlchemy per gli Appuntamenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from __future__ import annotations

import uuid
from datetime import date, time
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.invoice import Invoice


class AppointmentType(str, Enum):
    """Tipologia di appuntamento."""
    INSTALLATION = "installation"
    PAYMENT = "payment"
    OTHER = "other"


class AppointmentStatus(str, Enum):
    """Stati dell'appuntamento. completed e cancelled sono terminali."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Appointment(Base, UUIDMixin, TimestampMixin):
    """
    Modello per gli appuntamenti.

    Può essere collegato a una fattura (es. installazione o incasso);
    se la fattura viene eliminata il collegamento viene rimosso.

    Attributes:
        title: Titolo
        appointment_date: Giorno dell'appuntamento
        start_time / end_time: Fascia oraria (opzionale)
        appointment_type: installation, payment, other
        status: pending, completed, cancelled
        invoice_id: Fattura collegata (opzionale)
    """

    __tablename__ = "appointments"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    appointment_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        doc="Giorno dell'appuntamento",
    )

    start_time: Mapped[Optional[time]] = mapped_column(
        Time,
        nullable=True,
    )

    end_time: Mapped[Optional[time]] = mapped_column(
        Time,
        nullable=True,
    )

    appointment_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AppointmentType.INSTALLATION.value,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AppointmentStatus.PENDING.value,
    )

    location: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    contact_person: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    contact_phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    invoice: Mapped[Optional["Invoice"]] = relationship(
        "Invoice",
        back_populates="appointments",
        lazy="selectin",
    )

    @property
    def invoice_number(self) -> Optional[str]:
        return self.invoice.invoice_number if self.invoice is not None else None

    __table_args__ = (
        Index("ix_appointments_date", "appointment_date"),
        Index("ix_appointments_status", "status"),
        CheckConstraint(
            "appointment_type IN ('installation', 'payment', 'other')",
            name="ck_appointments_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'completed', 'cancelled')",
            name="ck_appointments_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Appointment(id={self.id}, date={self.appointment_date}, status={self.status})>"
