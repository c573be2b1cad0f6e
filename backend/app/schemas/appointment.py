"""
Schemas Pydantic per gli Appuntamenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid
from datetime import date, datetime, time
from typing import Optional

from pydantic import Field, model_validator

from app.models.appointment import AppointmentStatus, AppointmentType
from app.schemas.common import ApiModel


# -------------------------------------------------------------------
# Transizioni di stato consentite
# -------------------------------------------------------------------

VALID_TRANSITIONS: dict[AppointmentStatus, list[AppointmentStatus]] = {
    AppointmentStatus.PENDING: [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED],
    AppointmentStatus.COMPLETED: [],  # Stato finale
    AppointmentStatus.CANCELLED: [],  # Stato finale
}


def _check_time_range(start: Optional[time], end: Optional[time]) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("L'orario di fine non può precedere l'orario di inizio")


class AppointmentBase(ApiModel):
    """Campi comuni dell'appuntamento."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    appointment_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    appointment_type: AppointmentType = AppointmentType.INSTALLATION
    location: Optional[str] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    invoice_id: Optional[uuid.UUID] = None


class AppointmentCreate(AppointmentBase):
    """Creazione di un appuntamento (sempre in stato pending)."""

    @model_validator(mode="after")
    def validate_times(self) -> "AppointmentCreate":
        _check_time_range(self.start_time, self.end_time)
        return self


class AppointmentUpdate(ApiModel):
    """
    Modifica dei dettagli di un appuntamento.

    Lo stato si cambia solo tramite l'endpoint dedicato.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    appointment_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    appointment_type: Optional[AppointmentType] = None
    location: Optional[str] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    invoice_id: Optional[uuid.UUID] = None


class AppointmentStatusUpdate(ApiModel):
    """Richiesta di cambio stato."""

    status: AppointmentStatus


class AppointmentRead(AppointmentBase):
    """Schema per la lettura di un appuntamento."""

    id: uuid.UUID
    status: AppointmentStatus
    invoice_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


__all__ = [
    "VALID_TRANSITIONS",
    "AppointmentCreate",
    "AppointmentUpdate",
    "AppointmentStatusUpdate",
    "AppointmentRead",
]
