"""
Service Layer per gli Appuntamenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from app.models.appointment import Appointment, AppointmentStatus, AppointmentType
from app.models.invoice import Invoice
from app.schemas.appointment import (
    VALID_TRANSITIONS,
    AppointmentCreate,
    AppointmentUpdate,
)

logger = logging.getLogger(__name__)


class AppointmentService:
    """
    Service per gli appuntamenti.

    Lo stato passa una sola volta da pending a completed o cancelled;
    la modifica dei dettagli non tocca mai lo stato.
    """

    async def get_all(
        self,
        db: AsyncSession,
        status: Optional[AppointmentStatus] = None,
        appointment_type: Optional[AppointmentType] = None,
        invoice_id: Optional[uuid.UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Appointment]:
        """Lista appuntamenti filtrata, in ordine cronologico."""
        stmt = select(Appointment)
        if status is not None:
            stmt = stmt.where(Appointment.status == status.value)
        if appointment_type is not None:
            stmt = stmt.where(Appointment.appointment_type == appointment_type.value)
        if invoice_id is not None:
            stmt = stmt.where(Appointment.invoice_id == invoice_id)
        if date_from is not None:
            stmt = stmt.where(Appointment.appointment_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(Appointment.appointment_date <= date_to)

        stmt = stmt.order_by(Appointment.appointment_date, Appointment.start_time)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(
        self,
        db: AsyncSession,
        appointment_id: uuid.UUID,
        for_update: bool = False,
    ) -> Appointment:
        """
        Raises:
            NotFoundError: Appuntamento non trovato
        """
        stmt = (
            select(Appointment)
            .where(Appointment.id == appointment_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        appointment = (await db.execute(stmt)).scalar_one_or_none()
        if not appointment:
            raise NotFoundError(f"Appuntamento {appointment_id} non trovato")
        return appointment

    async def _check_invoice(self, db: AsyncSession, invoice_id: Optional[uuid.UUID]) -> None:
        if invoice_id is None:
            return
        exists = await db.scalar(select(Invoice.id).where(Invoice.id == invoice_id))
        if exists is None:
            raise NotFoundError(f"Fattura {invoice_id} non trovata")

    async def _commit(self, db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Errore di integrità durante %s appuntamento: %s", action, e)
            raise ConflictError(f"Errore durante {action} dell'appuntamento")

    async def create(self, db: AsyncSession, data: AppointmentCreate) -> Appointment:
        """
        Crea un appuntamento in stato pending.

        Raises:
            NotFoundError: fattura collegata inesistente
        """
        await self._check_invoice(db, data.invoice_id)

        values = data.model_dump()
        values["appointment_type"] = data.appointment_type.value
        appointment = Appointment(**values, status=AppointmentStatus.PENDING.value)

        db.add(appointment)
        await self._commit(db, "la creazione")

        logger.info("Appuntamento '%s' creato per il %s", appointment.title, appointment.appointment_date)
        return await self.get_by_id(db, appointment.id)

    async def update(
        self,
        db: AsyncSession,
        appointment_id: uuid.UUID,
        data: AppointmentUpdate,
    ) -> Appointment:
        """
        Aggiorna i dettagli (mai lo stato).

        Raises:
            NotFoundError: appuntamento o fattura collegata inesistente
            ValidationError: fascia oraria non valida
        """
        appointment = await self.get_by_id(db, appointment_id, for_update=True)
        update_data = data.model_dump(exclude_unset=True)

        if "invoice_id" in update_data:
            await self._check_invoice(db, data.invoice_id)

        for required in ("title", "appointment_date", "appointment_type"):
            if required in update_data and update_data[required] is None:
                raise ValidationError(f"Il campo {required} è obbligatorio")

        if "appointment_type" in update_data:
            update_data["appointment_type"] = data.appointment_type.value

        start = update_data.get("start_time", appointment.start_time)
        end = update_data.get("end_time", appointment.end_time)
        if start is not None and end is not None and end < start:
            raise ValidationError("L'orario di fine non può precedere l'orario di inizio")

        for field, value in update_data.items():
            setattr(appointment, field, value)

        await self._commit(db, "l'aggiornamento")
        logger.info("Appuntamento %s aggiornato", appointment_id)
        return await self.get_by_id(db, appointment_id)

    async def update_status(
        self,
        db: AsyncSession,
        appointment_id: uuid.UUID,
        new_status: AppointmentStatus,
    ) -> Appointment:
        """
        Completa o annulla un appuntamento pending.

        Raises:
            InvalidStateError: appuntamento già completato/annullato
                o transizione non consentita
        """
        appointment = await self.get_by_id(db, appointment_id, for_update=True)
        current = AppointmentStatus(appointment.status)

        if new_status not in VALID_TRANSITIONS[current]:
            raise InvalidStateError(
                f"Transizione di stato non consentita: {current.value} → {new_status.value}"
            )

        appointment.status = new_status.value
        await self._commit(db, "il cambio stato")

        logger.info("Appuntamento %s: %s → %s", appointment_id, current.value, new_status.value)
        return await self.get_by_id(db, appointment_id)

    async def delete(self, db: AsyncSession, appointment_id: uuid.UUID) -> None:
        """Elimina un appuntamento in qualsiasi stato."""
        appointment = await self.get_by_id(db, appointment_id)
        await db.delete(appointment)
        await self._commit(db, "l'eliminazione")
        logger.info("Appuntamento %s eliminato", appointment_id)


appointment_service = AppointmentService()
