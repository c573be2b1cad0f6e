"""
Router per gli appuntamenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentContext
from app.models.appointment import AppointmentStatus, AppointmentType
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from app.schemas.common import DataResponse
from app.services.appointment_service import appointment_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/appointments",
    tags=["Appuntamenti"],
)


@router.get("", response_model=DataResponse[List[AppointmentRead]])
async def get_all_appointments(
    ctx: CurrentContext,
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    appointment_type: Optional[AppointmentType] = Query(None, alias="appointmentType"),
    invoice_id: Optional[uuid.UUID] = Query(None, alias="invoiceId"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    db: AsyncSession = Depends(get_db),
):
    """Recupera gli appuntamenti in ordine di data."""
    appointments = await appointment_service.get_all(
        db,
        status=status_filter,
        appointment_type=appointment_type,
        invoice_id=invoice_id,
        date_from=date_from,
        date_to=date_to,
    )
    return {"data": appointments}


@router.get("/{id}", response_model=DataResponse[AppointmentRead])
async def get_appointment(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Recupera il dettaglio di un appuntamento."""
    return {"data": await appointment_service.get_by_id(db, id)}


@router.post("", response_model=DataResponse[AppointmentRead], status_code=status.HTTP_201_CREATED)
async def create_appointment(data: AppointmentCreate, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Crea un appuntamento in stato pending."""
    return {"data": await appointment_service.create(db, data)}


@router.put("/{id}", response_model=DataResponse[AppointmentRead])
async def update_appointment(
    id: uuid.UUID,
    data: AppointmentUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Aggiorna i dettagli di un appuntamento. Lo stato si cambia con PATCH /status."""
    return {"data": await appointment_service.update(db, id, data)}


@router.patch("/{id}/status", response_model=DataResponse[AppointmentRead])
async def update_appointment_status(
    id: uuid.UUID,
    data: AppointmentStatusUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Chiude un appuntamento: pending → completed o cancelled."""
    return {"data": await appointment_service.update_status(db, id, data.status)}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Elimina un appuntamento."""
    await appointment_service.delete(db, id)
