"""
Router per i preventivi
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Endpoints per CRUD, cambio stato, conversione in fattura, firme,
immagini e PDF dei preventivi.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.database import get_db
from app.core.deps import CurrentContext
from app.models.quotation import QuotationStatus
from app.schemas.attachment import ImageAttachRequest, ImageRead, SignatureCreate, SignatureRead
from app.schemas.common import DataResponse
from app.schemas.invoice import InvoiceRead
from app.schemas.quotation import (
    QuotationCreate,
    QuotationRead,
    QuotationStatusUpdate,
    QuotationUpdate,
)
from app.services.attachment_service import DocumentKind, attachment_service
from app.services.conversion_service import conversion_service
from app.services.pdf_service import pdf_service
from app.services.quotation_service import quotation_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotations",
    tags=["Preventivi"],
)


@router.get(
    "",
    response_model=DataResponse[List[QuotationRead]],
    summary="Lista preventivi",
)
async def get_all_quotations(
    ctx: CurrentContext,
    status_filter: Optional[QuotationStatus] = Query(None, alias="status"),
    customer_id: Optional[uuid.UUID] = Query(None, alias="customerId"),
    search: Optional[str] = Query(None, description="Ricerca su numero e cliente"),
    db: AsyncSession = Depends(get_db),
):
    """Recupera i preventivi, dal più recente."""
    quotations = await quotation_service.get_all(db, status_filter, customer_id, search)
    return {"data": quotations}


@router.get(
    "/{id}",
    response_model=DataResponse[QuotationRead],
    summary="Dettaglio preventivo",
)
async def get_quotation(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Recupera un preventivo con righe, immagini e firme."""
    return {"data": await quotation_service.get_by_id(db, id)}


@router.post(
    "",
    response_model=DataResponse[QuotationRead],
    status_code=status.HTTP_201_CREATED,
    summary="Crea preventivo",
)
async def create_quotation(data: QuotationCreate, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """
    Crea un preventivo in stato bozza.

    Numero (QT-YYYY-NNNN) e totali sono calcolati dal server.
    """
    return {"data": await quotation_service.create(db, data)}


@router.put(
    "/{id}",
    response_model=DataResponse[QuotationRead],
    summary="Aggiorna preventivo",
)
async def update_quotation(
    id: uuid.UUID,
    data: QuotationUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Aggiorna righe, sconto, IVA, note e scadenza. Vietato se già convertito."""
    return {"data": await quotation_service.update(db, id, data)}


@router.patch(
    "/{id}/status",
    response_model=DataResponse[QuotationRead],
    summary="Cambia stato preventivo",
)
async def change_quotation_status(
    id: uuid.UUID,
    data: QuotationStatusUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """
    Cambia lo stato del preventivo.

    Transizioni consentite:
    - draft → sent, accepted, rejected
    - sent → accepted, rejected
    """
    return {"data": await quotation_service.change_status(db, id, data.status)}


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Elimina preventivo",
)
async def delete_quotation(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Elimina un preventivo non convertito con righe, immagini e firme."""
    await quotation_service.delete(db, id)


@router.post(
    "/{id}/convert-to-invoice",
    response_model=DataResponse[InvoiceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Converti in fattura",
)
async def convert_quotation(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Converte il preventivo in fattura. Possibile una sola volta."""
    return {"data": await conversion_service.convert_to_invoice(db, id)}


@router.post(
    "/{id}/signature",
    response_model=DataResponse[SignatureRead],
    status_code=status.HTTP_201_CREATED,
    summary="Aggiungi firma",
)
async def add_quotation_signature(
    id: uuid.UUID,
    data: SignatureCreate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Aggiunge la firma del negozio o del cliente (una per tipo)."""
    signature = await attachment_service.add_signature(db, DocumentKind.QUOTATION, id, data)
    return {"data": signature}


@router.post(
    "/{id}/images",
    response_model=DataResponse[List[ImageRead]],
    status_code=status.HTTP_201_CREATED,
    summary="Collega immagini",
)
async def add_quotation_images(
    id: uuid.UUID,
    data: ImageAttachRequest,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Collega al preventivo immagini già caricate con /upload."""
    images = await attachment_service.add_images(db, DocumentKind.QUOTATION, id, data.images)
    return {"data": images}


@router.get(
    "/{id}/pdf",
    response_class=Response,
    summary="PDF preventivo",
)
async def get_quotation_pdf(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Genera il PDF del preventivo."""
    quotation = await quotation_service.get_by_id(db, id)
    pdf = await run_in_threadpool(pdf_service.generate_pdf, quotation)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{quotation.quotation_number}.pdf"'},
    )
