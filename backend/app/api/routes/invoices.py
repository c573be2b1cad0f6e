"""
Router per le fatture
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Endpoints per fatture, registro pagamenti, firme, immagini e PDF.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.database import get_db
from app.core.deps import CurrentContext
from app.models.invoice import InvoiceStatus
from app.schemas.attachment import ImageAttachRequest, ImageRead, SignatureCreate, SignatureRead
from app.schemas.common import DataResponse
from app.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceStatusUpdate, PaymentCreate
from app.services.attachment_service import DocumentKind, attachment_service
from app.services.invoice_service import invoice_service
from app.services.pdf_service import pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/invoices",
    tags=["Fatture"],
)


@router.get(
    "",
    response_model=DataResponse[List[InvoiceRead]],
    summary="Lista fatture",
)
async def get_all_invoices(
    ctx: CurrentContext,
    status_filter: Optional[InvoiceStatus] = Query(
        None,
        alias="status",
        description="unpaid, partial, paid, overdue",
    ),
    customer_id: Optional[uuid.UUID] = Query(None, alias="customerId"),
    search: Optional[str] = Query(None, description="Ricerca su numero e cliente"),
    db: AsyncSession = Depends(get_db),
):
    """Recupera le fatture, dalla più recente."""
    invoices = await invoice_service.get_all(db, status_filter, customer_id, search)
    return {"data": invoices}


@router.get(
    "/{id}",
    response_model=DataResponse[InvoiceRead],
    summary="Dettaglio fattura",
)
async def get_invoice(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Recupera una fattura con righe, pagamenti, appuntamenti e allegati."""
    return {"data": await invoice_service.get_by_id(db, id)}


@router.post(
    "",
    response_model=DataResponse[InvoiceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Crea fattura",
)
async def create_invoice(data: InvoiceCreate, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Crea una fattura diretta, senza preventivo di origine."""
    return {"data": await invoice_service.create(db, data)}


@router.patch(
    "/{id}/status",
    response_model=DataResponse[InvoiceRead],
    summary="Riallinea stato fattura",
)
async def update_invoice_status(
    id: uuid.UUID,
    data: InvoiceStatusUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """
    Riallinea lo stato di pagamento al registro pagamenti.

    È accettato solo lo stato coerente con i pagamenti registrati;
    per incassare usare POST /invoices/{id}/payments.
    """
    return {"data": await invoice_service.update_status(db, id, data.status)}


@router.post(
    "/{id}/payments",
    response_model=DataResponse[InvoiceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Registra pagamento",
)
async def record_payment(
    id: uuid.UUID,
    data: PaymentCreate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Registra un pagamento. L'importo non può superare il residuo."""
    return {"data": await invoice_service.record_payment(db, id, data)}


@router.post(
    "/{id}/signature",
    response_model=DataResponse[SignatureRead],
    status_code=status.HTTP_201_CREATED,
    summary="Aggiungi firma",
)
async def add_invoice_signature(
    id: uuid.UUID,
    data: SignatureCreate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Aggiunge la firma del negozio o del cliente (una per tipo)."""
    signature = await attachment_service.add_signature(db, DocumentKind.INVOICE, id, data)
    return {"data": signature}


@router.post(
    "/{id}/images",
    response_model=DataResponse[List[ImageRead]],
    status_code=status.HTTP_201_CREATED,
    summary="Collega immagini",
)
async def add_invoice_images(
    id: uuid.UUID,
    data: ImageAttachRequest,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Collega alla fattura immagini già caricate con /upload."""
    images = await attachment_service.add_images(db, DocumentKind.INVOICE, id, data.images)
    return {"data": images}


@router.get(
    "/{id}/pdf",
    response_class=Response,
    summary="PDF fattura",
)
async def get_invoice_pdf(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Genera il PDF della fattura."""
    invoice = await invoice_service.get_by_id(db, id)
    pdf = await run_in_threadpool(pdf_service.generate_pdf, invoice)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{invoice.invoice_number}.pdf"'},
    )


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Elimina fattura",
)
async def delete_invoice(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Elimina una fattura senza pagamenti registrati."""
    await invoice_service.delete(db, id)
