"""
Conversione preventivo → fattura
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, InvalidStateError
from app.models.attachment import DocumentImage
from app.models.invoice import Invoice, InvoiceItem, PaymentStatus
from app.models.quotation import QuotationStatus
from app.services.document_builder import DocumentBuilder, document_builder
from app.services.invoice_service import InvoiceService, invoice_service
from app.services.numbering_service import DocumentType, NumberingService, numbering_service
from app.services.quotation_service import QuotationService, quotation_service

logger = logging.getLogger(__name__)


class ConversionService:
    """
    Trasforma un preventivo in una nuova fattura.

    Preventivo e fattura vengono scritti nella stessa transazione: o la
    fattura esiste e il preventivo è 'converted', oppure nessuno dei due
    cambia. Il lock sulla riga del preventivo impedisce doppie conversioni
    concorrenti; il vincolo unique su invoices.quotation_id fa da ultima
    barriera.
    """

    def __init__(
        self,
        quotations: QuotationService = quotation_service,
        invoices: InvoiceService = invoice_service,
        numbering: NumberingService = numbering_service,
        builder: DocumentBuilder = document_builder,
    ) -> None:
        self.quotations = quotations
        self.invoices = invoices
        self.numbering = numbering
        self.builder = builder

    async def convert_to_invoice(
        self,
        db: AsyncSession,
        quotation_id: uuid.UUID,
    ) -> Invoice:
        """
        Converte il preventivo in fattura.

        La fattura riceve l'istantanea cliente, copie indipendenti delle
        righe, sconto, aliquota, note e riferimenti alle immagini; nasce
        non pagata e senza pagamenti. Le firme restano sul preventivo.

        Raises:
            NotFoundError: preventivo inesistente
            InvalidStateError: preventivo già convertito
            ConflictError: conversione concorrente
        """
        quotation = await self.quotations.get_by_id(db, quotation_id, for_update=True)
        if quotation.is_converted:
            raise InvalidStateError(
                f"Il preventivo {quotation.quotation_number} è già stato convertito in fattura"
            )

        today = date.today()
        number = await self.numbering.next_number(db, DocumentType.INVOICE, today)

        items = self.builder.copy_items(quotation.items, InvoiceItem)
        totals = self.builder.compute_totals(items, quotation.discount, quotation.vat_rate)

        invoice = Invoice(
            invoice_number=number,
            quotation_id=quotation.id,
            customer_id=quotation.customer_id,
            payment_status=PaymentStatus.UNPAID.value,
            vat_rate=quotation.vat_rate,
            notes=quotation.notes,
            due_date=today + timedelta(days=settings.invoice_payment_terms_days),
            items=items,
            images=[
                DocumentImage(url=i.url, filename=i.filename, caption=i.caption)
                for i in quotation.images
            ],
        )
        invoice.set_customer_snapshot(quotation.customer)
        invoice.apply_totals(totals)

        quotation.status = QuotationStatus.CONVERTED.value
        db.add(invoice)

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Conversione concorrente del preventivo %s: %s", quotation_id, e)
            raise ConflictError("Il preventivo è stato convertito da un'altra operazione")

        logger.info(
            "Preventivo %s convertito nella fattura %s",
            quotation.quotation_number, number,
        )
        return await self.invoices.get_by_id(db, invoice.id)


conversion_service = ConversionService()
