"""
Service Layer per la Fatturazione
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene la logica per:
- Creazione diretta di fatture
- Registro pagamenti (solo inserimento) e stato di pagamento
- Riallineamento stato ed eliminazione
"""

import logging
import uuid
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from app.core.money import to_money
from app.models.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Payment,
    PaymentStatus,
    derive_payment_status,
)
from app.models.mixins import utcnow
from app.schemas.invoice import InvoiceCreate, PaymentCreate
from app.services.attachment_service import AttachmentService, attachment_service
from app.services.document_builder import DocumentBuilder, document_builder
from app.services.numbering_service import DocumentType, NumberingService, numbering_service

logger = logging.getLogger(__name__)


class InvoiceService:
    """
    Service per fatture e pagamenti.

    `payment_status` è sempre ricalcolato dal registro pagamenti nella
    stessa transazione che inserisce il pagamento, con la riga fattura
    bloccata: due incassi concorrenti non possono superare il totale.
    """

    def __init__(
        self,
        builder: DocumentBuilder = document_builder,
        numbering: NumberingService = numbering_service,
        attachments: AttachmentService = attachment_service,
    ) -> None:
        self.builder = builder
        self.numbering = numbering
        self.attachments = attachments

    # ------------------------------------------------------------
    # Lettura
    # ------------------------------------------------------------
    async def get_all(
        self,
        db: AsyncSession,
        status: Optional[InvoiceStatus] = None,
        customer_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[Invoice]:
        """
        Lista fatture, dalla più recente.

        Args:
            status: Filtro per stato esposto (incluso 'overdue', calcolato)
            customer_id: Filtro per cliente di origine
            search: Testo cercato in numero e nome cliente
        """
        stmt = select(Invoice)
        if customer_id is not None:
            stmt = stmt.where(Invoice.customer_id == customer_id)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    Invoice.invoice_number.ilike(pattern),
                    Invoice.customer_name.ilike(pattern),
                )
            )
        stmt = stmt.order_by(Invoice.created_at.desc(), Invoice.invoice_number.desc())
        result = await db.execute(stmt)
        invoices = list(result.scalars().all())

        # 'overdue' dipende dalla data odierna: filtro in Python
        if status is not None:
            invoices = [i for i in invoices if i.effective_status(today) == status]
        return invoices

    async def get_by_id(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        for_update: bool = False,
    ) -> Invoice:
        """
        Recupera una fattura con righe, pagamenti e allegati.

        Raises:
            NotFoundError: Fattura non trovata
        """
        stmt = (
            select(Invoice)
            .where(Invoice.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        invoice = result.scalar_one_or_none()

        if not invoice:
            raise NotFoundError(f"Fattura {invoice_id} non trovata")

        return invoice

    async def _commit(self, db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Errore di integrità durante %s fattura: %s", action, e)
            raise ConflictError(f"Errore durante {action} della fattura")

    # ------------------------------------------------------------
    # Creazione
    # ------------------------------------------------------------
    async def create(self, db: AsyncSession, data: InvoiceCreate) -> Invoice:
        """
        Crea una fattura senza preventivo di origine.

        Raises:
            ValidationError: cliente, righe o importi non validi
            NotFoundError: cliente o prodotto inesistente
        """
        customer_id, snapshot = await self.builder.resolve_customer(db, data)
        items = await self.builder.build_items(db, data.items, InvoiceItem)
        vat_rate = data.vat_rate if data.vat_rate is not None else settings.default_vat_rate
        totals = self.builder.compute_totals(items, data.discount, vat_rate)
        images = self.builder.build_images(data.images)

        today = date.today()
        number = await self.numbering.next_number(db, DocumentType.INVOICE, today)

        invoice = Invoice(
            invoice_number=number,
            customer_id=customer_id,
            payment_status=PaymentStatus.UNPAID.value,
            vat_rate=vat_rate,
            notes=data.notes,
            due_date=data.due_date or today + timedelta(days=settings.invoice_payment_terms_days),
            items=items,
            images=images,
        )
        invoice.set_customer_snapshot(snapshot)
        invoice.apply_totals(totals)

        db.add(invoice)
        await self._commit(db, "la creazione")

        logger.info("Fattura %s creata per %s (totale %s)", number, snapshot.name, totals.total)
        return await self.get_by_id(db, invoice.id)

    # ------------------------------------------------------------
    # Pagamenti
    # ------------------------------------------------------------
    async def record_payment(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        data: PaymentCreate,
    ) -> Invoice:
        """
        Registra un pagamento e aggiorna lo stato della fattura.

        Raises:
            NotFoundError: fattura inesistente
            InvalidStateError: fattura già saldata
            ValidationError: importo non positivo o superiore al residuo
        """
        invoice = await self.get_by_id(db, invoice_id, for_update=True)

        if invoice.payment_status == PaymentStatus.PAID.value:
            raise InvalidStateError(f"La fattura {invoice.invoice_number} risulta già saldata")

        amount = to_money(data.amount)
        if amount <= 0:
            raise ValidationError("L'importo del pagamento deve essere positivo")

        remaining = invoice.remaining_amount
        if amount > remaining:
            raise ValidationError(
                f"L'importo {amount} supera il residuo da pagare ({remaining})",
                extra={"remainingAmount": float(remaining)},
            )

        invoice.payments.append(
            Payment(
                amount=amount,
                method=data.method.value,
                notes=data.notes,
                paid_at=data.paid_at or utcnow(),
            )
        )
        previous = invoice.payment_status
        invoice.payment_status = derive_payment_status(invoice.total, invoice.paid_amount).value
        invoice.updated_at = utcnow()

        await self._commit(db, "la registrazione pagamento")

        logger.info(
            "Pagamento di %s su fattura %s (%s → %s)",
            amount, invoice.invoice_number, previous, invoice.payment_status,
        )
        return await self.get_by_id(db, invoice_id)

    async def update_status(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        requested: PaymentStatus,
    ) -> Invoice:
        """
        Riallinea lo stato memorizzato al registro pagamenti.

        Lo stato non è impostabile liberamente: viene accettato solo il
        valore coerente con i pagamenti registrati.

        Raises:
            InvalidStateError: stato richiesto incoerente con i pagamenti
        """
        invoice = await self.get_by_id(db, invoice_id, for_update=True)
        expected = derive_payment_status(invoice.total, invoice.paid_amount)

        if requested != expected:
            raise InvalidStateError(
                f"Stato '{requested.value}' incoerente con i pagamenti registrati "
                f"(stato corretto: '{expected.value}')"
            )

        if invoice.payment_status != expected.value:
            logger.warning(
                "Fattura %s: stato %s riallineato a %s",
                invoice.invoice_number, invoice.payment_status, expected.value,
            )
            invoice.payment_status = expected.value
            await self._commit(db, "il riallineamento stato")

        return await self.get_by_id(db, invoice_id)

    # ------------------------------------------------------------
    # Eliminazione
    # ------------------------------------------------------------
    async def delete(self, db: AsyncSession, invoice_id: uuid.UUID) -> None:
        """
        Elimina una fattura senza pagamenti.

        Gli appuntamenti collegati restano, senza riferimento alla fattura.

        Raises:
            InvalidStateError: fattura con pagamenti registrati
        """
        invoice = await self.get_by_id(db, invoice_id, for_update=True)

        if invoice.payments:
            raise InvalidStateError(
                f"La fattura {invoice.invoice_number} ha pagamenti registrati e non può essere eliminata"
            )

        urls = [i.url for i in invoice.images] + [s.image_url for s in invoice.signatures]
        number = invoice.invoice_number

        for appointment in invoice.appointments:
            appointment.invoice_id = None

        await db.delete(invoice)
        await self._commit(db, "l'eliminazione")
        await self.attachments.discard_unreferenced(db, urls)

        logger.info("Fattura %s eliminata", number)


invoice_service = InvoiceService()
