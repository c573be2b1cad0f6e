"""
Service Layer per i Preventivi
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Gestisce creazione, modifica, cambio stato ed eliminazione dei preventivi.
La conversione in fattura è in conversion_service.
"""

import logging
import uuid
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from app.models.quotation import Quotation, QuotationItem, QuotationStatus
from app.schemas.quotation import QuotationCreate, QuotationUpdate, can_transition
from app.services.attachment_service import AttachmentService, attachment_service
from app.services.document_builder import DocumentBuilder, document_builder
from app.services.numbering_service import DocumentType, NumberingService, numbering_service

logger = logging.getLogger(__name__)


class QuotationService:
    """
    Service per il ciclo di vita dei preventivi.

    Stati: draft → sent → accepted / rejected; converted solo tramite
    conversione in fattura. Un preventivo convertito è immutabile.
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
        status: Optional[QuotationStatus] = None,
        customer_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
    ) -> List[Quotation]:
        """
        Lista preventivi, dal più recente.

        Args:
            status: Filtro per stato
            customer_id: Filtro per cliente di origine
            search: Testo cercato in numero e nome cliente
        """
        stmt = select(Quotation)
        if status is not None:
            stmt = stmt.where(Quotation.status == status.value)
        if customer_id is not None:
            stmt = stmt.where(Quotation.customer_id == customer_id)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                or_(
                    Quotation.quotation_number.ilike(pattern),
                    Quotation.customer_name.ilike(pattern),
                )
            )
        stmt = stmt.order_by(Quotation.created_at.desc(), Quotation.quotation_number.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(
        self,
        db: AsyncSession,
        quotation_id: uuid.UUID,
        for_update: bool = False,
    ) -> Quotation:
        """
        Recupera un preventivo con righe, immagini e firme.

        Raises:
            NotFoundError: Preventivo non trovato
        """
        stmt = (
            select(Quotation)
            .where(Quotation.id == quotation_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        quotation = result.scalar_one_or_none()

        if not quotation:
            raise NotFoundError(f"Preventivo {quotation_id} non trovato")

        return quotation

    async def _get_editable(self, db: AsyncSession, quotation_id: uuid.UUID) -> Quotation:
        quotation = await self.get_by_id(db, quotation_id, for_update=True)
        if quotation.is_converted:
            raise InvalidStateError("Il preventivo è già stato convertito e non è modificabile")
        return quotation

    async def _commit(self, db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Errore di integrità durante %s preventivo: %s", action, e)
            raise ConflictError(f"Errore durante {action} del preventivo")

    # ------------------------------------------------------------
    # Scrittura
    # ------------------------------------------------------------
    async def create(self, db: AsyncSession, data: QuotationCreate) -> Quotation:
        """
        Crea un preventivo in bozza.

        Raises:
            ValidationError: cliente, righe o importi non validi
            NotFoundError: cliente o prodotto inesistente
        """
        customer_id, snapshot = await self.builder.resolve_customer(db, data)
        items = await self.builder.build_items(db, data.items, QuotationItem)
        vat_rate = data.vat_rate if data.vat_rate is not None else settings.default_vat_rate
        totals = self.builder.compute_totals(items, data.discount, vat_rate)
        images = self.builder.build_images(data.images)

        today = date.today()
        number = await self.numbering.next_number(db, DocumentType.QUOTATION, today)

        quotation = Quotation(
            quotation_number=number,
            customer_id=customer_id,
            status=QuotationStatus.DRAFT.value,
            vat_rate=vat_rate,
            notes=data.notes,
            valid_until=data.valid_until or today + timedelta(days=settings.quotation_validity_days),
            items=items,
            images=images,
        )
        quotation.set_customer_snapshot(snapshot)
        quotation.apply_totals(totals)

        db.add(quotation)
        await self._commit(db, "la creazione")

        logger.info("Preventivo %s creato per %s (totale %s)", number, snapshot.name, totals.total)
        return await self.get_by_id(db, quotation.id)

    async def update(
        self,
        db: AsyncSession,
        quotation_id: uuid.UUID,
        data: QuotationUpdate,
    ) -> Quotation:
        """
        Aggiorna righe, sconto, IVA, note e scadenza.

        L'istantanea cliente non è modificabile.

        Raises:
            InvalidStateError: preventivo già convertito
        """
        quotation = await self._get_editable(db, quotation_id)
        update_data = data.model_dump(exclude_unset=True)

        if data.items is not None:
            quotation.items = await self.builder.build_items(db, data.items, QuotationItem)
        if "discount" in update_data and data.discount is not None:
            quotation.discount = data.discount
        if "vat_rate" in update_data and data.vat_rate is not None:
            quotation.vat_rate = data.vat_rate
        if "notes" in update_data:
            quotation.notes = data.notes
        if "valid_until" in update_data:
            quotation.valid_until = data.valid_until

        totals = self.builder.compute_totals(quotation.items, quotation.discount, quotation.vat_rate)
        quotation.apply_totals(totals)

        await self._commit(db, "l'aggiornamento")
        logger.info("Preventivo %s aggiornato", quotation.quotation_number)
        return await self.get_by_id(db, quotation_id)

    async def change_status(
        self,
        db: AsyncSession,
        quotation_id: uuid.UUID,
        new_status: QuotationStatus,
    ) -> Quotation:
        """
        Cambia lo stato secondo VALID_TRANSITIONS.

        Raises:
            InvalidStateError: transizione non consentita
        """
        quotation = await self.get_by_id(db, quotation_id, for_update=True)
        current = QuotationStatus(quotation.status)

        if not can_transition(current, new_status):
            raise InvalidStateError(
                f"Transizione di stato non consentita: {current.value} → {new_status.value}"
            )

        quotation.status = new_status.value
        await self._commit(db, "il cambio stato")

        logger.info(
            "Preventivo %s: %s → %s",
            quotation.quotation_number, current.value, new_status.value,
        )
        return await self.get_by_id(db, quotation_id)

    async def delete(self, db: AsyncSession, quotation_id: uuid.UUID) -> None:
        """
        Elimina un preventivo non convertito con righe, immagini e firme.

        Raises:
            InvalidStateError: preventivo già convertito
        """
        quotation = await self._get_editable(db, quotation_id)
        urls = [i.url for i in quotation.images] + [s.image_url for s in quotation.signatures]
        number = quotation.quotation_number

        await db.delete(quotation)
        await self._commit(db, "l'eliminazione")
        await self.attachments.discard_unreferenced(db, urls)

        logger.info("Preventivo %s eliminato", number)


quotation_service = QuotationService()
