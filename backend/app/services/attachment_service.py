"""
Service per firme e immagini dei documenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Ordine delle operazioni:
- inserimento: prima il file nello storage, poi il record sul database;
  se il database fallisce il file appena scritto viene rimosso
- cancellazione: prima il record, poi il file dopo il commit
"""

import logging
import uuid
from enum import Enum
from typing import Iterable, List, Union

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from app.models.attachment import DocumentImage, Signature
from app.models.invoice import Invoice
from app.models.quotation import Quotation
from app.schemas.attachment import ImageAttach, SignatureCreate
from app.services.document_builder import DocumentBuilder, document_builder
from app.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    QUOTATION = "quotation"
    INVOICE = "invoice"


Document = Union[Quotation, Invoice]


class AttachmentService:
    """Gestione di firme e immagini collegate a preventivi e fatture."""

    def __init__(
        self,
        storage: StorageService = storage_service,
        builder: DocumentBuilder = document_builder,
    ) -> None:
        self.storage = storage
        self.builder = builder

    async def _get_document(
        self,
        db: AsyncSession,
        kind: DocumentKind,
        document_id: uuid.UUID,
    ) -> Document:
        """Carica il documento bloccandone la riga."""
        model = Quotation if kind == DocumentKind.QUOTATION else Invoice
        stmt = (
            select(model)
            .where(model.id == document_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        document = (await db.execute(stmt)).scalar_one_or_none()
        if document is None:
            label = "Preventivo" if kind == DocumentKind.QUOTATION else "Fattura"
            raise NotFoundError(f"{label} {document_id} non trovato")
        if isinstance(document, Quotation) and document.is_converted:
            raise InvalidStateError("Il preventivo è già stato convertito e non è modificabile")
        return document

    async def _commit(self, db: AsyncSession, new_files: Iterable[str]) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            for filename in new_files:
                self.storage.discard(filename)
            logger.error("Errore di integrità durante il salvataggio allegati: %s", e)
            raise ConflictError("Errore durante il salvataggio dell'allegato")

    # ------------------------------------------------------------
    # Firme
    # ------------------------------------------------------------
    async def add_signature(
        self,
        db: AsyncSession,
        kind: DocumentKind,
        document_id: uuid.UUID,
        data: SignatureCreate,
    ) -> Signature:
        """
        Aggiunge una firma al documento.

        Raises:
            ValidationError: firmatario o immagine mancanti/non validi
            NotFoundError: documento inesistente
            InvalidStateError: firma dello stesso tipo già presente,
                oppure preventivo già convertito
        """
        signer_name = (data.signer_name or "").strip()
        if not signer_name:
            raise ValidationError("Il nome del firmatario è obbligatorio")
        if not data.signature_data or not data.signature_data.strip():
            raise ValidationError("L'immagine della firma è obbligatoria")

        document = await self._get_document(db, kind, document_id)

        signature_type = data.signature_type.value
        if any(s.signature_type == signature_type for s in document.signatures):
            raise InvalidStateError(f"Firma di tipo '{signature_type}' già presente")

        stored = self.storage.save_data_url(data.signature_data)

        signature = Signature(
            signature_type=signature_type,
            image_url=stored.url,
            signer_name=signer_name,
        )
        document.signatures.append(signature)
        await self._commit(db, [stored.filename])

        logger.info(
            "Firma %s aggiunta a %s %s da %s",
            signature_type, kind.value, document_id, signer_name,
        )
        return signature

    # ------------------------------------------------------------
    # Immagini
    # ------------------------------------------------------------
    async def add_images(
        self,
        db: AsyncSession,
        kind: DocumentKind,
        document_id: uuid.UUID,
        images: List[ImageAttach],
    ) -> List[DocumentImage]:
        """
        Collega immagini già caricate a un documento.

        Raises:
            ValidationError: immagine non presente nello storage
            NotFoundError: documento inesistente
        """
        document = await self._get_document(db, kind, document_id)
        records = self.builder.build_images(images)
        document.images.extend(records)
        await self._commit(db, [])

        logger.info("%d immagini collegate a %s %s", len(records), kind.value, document_id)
        return records

    async def delete_image(self, db: AsyncSession, image_id: uuid.UUID) -> None:
        """
        Elimina un'immagine: record e, se non più referenziato, file.

        Raises:
            NotFoundError: immagine inesistente
            InvalidStateError: immagine di un preventivo già convertito
        """
        image = await db.get(DocumentImage, image_id)
        if image is None:
            raise NotFoundError(f"Immagine {image_id} non trovata")

        if image.quotation_id is not None:
            quotation = await db.get(Quotation, image.quotation_id)
            if quotation is not None and quotation.is_converted:
                raise InvalidStateError("Il preventivo è già stato convertito e non è modificabile")

        url = image.url
        await db.delete(image)
        await self._commit(db, [])
        await self.discard_unreferenced(db, [url])
        logger.info("Immagine %s eliminata", image_id)

    async def count_references(self, db: AsyncSession, url: str) -> int:
        """Numero di immagini e firme che puntano al file."""
        images = await db.scalar(
            select(func.count()).select_from(DocumentImage).where(DocumentImage.url == url)
        )
        signatures = await db.scalar(
            select(func.count()).select_from(Signature).where(Signature.image_url == url)
        )
        return int(images or 0) + int(signatures or 0)

    async def delete_upload(self, db: AsyncSession, filename: str) -> None:
        """
        Elimina un file caricato non ancora collegato a documenti.

        Raises:
            NotFoundError: Il file non esiste
            InvalidStateError: Il file è usato da un'immagine o da una firma
        """
        url = self.storage.url_for(filename)
        self.storage.path_for(filename)  # rifiuta nomi non validi
        if await self.count_references(db, url):
            raise InvalidStateError(
                "Il file è collegato a un documento: usare DELETE /images/{id}",
                extra={"filename": filename},
            )
        self.storage.delete(filename)

    async def discard_unreferenced(self, db: AsyncSession, urls: Iterable[str]) -> None:
        """
        Rimuove dallo storage i file non più usati da alcun record.

        La conversione copia i riferimenti alle immagini del preventivo,
        quindi lo stesso file può appartenere a più documenti.
        """
        for url in set(urls):
            if await self.count_references(db, url):
                continue
            try:
                filename = self.storage.filename_from_url(url)
            except ValidationError:
                logger.warning("URL allegato non gestito dallo storage: %s", url)
                continue
            self.storage.discard(filename)


attachment_service = AttachmentService()
