"""
Service per la numerazione dei documenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Numeri progressivi per tipo documento e anno, nel formato
{PREFISSO}-{YYYY}-{NNNN} (es. QT-2025-0001, INV-2025-0042).
"""

import logging
from datetime import date
from enum import Enum

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError
from app.models.sequence import DocumentSequence

logger = logging.getLogger(__name__)

MAX_SEQUENCE = 9999


class DocumentType(str, Enum):
    """Tipi di documento numerati."""
    QUOTATION = "quotation"
    INVOICE = "invoice"


def prefix_for(doc_type: DocumentType) -> str:
    if doc_type == DocumentType.QUOTATION:
        return settings.quotation_number_prefix
    return settings.invoice_number_prefix


def format_document_number(prefix: str, year: int, value: int) -> str:
    """Formatta il numero con zero-padding a 4 cifre."""
    return f"{prefix}-{year}-{value:04d}"


class NumberingService:
    """
    Assegna il prossimo numero di un tipo documento.

    La riga contatore (tipo, anno) viene letta con FOR UPDATE, quindi due
    transazioni concorrenti si serializzano sul contatore. Deve essere
    chiamato dentro la transazione che crea il documento: se questa fallisce
    anche l'incremento viene annullato e non restano buchi.
    """

    async def next_number(
        self,
        db: AsyncSession,
        doc_type: DocumentType,
        on_date: date | None = None,
    ) -> str:
        """
        Args:
            db: Sessione database (transazione del chiamante)
            doc_type: Tipo documento
            on_date: Data del documento (default: oggi)

        Returns:
            str: Numero documento formattato

        Raises:
            ConflictError: Contatore creato in parallelo o limite annuo raggiunto
        """
        year = (on_date or date.today()).year

        stmt = (
            select(DocumentSequence)
            .where(
                DocumentSequence.doc_type == doc_type.value,
                DocumentSequence.year == year,
            )
            .with_for_update()
        )
        result = await db.execute(stmt)
        sequence = result.scalar_one_or_none()

        if sequence is None:
            sequence = DocumentSequence(doc_type=doc_type.value, year=year, last_value=0)
            db.add(sequence)

        if sequence.last_value >= MAX_SEQUENCE:
            raise ConflictError(
                f"Limite numerazione {doc_type.value} raggiunto per l'anno {year}"
            )

        sequence.last_value += 1

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Contatore %s/%s creato in parallelo: %s", doc_type.value, year, e)
            raise ConflictError("Numerazione occupata da un'altra operazione, riprovare")

        return format_document_number(prefix_for(doc_type), year, sequence.last_value)


numbering_service = NumberingService()
