"""
Modello SQLAlchemy per i contatori di numerazione documenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base


class DocumentSequence(Base):
    """
    Ultimo numero assegnato per tipo documento e anno.

    La riga viene letta con SELECT ... FOR UPDATE e incrementata nella
    stessa transazione che crea il documento.
    """

    __tablename__ = "document_sequences"

    doc_type: Mapped[str] = mapped_column(
        String(20),
        primary_key=True,
        doc="Tipo documento: quotation, invoice",
    )

    year: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
    )

    last_value: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<DocumentSequence({self.doc_type}/{self.year}={self.last_value})>"
