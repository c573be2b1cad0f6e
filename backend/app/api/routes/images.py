"""
Router per le immagini collegate ai documenti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentContext
from app.services.attachment_service import attachment_service

router = APIRouter(
    prefix="/images",
    tags=["Immagini"],
)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Elimina un'immagine dal documento e, se non più usato, il file."""
    await attachment_service.delete_image(db, id)
