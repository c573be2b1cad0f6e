"""
Router per il caricamento file
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

I file caricati sono serviti come statici sotto /uploads e vanno
poi collegati ai documenti con gli endpoint /images.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import CurrentContext
from app.core.exceptions import ValidationError
from app.schemas.attachment import UploadedFile
from app.schemas.common import DataResponse
from app.services.attachment_service import attachment_service
from app.services.storage_service import StoredFile, storage_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/upload",
    tags=["Upload"],
)


async def _store(upload: UploadFile) -> StoredFile:
    # Un byte oltre il limite basta a far scattare il controllo di dimensione
    content = await upload.read(storage_service.max_size + 1)
    return storage_service.save(content, upload.content_type)


@router.post(
    "/single",
    response_model=DataResponse[UploadedFile],
    status_code=status.HTTP_201_CREATED,
    summary="Carica un'immagine",
)
async def upload_single(ctx: CurrentContext, file: UploadFile = File(...)):
    """Carica un'immagine (jpg, png, gif, webp)."""
    stored = await _store(file)
    return {"data": stored}


@router.post(
    "/multiple",
    response_model=DataResponse[List[UploadedFile]],
    status_code=status.HTTP_201_CREATED,
    summary="Carica più immagini",
)
async def upload_multiple(ctx: CurrentContext, files: List[UploadFile] = File(...)):
    """
    Carica più immagini in una sola richiesta.

    Se un file non è valido, quelli già salvati nella stessa richiesta
    vengono rimossi.
    """
    if len(files) > settings.upload_max_files:
        raise ValidationError(f"Massimo {settings.upload_max_files} file per richiesta")

    stored: List[StoredFile] = []
    try:
        for upload in files:
            stored.append(await _store(upload))
    except ValidationError:
        for item in stored:
            storage_service.discard(item.filename)
        raise

    return {"data": stored}


@router.delete(
    "/{filename}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Elimina un file caricato",
)
async def delete_upload(filename: str, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """
    Elimina un file dallo storage.

    I file già collegati a un documento si rimuovono con DELETE /images/{id}.
    """
    await attachment_service.delete_upload(db, filename)
