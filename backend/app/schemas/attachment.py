"""
Schemas Pydantic per firme, immagini e file caricati
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from app.models.attachment import SignatureType
from app.schemas.common import ApiModel


# -------------------------------------------------------------------
# Firme
# -------------------------------------------------------------------

class SignatureCreate(ApiModel):
    """
    Richiesta di firma su un documento.

    `signature_data` è un data URL (data:image/png;base64,...) prodotto
    dal canvas del frontend, oppure base64 semplice.
    """

    signature_type: SignatureType = Field(
        ...,
        validation_alias=AliasChoices("type", "signatureType", "signature_type"),
        description="Chi firma: shop o customer",
    )
    signature_data: str = Field(
        ...,
        validation_alias=AliasChoices("signatureData", "signature_data", "imageData", "image_data"),
        description="Immagine della firma (data URL o base64)",
    )
    signer_name: str = Field(..., max_length=255, description="Nome del firmatario")


class SignatureRead(ApiModel):
    """Firma registrata."""

    id: uuid.UUID
    signature_type: SignatureType = Field(..., serialization_alias="type")
    image_url: str
    signer_name: str
    signed_at: datetime


# -------------------------------------------------------------------
# Immagini
# -------------------------------------------------------------------

class ImageAttach(ApiModel):
    """Riferimento a un file già caricato da collegare a un documento."""

    url: str = Field(..., min_length=1, max_length=500, description="URL restituito da /upload")
    caption: Optional[str] = Field(None, max_length=500, description="Didascalia")


class ImageAttachRequest(ApiModel):
    """Collegamento di una o più immagini a un documento."""

    images: List[ImageAttach] = Field(..., min_length=1)


class ImageRead(ApiModel):
    """Immagine collegata a un documento."""

    id: uuid.UUID
    url: str
    filename: str
    caption: Optional[str] = None
    created_at: datetime


# -------------------------------------------------------------------
# Upload
# -------------------------------------------------------------------

class UploadedFile(ApiModel):
    """File salvato nello storage."""

    filename: str
    url: str
    size: int
    content_type: str


__all__ = [
    "SignatureCreate",
    "SignatureRead",
    "ImageAttach",
    "ImageAttachRequest",
    "ImageRead",
    "UploadedFile",
]
