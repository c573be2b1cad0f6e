"""
Service per il salvataggio di immagini e firme
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

I file vengono salvati su disco locale (settings.upload_dir) con nome
casuale e serviti dall'applicazione sotto /uploads.
"""

import base64
import binascii
import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

# Estensione per MIME type accettato
IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

FILENAME_RE = re.compile(r"^[0-9a-f]{32}\.(jpg|png|gif|webp)$")
DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?:;[\w=-]+)*;base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class StoredFile:
    """File salvato nello storage."""

    filename: str
    url: str
    size: int
    content_type: str


def detect_image_type(content: bytes) -> Optional[str]:
    """Riconosce il formato immagine dai primi byte."""
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


def decode_image_data(data: str) -> bytes:
    """
    Decodifica un data URL (data:image/png;base64,...) o base64 semplice.

    Raises:
        ValidationError: payload vuoto o non decodificabile
    """
    if not data or not data.strip():
        raise ValidationError("Immagine mancante")

    payload = data.strip()
    match = DATA_URL_RE.match(payload)
    if match:
        payload = match.group("data")

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Immagine non decodificabile")

    if not content:
        raise ValidationError("Immagine vuota")
    return content


class StorageService:
    """
    Storage su disco locale.

    Attributes:
        base_dir: Cartella di destinazione
        max_size: Dimensione massima in byte
    """

    def __init__(
        self,
        base_dir: Union[str, Path, None] = None,
        max_size: Optional[int] = None,
    ) -> None:
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.max_size = max_size or settings.upload_max_size_mb * 1024 * 1024

    # ------------------------------------------------------------
    # Nomi e percorsi
    # ------------------------------------------------------------
    def path_for(self, filename: str) -> Path:
        """Percorso su disco di un file; rifiuta nomi non generati da noi."""
        if not FILENAME_RE.match(filename):
            raise ValidationError(f"Nome file non valido: {filename}")
        return self.base_dir / filename

    @staticmethod
    def url_for(filename: str) -> str:
        return f"{URL_PREFIX}/{filename}"

    @staticmethod
    def filename_from_url(url: str) -> str:
        """Estrae il nome file da un URL /uploads/<nome>."""
        name = url.rsplit("/", 1)[-1]
        if not url.startswith(URL_PREFIX + "/") or not FILENAME_RE.match(name):
            raise ValidationError(f"URL immagine non valido: {url}")
        return name

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except ValidationError:
            return False

    # ------------------------------------------------------------
    # Scrittura
    # ------------------------------------------------------------
    def save(self, content: bytes, declared_type: Optional[str] = None) -> StoredFile:
        """
        Salva un'immagine.

        Il formato viene verificato sul contenuto, non sull'estensione
        o sul Content-Type dichiarato dal client.

        Raises:
            ValidationError: file vuoto, troppo grande o formato non supportato
        """
        if not content:
            raise ValidationError("File vuoto")
        if len(content) > self.max_size:
            raise ValidationError(
                f"File troppo grande (massimo {self.max_size // (1024 * 1024)} MB)"
            )

        content_type = detect_image_type(content)
        if content_type is None:
            raise ValidationError(
                f"Formato immagine non supportato ({declared_type or 'sconosciuto'})"
            )

        filename = f"{uuid.uuid4().hex}.{IMAGE_TYPES[content_type]}"
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path_for(filename).write_bytes(content)

        logger.info("File salvato: %s (%d byte)", filename, len(content))
        return StoredFile(
            filename=filename,
            url=self.url_for(filename),
            size=len(content),
            content_type=content_type,
        )

    def save_data_url(self, data: str) -> StoredFile:
        """Salva un'immagine ricevuta come data URL o base64."""
        return self.save(decode_image_data(data))

    # ------------------------------------------------------------
    # Cancellazione
    # ------------------------------------------------------------
    def delete(self, filename: str) -> None:
        """
        Elimina un file.

        Raises:
            NotFoundError: il file non esiste
        """
        path = self.path_for(filename)
        if not path.is_file():
            raise NotFoundError(f"File {filename} non trovato")
        path.unlink()
        logger.info("File eliminato: %s", filename)

    def discard(self, filename: str) -> None:
        """
        Elimina un file se presente, senza propagare errori.

        Usato dopo il commit: un file orfano non deve annullare
        un'operazione già confermata sul database.
        """
        try:
            path = self.path_for(filename)
            if path.is_file():
                path.unlink()
                logger.info("File eliminato: %s", filename)
        except (ValidationError, OSError) as e:
            logger.warning("Impossibile eliminare il file %s: %s", filename, e)


storage_service = StorageService()
