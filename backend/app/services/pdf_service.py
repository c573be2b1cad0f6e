"""
Service per la generazione di PDF con WeasyPrint + Jinja2.
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import os
from datetime import date, datetime
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.money import format_baht
from app.models.invoice import Invoice
from app.models.quotation import Quotation
from app.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)

# Path alla cartella templates
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

STATUS_LABELS = {
    "draft": "ฉบับร่าง",
    "sent": "ส่งแล้ว",
    "accepted": "อนุมัติ",
    "rejected": "ปฏิเสธ",
    "converted": "แปลงเป็นใบแจ้งหนี้",
    "unpaid": "ยังไม่ชำระ",
    "partial": "ชำระบางส่วน",
    "paid": "ชำระแล้ว",
    "overdue": "เกินกำหนด",
}


def _get_weasyprint():
    """Import lazy di weasyprint: le librerie native servono solo per il PDF."""
    try:
        from weasyprint import CSS, HTML
        return HTML, CSS
    except OSError as e:
        raise RuntimeError(
            "Dipendenze di WeasyPrint non trovate (Pango/GTK). "
            "Installare le librerie di sistema richieste."
        ) from e


def format_date(value: Union[date, datetime, None]) -> str:
    """Data nel formato gg/mm/aaaa."""
    if value is None:
        return "-"
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%d/%m/%Y")


Document = Union[Quotation, Invoice]


class PdfService:
    """
    Genera PDF di preventivi e fatture da un unico template HTML/CSS.

    Il chiamante passa il documento con righe, firme e immagini caricate
    (i servizi li caricano sempre con selectin).
    """

    def __init__(self, storage: StorageService = storage_service) -> None:
        self.storage = storage
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["baht"] = format_baht
        self.env.filters["date"] = format_date

    def _file_uri(self, url: str) -> Optional[str]:
        """URI file:// dell'allegato, None se non gestito dallo storage."""
        try:
            filename = self.storage.filename_from_url(url)
        except ValidationError:
            return None
        path = self.storage.path_for(filename)
        return path.resolve().as_uri() if path.is_file() else None

    def build_context(self, document: Document) -> dict:
        if isinstance(document, Quotation):
            kind = "quotation"
            title = "ใบเสนอราคา"
            number = document.quotation_number
            status = document.status
        else:
            kind = "invoice"
            title = "ใบแจ้งหนี้"
            number = document.invoice_number
            status = document.status

        signatures = {
            s.signature_type: {
                "signer_name": s.signer_name,
                "signed_at": s.signed_at,
                "src": self._file_uri(s.image_url),
            }
            for s in document.signatures
        }
        images = [
            {"src": src, "caption": i.caption}
            for i in document.images
            if (src := self._file_uri(i.url)) is not None
        ]

        return {
            "kind": kind,
            "title": title,
            "number": number,
            "status": status,
            "status_label": STATUS_LABELS.get(status, status),
            "document": document,
            "customer": document.customer,
            "items": document.items,
            "signatures": signatures,
            "images": images,
            "company": {
                "name": settings.company_name,
                "address": settings.company_address,
                "tax_id": settings.company_tax_id,
                "phone": settings.company_phone,
                "email": settings.company_email,
            },
            "generated_at": datetime.now(),
        }

    def render_html(self, document: Document) -> str:
        """Render HTML del documento (usato anche per l'anteprima)."""
        template = self.env.get_template("document_template.html")
        return template.render(**self.build_context(document))

    def generate_pdf(self, document: Document) -> bytes:
        """
        Genera il PDF del documento.

        Returns:
            bytes: PDF binario pronto per il download
        """
        HTML, CSS = _get_weasyprint()

        html_content = self.render_html(document)
        css = CSS(filename=os.path.join(TEMPLATES_DIR, "document_style.css"))
        pdf = HTML(string=html_content, base_url=TEMPLATES_DIR).write_pdf(stylesheets=[css])

        logger.info("PDF generato per %s", getattr(document, "quotation_number", None) or document.invoice_number)
        return pdf


pdf_service = PdfService()
