"""
Modelli Database SQLAlchemy
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Import centralizzato di tutti i modelli per create_all e usage generico.

Modelli:
- User: Utenti del sistema
- Customer: Anagrafica clienti
- Product: Catalogo prodotti/servizi
- Quotation, QuotationItem: Preventivi e righe
- Invoice, InvoiceItem, Payment: Fatture, righe e pagamenti
- Appointment: Appuntamenti (installazioni, incassi)
- Signature, DocumentImage: Firme e immagini allegate ai documenti
- DocumentSequence: Contatori numerazione documenti
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


from app.models.user import User, UserRole
from app.models.customer import Customer
from app.models.product import Product
from app.models.quotation import Quotation, QuotationItem, QuotationStatus
from app.models.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from app.models.appointment import Appointment, AppointmentStatus, AppointmentType
from app.models.attachment import DocumentImage, Signature, SignatureType
from app.models.sequence import DocumentSequence

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Customer",
    "Product",
    "Quotation",
    "QuotationItem",
    "QuotationStatus",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Appointment",
    "AppointmentStatus",
    "AppointmentType",
    "DocumentImage",
    "Signature",
    "SignatureType",
    "DocumentSequence",
]
