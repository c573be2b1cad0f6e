"""
Schemas Pydantic per il progetto Quotation Manager

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
e serializzazione delle richieste e delle risposte API.
"""

from app.schemas.common import ApiModel, DataResponse, ErrorResponse, Money
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.schemas.token import AuthResponse, TokenPayload, TokenRefresh, TokenResponse
from app.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.schemas.attachment import (
    ImageAttach,
    ImageAttachRequest,
    ImageRead,
    SignatureCreate,
    SignatureRead,
    UploadedFile,
)
from app.schemas.document import LineItemCreate, LineItemRead
from app.schemas.quotation import (
    QuotationCreate,
    QuotationRead,
    QuotationStatusUpdate,
    QuotationUpdate,
)
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceRead,
    InvoiceStatusUpdate,
    PaymentCreate,
    PaymentRead,
)
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from app.schemas.dashboard import DashboardSummary

__all__ = [
    "ApiModel",
    "DataResponse",
    "ErrorResponse",
    "Money",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "TokenPayload",
    "TokenRefresh",
    "TokenResponse",
    "CustomerCreate",
    "CustomerRead",
    "CustomerUpdate",
    "ProductCreate",
    "ProductRead",
    "ProductUpdate",
    "ImageAttach",
    "ImageAttachRequest",
    "ImageRead",
    "SignatureCreate",
    "SignatureRead",
    "UploadedFile",
    "LineItemCreate",
    "LineItemRead",
    "QuotationCreate",
    "QuotationRead",
    "QuotationStatusUpdate",
    "QuotationUpdate",
    "InvoiceCreate",
    "InvoiceRead",
    "InvoiceStatusUpdate",
    "PaymentCreate",
    "PaymentRead",
    "AppointmentCreate",
    "AppointmentRead",
    "AppointmentStatusUpdate",
    "AppointmentUpdate",
    "DashboardSummary",
]
