"""
API Routes
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Router aggregato sotto il prefisso configurato (default: /api).
"""

from fastapi import APIRouter

from app.api.routes import (
    appointments,
    auth,
    customers,
    dashboard,
    images,
    invoices,
    products,
    quotations,
    uploads,
)
from app.core.config import settings

api_router = APIRouter(prefix=settings.api_prefix)

# Includi i router dei moduli
api_router.include_router(auth.router)
api_router.include_router(customers.router)
api_router.include_router(products.router)
api_router.include_router(quotations.router)
api_router.include_router(invoices.router)
api_router.include_router(appointments.router)
api_router.include_router(images.router)
api_router.include_router(uploads.router)
api_router.include_router(dashboard.router)

# Esportazione
__all__ = ["api_router"]
