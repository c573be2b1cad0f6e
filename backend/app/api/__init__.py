"""
API
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from app.api.routes import api_router

__all__ = ["api_router"]
