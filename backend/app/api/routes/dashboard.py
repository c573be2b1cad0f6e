"""
Router per la dashboard
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentContext
from app.schemas.common import DataResponse
from app.schemas.dashboard import DashboardSummary
from app.services.dashboard_service import dashboard_service

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get(
    "/summary",
    response_model=DataResponse[DashboardSummary],
    summary="Riepilogo dashboard",
)
async def get_summary(ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Conteggi, vendite, incassi, classifiche e appuntamenti imminenti."""
    return {"data": await dashboard_service.get_summary(db)}
