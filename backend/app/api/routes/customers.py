"""
Router per l'anagrafica clienti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentContext
from app.schemas.common import DataResponse
from app.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from app.services.customer_service import customer_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/customers",
    tags=["Clienti"],
)


@router.get("", response_model=DataResponse[List[CustomerRead]])
async def get_all_customers(
    ctx: CurrentContext,
    search: Optional[str] = Query(None, description="Ricerca su nome, telefono, email"),
    db: AsyncSession = Depends(get_db),
):
    """Recupera la lista dei clienti."""
    customers = await customer_service.get_all(db, search)
    return {"data": customers}


@router.get("/{id}", response_model=DataResponse[CustomerRead])
async def get_customer(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Recupera il dettaglio di un cliente."""
    customer = await customer_service.get_by_id(db, id)
    return {"data": customer}


@router.post("", response_model=DataResponse[CustomerRead], status_code=status.HTTP_201_CREATED)
async def create_customer(data: CustomerCreate, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Crea un nuovo cliente."""
    customer = await customer_service.create(db, data)
    await db.commit()
    return {"data": customer}


@router.put("/{id}", response_model=DataResponse[CustomerRead])
async def update_customer(
    id: uuid.UUID,
    data: CustomerUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Aggiorna i dati di un cliente. I documenti già emessi non cambiano."""
    customer = await customer_service.update(db, id, data)
    await db.commit()
    return {"data": customer}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Elimina un cliente. Preventivi e fatture mantengono l'istantanea."""
    await customer_service.delete(db, id)
    await db.commit()
