"""
Router per il catalogo prodotti
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
from app.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.services.product_service import product_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["Prodotti"],
)


@router.get("", response_model=DataResponse[List[ProductRead]])
async def get_all_products(
    ctx: CurrentContext,
    search: Optional[str] = Query(None, description="Ricerca per nome"),
    include_inactive: bool = Query(False, alias="includeInactive", description="Includi prodotti disattivati"),
    db: AsyncSession = Depends(get_db),
):
    """Recupera il catalogo prodotti attivi."""
    products = await product_service.get_all(db, search, include_inactive)
    return {"data": products}


@router.get("/{id}", response_model=DataResponse[ProductRead])
async def get_product(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Recupera il dettaglio di un prodotto."""
    product = await product_service.get_by_id(db, id)
    return {"data": product}


@router.post("", response_model=DataResponse[ProductRead], status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Crea un nuovo prodotto."""
    product = await product_service.create(db, data)
    await db.commit()
    return {"data": product}


@router.put("/{id}", response_model=DataResponse[ProductRead])
async def update_product(
    id: uuid.UUID,
    data: ProductUpdate,
    ctx: CurrentContext,
    db: AsyncSession = Depends(get_db),
):
    """Aggiorna un prodotto. Le righe dei documenti esistenti non cambiano."""
    product = await product_service.update(db, id, data)
    await db.commit()
    return {"data": product}


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(id: uuid.UUID, ctx: CurrentContext, db: AsyncSession = Depends(get_db)):
    """Soft delete di un prodotto."""
    await product_service.delete(db, id)
    await db.commit()
