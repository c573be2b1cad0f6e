"""
Service Layer per il catalogo prodotti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """Service per le operazioni CRUD sui prodotti (eliminazione logica)."""

    async def get_all(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Product]:
        """Lista prodotti in ordine alfabetico."""
        query = select(Product)
        if not include_inactive:
            query = query.where(Product.is_active == True)  # noqa: E712
        if search:
            query = query.where(Product.name.ilike(f"%{search.strip()}%"))
        result = await db.execute(query.order_by(Product.name))
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, id: uuid.UUID) -> Product:
        """Recupera un prodotto, anche se disattivato."""
        product = await db.get(Product, id)
        if not product:
            raise NotFoundError(f"Prodotto {id} non trovato")
        return product

    async def create(self, db: AsyncSession, data: ProductCreate) -> Product:
        """Crea un nuovo prodotto."""
        product = Product(**data.model_dump())
        db.add(product)
        await db.flush()
        await db.refresh(product)
        logger.info("Prodotto creato: %s", product.name)
        return product

    async def update(self, db: AsyncSession, id: uuid.UUID, data: ProductUpdate) -> Product:
        """Aggiorna un prodotto. Le righe dei documenti esistenti non cambiano."""
        product = await self.get_by_id(db, id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "price", "unit", "is_active"):
                continue
            setattr(product, field, value)

        await db.flush()
        await db.refresh(product)
        return product

    async def delete(self, db: AsyncSession, id: uuid.UUID) -> None:
        """Disattiva un prodotto (soft delete)."""
        product = await self.get_by_id(db, id)
        product.is_active = False
        await db.flush()
        logger.info("Prodotto disattivato: %s", product.name)


product_service = ProductService()
