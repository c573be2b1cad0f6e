"""
Service Layer per l'anagrafica clienti
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.customer import Customer
from app.models.invoice import Invoice
from app.models.quotation import Quotation
from app.schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


class CustomerService:
    """
    Service per le operazioni CRUD sui clienti.

    Le modifiche non si propagano ai documenti, che conservano la propria
    istantanea del cliente.
    """

    async def get_all(self, db: AsyncSession, search: Optional[str] = None) -> List[Customer]:
        """Lista clienti in ordine alfabetico, con ricerca su nome, telefono ed email."""
        query = select(Customer)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.phone.ilike(pattern),
                    Customer.email.ilike(pattern),
                )
            )
        result = await db.execute(query.order_by(Customer.name))
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, id: uuid.UUID) -> Customer:
        """Recupera il dettaglio di un cliente."""
        customer = await db.get(Customer, id)
        if not customer:
            raise NotFoundError(f"Cliente {id} non trovato")
        return customer

    async def create(self, db: AsyncSession, data: CustomerCreate) -> Customer:
        """Crea un nuovo cliente."""
        customer = Customer(**data.model_dump())
        db.add(customer)
        await db.flush()
        await db.refresh(customer)
        logger.info("Cliente creato: %s", customer.name)
        return customer

    async def update(self, db: AsyncSession, id: uuid.UUID, data: CustomerUpdate) -> Customer:
        """Aggiorna i dati di un cliente."""
        customer = await self.get_by_id(db, id)

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("name") is not None:
            update_data["name"] = update_data["name"].strip()
        elif "name" in update_data:
            del update_data["name"]

        for field, value in update_data.items():
            setattr(customer, field, value)

        await db.flush()
        await db.refresh(customer)
        return customer

    async def delete(self, db: AsyncSession, id: uuid.UUID) -> None:
        """
        Elimina un cliente.

        I documenti collegati perdono il riferimento ma mantengono
        l'istantanea dei dati.
        """
        customer = await self.get_by_id(db, id)

        await db.execute(update(Quotation).where(Quotation.customer_id == id).values(customer_id=None))
        await db.execute(update(Invoice).where(Invoice.customer_id == id).values(customer_id=None))
        await db.delete(customer)
        await db.flush()
        logger.info("Cliente eliminato: %s", customer.name)


customer_service = CustomerService()
